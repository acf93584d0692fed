import os

from flask import Flask, jsonify
from flask_cors import CORS

from stkgateway.config import config
from stkgateway.errors import AppError
from stkgateway.extensions import Gateway, socketio
from stkgateway.utils.logger import configure_app_logging, RequestLogger, get_logger

logger = get_logger(__name__)


def create_app(config_name=None):
    """Application factory pattern"""
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(
        __name__,
        static_folder='static/assets',
        static_url_path='/assets'
    )

    # Load configuration
    app.config.from_object(config.get(config_name, config['default']))

    # Logging
    configure_app_logging(app)
    RequestLogger(app)

    # Process-wide state and services
    Gateway(app)

    # Initialize extensions
    socketio.init_app(app, cors_allowed_origins="*")
    CORS(app)

    # Register blueprints
    from stkgateway.api import register_blueprints
    register_blueprints(app)

    # Error handlers
    register_error_handlers(app)

    logger.info(f'STK gateway created ({config_name}, Daraja {app.config.get("DARAJA_ENV")})')

    return app


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify({'message': error.message}), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'message': 'not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f'Unhandled error: {error}')
        return jsonify({'message': 'Something broke!'}), 500
