import os
from stkgateway import create_app, socketio

app = create_app(os.getenv('FLASK_ENV', 'development'))

@app.shell_context_processor
def make_shell_context():
    from stkgateway.extensions import get_gateway
    gateway = get_gateway()
    return {
        'gateway': gateway,
        'registry': gateway.registry,
        'token_cache': gateway.token_cache
    }

if __name__ == '__main__':
    socketio.run(
        app,
        debug=app.config.get('DEBUG', False),
        host='0.0.0.0',
        port=app.config['PORT'],
        allow_unsafe_werkzeug=True
    )
