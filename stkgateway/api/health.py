"""
Health Check Endpoints
"""

from flask import Blueprint, jsonify
from datetime import datetime, timezone
import os
import psutil

from stkgateway.extensions import get_gateway

health_bp = Blueprint('health', __name__)


def _now():
    return datetime.now(timezone.utc).isoformat()


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Basic health check endpoint

    Returns:
        200 with token cache, registry and process details
    """
    gateway = get_gateway()
    process = psutil.Process(os.getpid())

    return jsonify({
        'status': 'healthy',
        'timestamp': _now(),
        'service': 'stk-gateway',
        'environment': gateway.client.environment,
        'checks': {
            'token_cache': gateway.token_cache.snapshot(),
            'registry': gateway.registry.counts(),
            'webhook_configured': gateway.notifier.enabled
        },
        'process': {
            'pid': process.pid,
            'threads': process.num_threads(),
            'memory_rss': process.memory_info().rss
        }
    }), 200


@health_bp.route('/health/live', methods=['GET'])
def liveness_probe():
    """
    Liveness probe
    Returns 200 if the application is running
    """
    return jsonify({
        'status': 'alive',
        'timestamp': _now()
    }), 200
