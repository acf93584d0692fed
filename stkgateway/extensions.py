from flask import current_app
from flask_socketio import SocketIO

from stkgateway.providers import build_daraja_client
from stkgateway.services import (
    AccessTokenCache,
    PaymentRegistry,
    WebhookNotifier,
    PaymentService,
    CallbackService
)

socketio = SocketIO()


class Gateway:
    """Owns the process-wide token cache and registry and the services built on them"""

    def __init__(self, app=None):
        self.client = None
        self.token_cache = None
        self.registry = None
        self.notifier = None
        self.payments = None
        self.callbacks = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from stkgateway.websockets.events import emit_transaction_update

        cfg = app.config
        self.client = build_daraja_client(cfg)
        self.token_cache = AccessTokenCache(
            self.client.fetch_access_token,
            margin=cfg.get('TOKEN_EXPIRY_MARGIN', AccessTokenCache.DEFAULT_MARGIN)
        )
        self.registry = PaymentRegistry()
        self.notifier = WebhookNotifier(
            cfg.get('MAKE_WEBHOOK_URL'),
            timeout=cfg.get('WEBHOOK_TIMEOUT', 10),
            eager=cfg.get('NOTIFY_EAGER', False)
        )
        self.payments = PaymentService(self.client, self.token_cache, self.registry)
        self.callbacks = CallbackService(
            self.registry,
            self.notifier,
            referral_prefix=cfg.get('REFERRAL_CODE_PREFIX', 'GD2025-'),
            on_update=emit_transaction_update
        )

        app.extensions['stkgateway'] = self


def get_gateway() -> Gateway:
    """Gateway bound to the current Flask app"""
    return current_app.extensions['stkgateway']
