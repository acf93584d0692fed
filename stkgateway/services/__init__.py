"""
Services Package
"""

from stkgateway.services.token_cache import AccessToken, AccessTokenCache
from stkgateway.services.registry import PaymentRegistry
from stkgateway.services.notification_service import WebhookNotifier
from stkgateway.services.payment_service import PaymentService, StkPushResult
from stkgateway.services.callback_service import CallbackService, CALLBACK_ACK

__all__ = [
    'AccessToken',
    'AccessTokenCache',
    'PaymentRegistry',
    'WebhookNotifier',
    'PaymentService',
    'StkPushResult',
    'CallbackService',
    'CALLBACK_ACK'
]
