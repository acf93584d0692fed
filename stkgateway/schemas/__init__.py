"""
Schemas Package
Marshmallow schemas for request/response validation
"""

from stkgateway.schemas.payment_schema import (
    StkPushRequestSchema,
    StkPushResponseSchema,
    TransactionStatusSchema
)
from stkgateway.schemas.callback_schema import (
    CallbackAckSchema,
    WebhookNotificationSchema
)

__all__ = [
    'StkPushRequestSchema',
    'StkPushResponseSchema',
    'TransactionStatusSchema',
    'CallbackAckSchema',
    'WebhookNotificationSchema'
]
