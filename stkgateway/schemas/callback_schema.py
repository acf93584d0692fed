"""
Callback Schemas
"""

from marshmallow import Schema, fields


class CallbackAckSchema(Schema):
    """Fixed acknowledgement returned to Daraja for every callback"""
    ResultCode = fields.Int(dump_only=True)
    ResultDesc = fields.Str(dump_only=True)


class WebhookNotificationSchema(Schema):
    """Flattened transaction summary posted to the downstream webhook"""
    email = fields.Str(dump_only=True)
    registration_id = fields.Str(dump_only=True)
    phone_number = fields.Raw(dump_only=True)
    amount_paid = fields.Raw(dump_only=True)
    mpesa_code = fields.Raw(dump_only=True)
    transaction_timestamp = fields.Str(dump_only=True)
    referral_code = fields.Str(dump_only=True)
