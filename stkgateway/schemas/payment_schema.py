from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

_not_blank = validate.Length(min=1)


class StkPushRequestSchema(Schema):
    """STK push initiation request"""

    class Meta:
        unknown = EXCLUDE

    registration_id = fields.Str(required=True, validate=_not_blank)
    phone = fields.Str(required=True, validate=_not_blank)
    email = fields.Str(required=True, validate=_not_blank)
    referral_code = fields.Str(required=False, allow_none=True, load_default=None)
    amount = fields.Raw(required=False, allow_none=True, load_default=None)

    @pre_load
    def coerce_identifiers(self, data, **kwargs):
        # Form posts sometimes send phone / registration id as numbers
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ('registration_id', 'phone'):
            if isinstance(data.get(key), (int, float)) and not isinstance(data.get(key), bool):
                data[key] = str(data[key])
        return data


class StkPushResponseSchema(Schema):
    """Response returned once Daraja accepts the push"""
    message = fields.Str(dump_only=True)
    CheckoutRequestID = fields.Str(dump_only=True)
    raw = fields.Raw(dump_only=True)


class TransactionStatusSchema(Schema):
    """Status poll response"""
    status = fields.Function(lambda t: t.status.value, dump_only=True)
    receipt = fields.Raw(dump_only=True)
    raw = fields.Raw(dump_only=True)
