from flask import Blueprint, request, jsonify
from marshmallow import ValidationError

from stkgateway.errors import ConfigurationError, PaymentNotFound
from stkgateway.errors import ValidationError as RequestValidationError
from stkgateway.extensions import get_gateway
from stkgateway.providers import DarajaError
from stkgateway.schemas.payment_schema import (
    StkPushRequestSchema,
    StkPushResponseSchema,
    TransactionStatusSchema
)
from stkgateway.utils.logger import get_logger

payments_bp = Blueprint('payments', __name__)
logger = get_logger(__name__)

stk_push_schema = StkPushRequestSchema()
stk_push_response_schema = StkPushResponseSchema()
status_schema = TransactionStatusSchema()


@payments_bp.route('/stkpush', methods=['POST'])
def stk_push():
    """
    Trigger an STK push prompt

    Body:
        {
            "registration_id": "REG-001",
            "phone": "0712345678",
            "email": "customer@example.com",
            "amount": 1,
            "referral_code": "FRIEND-01"   // optional
        }
    """
    try:
        data = stk_push_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.warning(f'STK push validation error: {e.messages}')
        raise RequestValidationError('registration_id, phone, and email required')

    try:
        result = get_gateway().payments.initiate_stk_push(
            registration_id=data['registration_id'],
            phone=data['phone'],
            email=data['email'],
            amount=data.get('amount'),
            referral_code=data.get('referral_code')
        )

    except (DarajaError, ConfigurationError) as e:
        detail = e.detail if isinstance(e, DarajaError) else e.message
        logger.error(f'Error in /api/stkpush: {detail}')
        return jsonify({
            'message': 'STK Push failed',
            'error': detail
        }), 500

    if not result.accepted:
        return jsonify(result.raw), 500

    return jsonify(stk_push_response_schema.dump({
        'message': 'STK Push initiated',
        'CheckoutRequestID': result.checkout_request_id,
        'raw': result.raw
    })), 200


@payments_bp.route('/status', methods=['GET'])
def payment_status():
    """
    Poll the status of an STK push

    Query Parameters:
        - checkoutRequestID: CheckoutRequestID returned by /api/stkpush
    """
    checkout_request_id = request.args.get('checkoutRequestID')
    if not checkout_request_id:
        raise RequestValidationError('checkoutRequestID required')

    transaction = get_gateway().registry.get(checkout_request_id)
    if transaction is None:
        raise PaymentNotFound('not found')

    return jsonify(status_schema.dump(transaction)), 200
