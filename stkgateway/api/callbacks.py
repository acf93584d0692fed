"""
Callback API Endpoint
Receives STK push results from Daraja
"""

from flask import Blueprint, request, jsonify

from stkgateway.extensions import get_gateway
from stkgateway.schemas.callback_schema import CallbackAckSchema
from stkgateway.services.callback_service import CALLBACK_ACK
from stkgateway.utils.logger import get_logger

callbacks_bp = Blueprint('callbacks', __name__)
logger = get_logger(__name__)

ack_schema = CallbackAckSchema()


@callbacks_bp.route('/callback', methods=['POST'])
def receive_callback():
    """
    Receive an STK push result from Daraja

    Body:
        {"Body": {"stkCallback": {...}}} or the bare stkCallback object

    Always answers 200 with the same acknowledgement so Daraja does not retry.
    """
    payload = request.get_json(silent=True)

    try:
        get_gateway().callbacks.handle(payload)
    except Exception:
        logger.exception('Error processing callback')

    return jsonify(ack_schema.dump(CALLBACK_ACK)), 200
