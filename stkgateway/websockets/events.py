from flask_socketio import emit, join_room, leave_room
from stkgateway.extensions import socketio
from stkgateway.models import Transaction
from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)


def _room(checkout_request_id):
    return f'checkout_{checkout_request_id}'


@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    logger.debug('Client connected')
    emit('connected', {'message': 'Connected to STK gateway'})


@socketio.on('disconnect')
def handle_disconnect(*args):
    """Handle client disconnection"""
    logger.debug('Client disconnected')


@socketio.on('subscribe_checkout')
def handle_subscribe_checkout(data):
    """Subscribe to updates for one CheckoutRequestID"""
    checkout_request_id = (data or {}).get('checkout_request_id')
    if checkout_request_id:
        room = _room(checkout_request_id)
        join_room(room)
        emit('subscribed', {
            'message': f'Subscribed to checkout {checkout_request_id}',
            'room': room
        })


@socketio.on('unsubscribe_checkout')
def handle_unsubscribe_checkout(data):
    """Unsubscribe from updates for one CheckoutRequestID"""
    checkout_request_id = (data or {}).get('checkout_request_id')
    if checkout_request_id:
        leave_room(_room(checkout_request_id))
        emit('unsubscribed', {
            'message': f'Unsubscribed from checkout {checkout_request_id}'
        })


def emit_transaction_update(transaction: Transaction, event_type: str):
    """
    Emit transaction update to subscribed clients

    Args:
        transaction: Transaction object
        event_type: Type of event (e.g., 'payment.completed')
    """
    socketio.emit('transaction_update', {
        'event_type': event_type,
        'transaction': transaction.to_dict()
    }, to=_room(transaction.checkout_request_id))
