"""
Callback Service
Applies Daraja STK callbacks to the payment registry
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from stkgateway.models import Transaction
from stkgateway.providers import StkCallback, parse_stk_callback
from stkgateway.schemas.callback_schema import WebhookNotificationSchema
from stkgateway.services.notification_service import WebhookNotifier
from stkgateway.services.registry import PaymentRegistry
from stkgateway.utils.codes import generate_referral_code
from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)

notification_schema = WebhookNotificationSchema()

# Fixed body returned to Daraja for every callback
CALLBACK_ACK = {'ResultCode': 0, 'ResultDesc': 'Accepted'}


class CallbackService:
    """Service for handling STK push results"""

    def __init__(
            self,
            registry: PaymentRegistry,
            notifier: WebhookNotifier,
            referral_prefix: str = 'GD2025-',
            on_update: Optional[Callable[[Transaction, str], None]] = None
    ):
        """
        Args:
            registry: Payment registry to update
            notifier: Downstream webhook notifier
            referral_prefix: Prefix for generated referral codes
            on_update: Called with (transaction, event_type) after each status change
        """
        self.registry = registry
        self.notifier = notifier
        self.referral_prefix = referral_prefix
        self.on_update = on_update

    def handle(self, payload: Any) -> Optional[Transaction]:
        """
        Process one callback body

        Returns:
            The updated transaction, or None when nothing changed
        """
        callback = parse_stk_callback(payload)
        checkout_request_id = callback.checkout_request_id

        if not checkout_request_id or checkout_request_id not in self.registry:
            logger.warning(f'Unknown CheckoutRequestID in callback: {checkout_request_id}')
            return None

        if callback.succeeded:
            return self._handle_success(callback)
        return self._handle_failure(callback)

    def _handle_success(self, callback: StkCallback) -> Optional[Transaction]:
        meta = callback.metadata
        receipt = meta.get('MpesaReceiptNumber')

        transaction = self.registry.mark_success(
            callback.checkout_request_id,
            receipt=receipt,
            amount=meta.get('Amount'),
            phone=meta.get('PhoneNumber')
        )
        if transaction is None:
            return None

        logger.info(f'Payment {transaction.checkout_request_id} completed, receipt {receipt}')

        # Only sent downstream, never stored on the record
        referral_code = generate_referral_code(self.referral_prefix)

        if self.notifier.enabled:
            self.notifier.notify(self.build_notification(transaction, referral_code))

        self._publish(transaction, 'payment.completed')
        return transaction

    def _handle_failure(self, callback: StkCallback) -> Optional[Transaction]:
        transaction = self.registry.mark_failed(callback.checkout_request_id, raw=callback.raw)
        if transaction is None:
            return None

        logger.info(
            f'Payment {transaction.checkout_request_id} failed: '
            f'{callback.result_code} {callback.result_desc}'
        )
        self._publish(transaction, 'payment.failed')
        return transaction

    @staticmethod
    def build_notification(transaction: Transaction, referral_code: str) -> dict:
        timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds')
        return notification_schema.dump({
            'email': transaction.email,
            'registration_id': transaction.registration_id,
            'phone_number': transaction.phone,
            'amount_paid': transaction.amount,
            'mpesa_code': transaction.receipt,
            'transaction_timestamp': timestamp.replace('+00:00', 'Z'),
            'referral_code': referral_code
        })

    def _publish(self, transaction: Transaction, event_type: str) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(transaction, event_type)
        except Exception:
            logger.exception(f'Failed to publish {event_type} for {transaction.checkout_request_id}')
