"""
Payment Registry
In-memory store of STK push transactions keyed by CheckoutRequestID
"""

import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stkgateway.models import Transaction, TransactionStatus
from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)


class PaymentRegistry:
    """
    Source of truth for the status endpoint.

    Records live for the lifetime of the process. A record leaves PENDING
    exactly once; later updates for the same id are ignored.
    """

    def __init__(self):
        self._payments: Dict[str, Transaction] = {}
        self._lock = threading.Lock()

    def create(
            self,
            checkout_request_id: str,
            registration_id: str,
            phone: str,
            email: str,
            referral_code: Optional[str] = None,
            amount: Any = None
    ) -> Transaction:
        """Register a PENDING transaction, replacing any record with the same id."""
        transaction = Transaction(
            checkout_request_id=checkout_request_id,
            registration_id=registration_id,
            phone=phone,
            email=email,
            referral_code=referral_code,
            amount=amount
        )
        with self._lock:
            if checkout_request_id in self._payments:
                logger.warning(f'Replacing existing record for {checkout_request_id}')
            self._payments[checkout_request_id] = transaction
        return transaction

    def get(self, checkout_request_id: Optional[str]) -> Optional[Transaction]:
        if not checkout_request_id:
            return None
        with self._lock:
            return self._payments.get(checkout_request_id)

    def __contains__(self, checkout_request_id) -> bool:
        with self._lock:
            return checkout_request_id in self._payments

    def __len__(self) -> int:
        with self._lock:
            return len(self._payments)

    def mark_success(
            self,
            checkout_request_id: str,
            receipt: Optional[str],
            amount: Any = None,
            phone: Any = None
    ) -> Optional[Transaction]:
        """
        Move a PENDING record to SUCCESS.

        amount and phone overwrite the stored values only when given.

        Returns:
            The updated transaction, or None if unknown or already terminal
        """
        with self._lock:
            transaction = self._pending(checkout_request_id)
            if transaction is None:
                return None

            transaction.status = TransactionStatus.SUCCESS
            transaction.receipt = receipt
            if amount is not None:
                transaction.amount = amount
            if phone is not None:
                transaction.phone = phone
            transaction.updated_at = datetime.now(timezone.utc)
            return transaction

    def mark_failed(self, checkout_request_id: str, raw: Any) -> Optional[Transaction]:
        """
        Move a PENDING record to FAILED, keeping the raw callback for diagnostics.

        Returns:
            The updated transaction, or None if unknown or already terminal
        """
        with self._lock:
            transaction = self._pending(checkout_request_id)
            if transaction is None:
                return None

            transaction.status = TransactionStatus.FAILED
            transaction.raw = raw
            transaction.updated_at = datetime.now(timezone.utc)
            return transaction

    def counts(self) -> Dict[str, int]:
        with self._lock:
            counter = Counter(t.status.value for t in self._payments.values())
        return {
            'total': sum(counter.values()),
            'pending': counter.get(TransactionStatus.PENDING.value, 0),
            'success': counter.get(TransactionStatus.SUCCESS.value, 0),
            'failed': counter.get(TransactionStatus.FAILED.value, 0)
        }

    def _pending(self, checkout_request_id: str) -> Optional[Transaction]:
        # caller holds the lock
        transaction = self._payments.get(checkout_request_id)
        if transaction is None:
            return None
        if transaction.is_terminal:
            logger.warning(
                f'Ignoring update for {checkout_request_id}: already {transaction.status.value}'
            )
            return None
        return transaction
