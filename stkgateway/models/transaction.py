from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class TransactionStatus(str, Enum):
    PENDING = 'PENDING'
    SUCCESS = 'SUCCESS'
    FAILED = 'FAILED'


def _utcnow():
    return datetime.now(timezone.utc)


@dataclass
class Transaction:
    """One STK push attempt, keyed by the provider's CheckoutRequestID."""

    checkout_request_id: str
    registration_id: str
    phone: str
    email: str
    referral_code: Optional[str] = None
    amount: Any = None
    status: TransactionStatus = TransactionStatus.PENDING

    # Set by the callback
    receipt: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None

    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status != TransactionStatus.PENDING

    def to_dict(self):
        return {
            'checkout_request_id': self.checkout_request_id,
            'registration_id': self.registration_id,
            'phone': self.phone,
            'email': self.email,
            'referral_code': self.referral_code,
            'amount': self.amount,
            'status': self.status.value,
            'receipt': self.receipt,
            'raw': self.raw,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Transaction {self.checkout_request_id} - {self.status.value}>'
