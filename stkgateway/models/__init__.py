from stkgateway.models.transaction import Transaction, TransactionStatus

__all__ = ['Transaction', 'TransactionStatus']
