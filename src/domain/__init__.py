from .base import BaseModel
from .transaction import Transaction, TransactionType, DebitCredit, TransactionStatus
from .exceptions import (
    TransactionError,
    TransactionNotFoundError,
    DuplicatedTransactionError,
    ValidationFailureError,
    StoreUnavailableError,
)

__all__ = [
    "BaseModel",
    "Transaction",
    "TransactionType",
    "DebitCredit",
    "TransactionStatus",
    "TransactionError",
    "TransactionNotFoundError",
    "DuplicatedTransactionError",
    "ValidationFailureError",
    "StoreUnavailableError",
]
