"""Exception hierarchy for transaction operations.

Every error carries a stable ``code`` used by the API layer when
rendering the error body.
"""

from typing import Dict, Optional


class TransactionError(Exception):
    """Base exception for all transaction errors."""

    code = "TRANSACTION_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class TransactionNotFoundError(TransactionError):
    """Raised when a lookup by id or trade number misses both cache and store."""

    code = "TRANSACTION_NOT_FOUND"


class DuplicatedTransactionError(TransactionError):
    """Raised when an insert violates trade number uniqueness."""

    code = "DUPLICATED_TRANSACTION"


class ValidationFailureError(TransactionError):
    """Raised when malformed input reaches the service layer."""

    code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        validation_errors: Optional[Dict[str, str]] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message, reason=reason)
        self.validation_errors = validation_errors or {}


class StoreUnavailableError(TransactionError):
    """Raised when the backing store cannot be reached."""

    code = "STORE_UNAVAILABLE"
