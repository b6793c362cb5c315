"""Transaction management use cases"""
from .transaction_service import (
    TransactionService,
    TRANSACTION_BY_ID_CACHE,
    TRANSACTION_BY_TRADE_NO_CACHE,
)
from .dtos import (
    CreateTransactionCommandDTO,
    UpdateTransactionCommandDTO,
    TransactionDTO,
    PagedResultDTO,
)

__all__ = [
    "TransactionService",
    "TRANSACTION_BY_ID_CACHE",
    "TRANSACTION_BY_TRADE_NO_CACHE",
    "CreateTransactionCommandDTO",
    "UpdateTransactionCommandDTO",
    "TransactionDTO",
    "PagedResultDTO",
]
