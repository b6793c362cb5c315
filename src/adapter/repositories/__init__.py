from .transaction_repository import SqlAlchemyTransactionRepository

__all__ = [
    "SqlAlchemyTransactionRepository",
]
