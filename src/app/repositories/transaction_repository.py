"""Transaction Repository Interface

Defines the contract for transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.transaction import Transaction


class TransactionRepository(ABC):
    """
    Repository interface for Transaction persistence

    A plain keyed table: no caching logic lives behind this interface.
    Uniqueness of trade_no is enforced by the store.
    """

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction

        Args:
            transaction: Transaction entity to persist (id must be unset)

        Returns:
            Created Transaction with generated ID

        Raises:
            DuplicatedTransactionError: If trade_no already exists
            StoreUnavailableError: If the database cannot be reached
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """
        Retrieve transaction by ID

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_trade_no(self, trade_no: str) -> Optional[Transaction]:
        """
        Retrieve transaction by trade number

        Args:
            trade_no: 18-digit trade number

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, transaction: Transaction) -> Transaction:
        """
        Update an existing transaction by ID

        Args:
            transaction: Transaction entity carrying the full new state

        Returns:
            Persisted Transaction

        Raises:
            TransactionNotFoundError: If no row has this ID
        """
        pass

    @abstractmethod
    async def delete(self, transaction: Transaction) -> None:
        """
        Delete a transaction

        Args:
            transaction: Transaction to delete (matched by ID)
        """
        pass

    @abstractmethod
    async def list_paginated(
        self, page: int = 0, size: int = 20
    ) -> tuple[list[Transaction], int]:
        """
        Retrieve one page of transactions ordered by created_at DESC

        Args:
            page: Zero-based page number
            size: Page size

        Returns:
            Tuple of (list of Transaction, total count)
        """
        pass
