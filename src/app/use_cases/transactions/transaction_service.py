"""TransactionService Use Case

CRUD operations on banking transactions with a cache-aside layer keyed
two ways: by id and by trade number.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any, Dict, Optional

from src.app.repositories.transaction_repository import TransactionRepository
from src.app.services.cache_manager import CacheManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import TransactionNotFoundError, ValidationFailureError
from src.domain.transaction import Transaction, TransactionStatus
from .dtos import (
    CreateTransactionCommandDTO,
    UpdateTransactionCommandDTO,
    TransactionDTO,
    PagedResultDTO,
)

logger = logging.getLogger(__name__)

TRANSACTION_BY_ID_CACHE = "transaction-by-id"
TRANSACTION_BY_TRADE_NO_CACHE = "transaction-by-tradeno"

_TRADE_NO_RE = re.compile(r"\d{18}")

# Upper bound of the BIGINT primary key
MAX_TRANSACTION_ID = 2 ** 63 - 1

# Patch fields backed by NOT NULL columns
_NON_NULLABLE_PATCH_FIELDS = (
    "account_number",
    "account_name",
    "payee_account",
    "payee_name",
    "amount",
    "currency",
    "type",
    "debit_credit",
)


class TransactionService:
    """
    Use Case: Manage banking transactions

    Cache strategy (cache-aside, two independent caches):
    - Reads check their own cache first; on a miss the store is read and
      ONLY that cache is populated (no cross-population)
    - A miss fills the cache only if no update or delete evicted the key
      while the store read was in flight (token + put_if_unchanged)
    - Create writes nothing to the cache; the first read populates it
    - Update and delete mutate and commit the store first, then evict the
      record from BOTH caches, so neither key can serve a stale copy
    - Listing always reads the store (pages change on every write)

    Concurrent updates to the same record are last-write-wins; no
    optimistic or pessimistic locking is applied.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        cache_manager: CacheManager,
        max_page_size: int = 100,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.cache_manager = cache_manager
        self.max_page_size = max_page_size

    async def create_transaction(self, command: CreateTransactionCommandDTO) -> TransactionDTO:
        """
        Create a transaction with status PENDING

        Raises:
            DuplicatedTransactionError: If the trade number already exists
            ValidationFailureError: If the command is missing or malformed
        """
        if command is None:
            raise ValidationFailureError("Transaction payload is required")
        self._validate_trade_no(command.trade_no)

        transaction = Transaction(
            **command.model_dump(),
            status=TransactionStatus.PENDING,
            created_at=datetime.utcnow(),
            updated_at=None,
        )

        try:
            created = await self.transaction_repo.create(transaction)
            result = TransactionDTO.model_validate(created)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                "Failed to create transaction, trade number %s, error: %s",
                command.trade_no, e, exc_info=True,
            )
            raise

        logger.info(
            "Transaction created successfully, id %s, trade number %s",
            result.id, result.trade_no,
        )
        return result

    async def get_transaction_by_id(self, transaction_id: int) -> TransactionDTO:
        """
        Get a transaction by id (read-through on transaction-by-id)

        Raises:
            TransactionNotFoundError: If no transaction has this id
        """
        self._validate_id(transaction_id)

        cached = self.cache_manager.get(TRANSACTION_BY_ID_CACHE, transaction_id)
        if cached is not None:
            logger.debug("Cache hit for transaction ID %s", transaction_id)
            return cached.model_copy()

        logger.info("Getting transaction by ID %s", transaction_id)
        token = self.cache_manager.token(TRANSACTION_BY_ID_CACHE, transaction_id)
        transaction = await self.transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(f"Transaction not found with ID: {transaction_id}")

        result = TransactionDTO.model_validate(transaction)
        self.cache_manager.put_if_unchanged(TRANSACTION_BY_ID_CACHE, transaction_id, token, result)
        return result.model_copy()

    async def get_transaction_by_trade_no(self, trade_no: str) -> TransactionDTO:
        """
        Get a transaction by trade number (read-through on transaction-by-tradeno)

        Raises:
            TransactionNotFoundError: If no transaction has this trade number
        """
        self._validate_trade_no(trade_no)

        cached = self.cache_manager.get(TRANSACTION_BY_TRADE_NO_CACHE, trade_no)
        if cached is not None:
            logger.debug("Cache hit for trade number %s", trade_no)
            return cached.model_copy()

        logger.info("Getting transaction by trade number %s", trade_no)
        token = self.cache_manager.token(TRANSACTION_BY_TRADE_NO_CACHE, trade_no)
        transaction = await self.transaction_repo.get_by_trade_no(trade_no)
        if transaction is None:
            raise TransactionNotFoundError(f"Transaction not found with TradeNo: {trade_no}")

        result = TransactionDTO.model_validate(transaction)
        self.cache_manager.put_if_unchanged(TRANSACTION_BY_TRADE_NO_CACHE, trade_no, token, result)
        return result.model_copy()

    async def update_transaction_by_id(
        self, transaction_id: int, command: UpdateTransactionCommandDTO
    ) -> TransactionDTO:
        """
        Update a transaction resolved by id

        Raises:
            TransactionNotFoundError: If no transaction has this id
            ValidationFailureError: If the patch is missing or nulls a required field
        """
        patch = self._patch_fields(command)
        current = await self.get_transaction_by_id(transaction_id)
        return await self._update(current, patch)

    async def update_transaction_by_trade_no(
        self, trade_no: str, command: UpdateTransactionCommandDTO
    ) -> TransactionDTO:
        """
        Update a transaction resolved by trade number

        Raises:
            TransactionNotFoundError: If no transaction has this trade number
            ValidationFailureError: If the patch is missing or nulls a required field
        """
        patch = self._patch_fields(command)
        current = await self.get_transaction_by_trade_no(trade_no)
        return await self._update(current, patch)

    async def delete_transaction_by_id(self, transaction_id: int) -> None:
        """
        Delete a transaction resolved by id

        Raises:
            TransactionNotFoundError: If no transaction has this id
        """
        current = await self.get_transaction_by_id(transaction_id)
        await self._delete(current)
        logger.info("Transaction deleted successfully by ID %s", transaction_id)

    async def delete_transaction_by_trade_no(self, trade_no: str) -> None:
        """
        Delete a transaction resolved by trade number

        Raises:
            TransactionNotFoundError: If no transaction has this trade number
        """
        current = await self.get_transaction_by_trade_no(trade_no)
        await self._delete(current)
        logger.info("Transaction deleted successfully by trade number %s", trade_no)

    async def list_transactions(self, page: int = 0, size: int = 20) -> PagedResultDTO:
        """
        List transactions, most recent first. Never cached.

        Raises:
            ValidationFailureError: If page < 0 or size outside 1..max_page_size
        """
        self._validate_page(page, size)
        logger.info("Getting transaction list - page %s, size %s", page, size)

        transactions, total = await self.transaction_repo.list_paginated(page=page, size=size)

        result = PagedResultDTO(
            content=[TransactionDTO.model_validate(txn) for txn in transactions],
            page=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size),
        )
        logger.info(
            "Retrieved %s transactions by page %s, size %s",
            len(result.content), page, size,
        )
        return result

    async def _update(self, current: TransactionDTO, patch: Dict[str, Any]) -> TransactionDTO:
        state = current.model_dump()
        state.update(patch)
        state["updated_at"] = datetime.utcnow()

        try:
            updated = await self.transaction_repo.save(Transaction(**state))
            result = TransactionDTO.model_validate(updated)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                "Failed to update transaction, id %s, trade number %s, error: %s",
                current.id, current.trade_no, e, exc_info=True,
            )
            # Row deleted after it was resolved from the cache
            if isinstance(e, TransactionNotFoundError):
                self._evict(current)
            raise

        self._evict(current)
        logger.info(
            "Transaction updated successfully, id %s, trade number %s",
            result.id, result.trade_no,
        )
        return result

    async def _delete(self, current: TransactionDTO) -> None:
        try:
            await self.transaction_repo.delete(Transaction(**current.model_dump()))
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                "Failed to delete transaction, id %s, trade number %s, error: %s",
                current.id, current.trade_no, e, exc_info=True,
            )
            raise

        self._evict(current)

    def _evict(self, transaction: TransactionDTO) -> None:
        self.cache_manager.evict(TRANSACTION_BY_ID_CACHE, transaction.id)
        self.cache_manager.evict(TRANSACTION_BY_TRADE_NO_CACHE, transaction.trade_no)

    @staticmethod
    def _patch_fields(command: Optional[UpdateTransactionCommandDTO]) -> Dict[str, Any]:
        if command is None:
            raise ValidationFailureError("Transaction payload is required")

        patch = command.model_dump(exclude_unset=True)
        nulled = {
            field: f"{field} cannot be null"
            for field in _NON_NULLABLE_PATCH_FIELDS
            if field in patch and patch[field] is None
        }
        if nulled:
            raise ValidationFailureError(
                "Input validation failed for one or more fields",
                validation_errors=nulled,
            )
        return patch

    @staticmethod
    def _validate_id(transaction_id: Any) -> None:
        if isinstance(transaction_id, bool) or not isinstance(transaction_id, int) or transaction_id < 1:
            raise ValidationFailureError(
                "Transaction ID must be positive",
                validation_errors={"id": "Transaction ID must be positive"},
            )
        if transaction_id > MAX_TRANSACTION_ID:
            raise ValidationFailureError(
                "Transaction ID is out of range",
                validation_errors={"id": f"Transaction ID must not exceed {MAX_TRANSACTION_ID}"},
            )

    @staticmethod
    def _validate_trade_no(trade_no: Any) -> None:
        if not isinstance(trade_no, str) or not _TRADE_NO_RE.fullmatch(trade_no):
            raise ValidationFailureError(
                "Trade number must be 18 digits",
                validation_errors={"trade_no": "Trade number must be 18 digits"},
            )

    def _validate_page(self, page: Any, size: Any) -> None:
        errors = {}
        if isinstance(page, bool) or not isinstance(page, int) or page < 0:
            errors["page"] = "Page must be zero or positive"
        if isinstance(size, bool) or not isinstance(size, int) or not 1 <= size <= self.max_page_size:
            errors["size"] = f"Size must be between 1 and {self.max_page_size}"
        if errors:
            raise ValidationFailureError(
                "Invalid pagination parameters",
                validation_errors=errors,
            )
