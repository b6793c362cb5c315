"""SQLAlchemy implementation of TransactionRepository

Provides persistence for Transaction entities. Uniqueness of trade_no is
enforced by a unique index and surfaced as DuplicatedTransactionError.
"""

import logging
from typing import Optional
from sqlmodel import select, func
from sqlalchemy import delete, update
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.exceptions import (
    DuplicatedTransactionError,
    StoreUnavailableError,
    TransactionNotFoundError,
)
from src.domain.transaction import Transaction

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "account_number",
    "account_name",
    "payee_account",
    "payee_name",
    "amount",
    "currency",
    "type",
    "debit_credit",
    "status",
    "description",
    "updated_at",
)


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    SQLAlchemy implementation of TransactionRepository

    Features:
    - Duplicate trade numbers rejected via unique index on trade_no
    - Update by id; a vanished row is reported, never re-inserted
    - Connection failures translated to StoreUnavailableError
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction

        Raises:
            DuplicatedTransactionError: If trade_no already exists
        """
        self.session.add(transaction)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if "trade_no" in str(e.orig).lower():
                raise DuplicatedTransactionError(
                    f"Transaction with trade number {transaction.trade_no} already exists",
                    reason=str(e.orig),
                ) from e
            raise
        except (OperationalError, InterfaceError) as e:
            raise self._unavailable(e) from e
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        stmt = select(Transaction).where(Transaction.id == transaction_id)
        return await self._scalar_one_or_none(stmt)

    async def get_by_trade_no(self, trade_no: str) -> Optional[Transaction]:
        stmt = select(Transaction).where(Transaction.trade_no == trade_no)
        return await self._scalar_one_or_none(stmt)

    async def save(self, transaction: Transaction) -> Transaction:
        """
        Update an existing transaction by ID

        The incoming entity may be detached. id, trade_no and created_at
        are never written.

        Raises:
            TransactionNotFoundError: If the row no longer exists
        """
        values = {
            field: getattr(transaction, field)
            for field in _UPDATABLE_FIELDS
        }
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                raise TransactionNotFoundError(f"Transaction not found with ID: {transaction.id}")

            refreshed = await self.session.execute(
                select(Transaction)
                .where(Transaction.id == transaction.id)
                .execution_options(populate_existing=True)
            )
        except (OperationalError, InterfaceError) as e:
            raise self._unavailable(e) from e
        return refreshed.scalar_one()

    async def delete(self, transaction: Transaction) -> None:
        stmt = delete(Transaction).where(Transaction.id == transaction.id)
        try:
            await self.session.execute(stmt)
        except (OperationalError, InterfaceError) as e:
            raise self._unavailable(e) from e

    async def list_paginated(
        self, page: int = 0, size: int = 20
    ) -> tuple[list[Transaction], int]:
        """
        Retrieve one page of transactions

        Ordered by created_at DESC, ties broken by id DESC so that pages
        are stable.

        Returns:
            Tuple of (list of Transaction, total count)
        """
        try:
            # Get total count
            count_stmt = select(func.count()).select_from(Transaction)
            count_result = await self.session.execute(count_stmt)
            total = count_result.scalar()

            stmt = (
                select(Transaction)
                .order_by(Transaction.created_at.desc(), Transaction.id.desc())
                .limit(size)
                .offset(page * size)
            )
            result = await self.session.execute(stmt)
            transactions = list(result.scalars().all())
        except (OperationalError, InterfaceError) as e:
            raise self._unavailable(e) from e

        return transactions, total

    async def _scalar_one_or_none(self, stmt) -> Optional[Transaction]:
        try:
            result = await self.session.execute(stmt)
        except (OperationalError, InterfaceError) as e:
            raise self._unavailable(e) from e
        return result.scalar_one_or_none()

    @staticmethod
    def _unavailable(error: Exception) -> StoreUnavailableError:
        logger.error("Transaction store unavailable: %s", error)
        return StoreUnavailableError(
            "Transaction store is unavailable",
            reason=str(error),
        )
