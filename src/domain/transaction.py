"""Transaction Domain Entity

A single banking transaction row, addressable by its surrogate id
and by its 18-digit business trade number.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Integer, Numeric, String, DateTime
from src.domain.base import BaseModel


class TransactionType(str, Enum):
    """Transaction categories, serialized by their short code"""
    DEPOSIT = "DP"
    WITHDRAWAL = "WD"
    TRANSFER_OUT = "TO"
    TRANSFER_IN = "TI"
    PAYMENT = "PMT"
    REFUND = "RF"
    FEE = "FEE"
    INTEREST = "INT"
    ADJUSTMENT = "ADJ"
    CARD_PURCHASE = "CP"
    CARD_REFUND = "CR"

    @property
    def description(self) -> str:
        return _TYPE_DESCRIPTIONS[self]

    @classmethod
    def from_code(cls, code: str) -> "TransactionType":
        for member in cls:
            if member.value == code:
                return member
        raise ValueError(f"Unknown transaction type code: {code}")


class DebitCredit(str, Enum):
    """Direction of the money movement"""
    DEBIT = "DR"     # money outflow
    CREDIT = "CR"    # money inflow

    @property
    def description(self) -> str:
        return _DEBIT_CREDIT_DESCRIPTIONS[self]

    @classmethod
    def from_code(cls, code: str) -> "DebitCredit":
        for member in cls:
            if member.value == code:
                return member
        raise ValueError(f"Unknown debit/credit code: {code}")


class TransactionStatus(str, Enum):
    """Processing status. New transactions always start as PENDING."""
    PENDING = "P"
    COMPLETED = "C"
    FAILED = "F"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]

    @classmethod
    def from_code(cls, code: str) -> "TransactionStatus":
        for member in cls:
            if member.value == code:
                return member
        raise ValueError(f"Unknown transaction status code: {code}")


_TYPE_DESCRIPTIONS = {
    TransactionType.DEPOSIT: "Deposit",
    TransactionType.WITHDRAWAL: "Withdrawal",
    TransactionType.TRANSFER_OUT: "Transfer Out",
    TransactionType.TRANSFER_IN: "Transfer In",
    TransactionType.PAYMENT: "Payment",
    TransactionType.REFUND: "Refund",
    TransactionType.FEE: "Fee",
    TransactionType.INTEREST: "Interest",
    TransactionType.ADJUSTMENT: "Adjustment",
    TransactionType.CARD_PURCHASE: "Card Purchase",
    TransactionType.CARD_REFUND: "Card Refund",
}

_DEBIT_CREDIT_DESCRIPTIONS = {
    DebitCredit.DEBIT: "Debit, money outflow",
    DebitCredit.CREDIT: "Credit, money inflow",
}

_STATUS_DESCRIPTIONS = {
    TransactionStatus.PENDING: "Pending to be processed",
    TransactionStatus.COMPLETED: "Completed",
    TransactionStatus.FAILED: "Failed",
}


class Transaction(BaseModel, table=True):
    """
    Transaction - A banking transaction record

    Domain Rules:
    - id is assigned by the database and never by a caller
    - trade_no is the unique 18-digit business key, immutable after creation
    - status starts as PENDING; no transition logic is modelled
    - created_at is set once; updated_at stays None until the first update
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index('ix_transactions_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        description="Unique transaction identifier (auto-increment)"
    )

    trade_no: str = Field(
        sa_column=Column(String(18), unique=True, index=True, nullable=False),
        description="18-digit business trade number (unique)"
    )

    account_number: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Payer account number"
    )

    account_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Payer account holder name"
    )

    payee_account: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Payee account number"
    )

    payee_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Payee name"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Transaction amount (precision: 19,2)"
    )

    currency: str = Field(
        sa_column=Column(String(3), nullable=False),
        description="ISO 4217 currency code"
    )

    type: TransactionType = Field(
        description="Transaction category"
    )

    debit_credit: DebitCredit = Field(
        description="Debit (outflow) or credit (inflow)"
    )

    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
        description="Processing status"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Free-form description (max 500 chars)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp (immutable)"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Last update timestamp (None until first update)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "trade_no": "123456789012345654",
                "account_number": "1234567890123456",
                "account_name": "david",
                "payee_account": "9876543210987654",
                "payee_name": "Tom",
                "amount": "500.00",
                "currency": "CNY",
                "type": "TO",
                "debit_credit": "DR",
                "status": "P",
                "description": "Rent",
                "created_at": "2024-01-01T00:00:00",
                "updated_at": None
            }
        }
