"""Data Transfer Objects for Transaction Use Cases

Pydantic models for command inputs and response outputs.
TransactionDTO is also the value held by the transaction caches: it is
detached from the database session and safe to share between requests.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.transaction import TransactionType, DebitCredit, TransactionStatus

TRADE_NO_PATTERN = r"^\d{18}$"
CURRENCY_PATTERN = r"^[A-Z]{3}$"


class CreateTransactionCommandDTO(BaseModel):
    """
    Command DTO for creating a transaction

    Used as input to TransactionService.create_transaction.
    """

    trade_no: str = Field(
        ...,
        pattern=TRADE_NO_PATTERN,
        description="18-digit business trade number"
    )

    account_number: str = Field(..., min_length=1, description="Payer account number")

    account_name: str = Field(..., min_length=1, description="Payer account holder name")

    payee_account: str = Field(..., min_length=1, description="Payee account number")

    payee_name: str = Field(..., min_length=1, description="Payee name")

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=19,
        decimal_places=2,
        description="Transaction amount (must be > 0)"
    )

    currency: str = Field(
        ...,
        pattern=CURRENCY_PATTERN,
        description="Three-letter uppercase currency code"
    )

    type: TransactionType = Field(..., description="Transaction category")

    debit_credit: DebitCredit = Field(..., description="Debit (DR) or credit (CR)")

    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional description"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "trade_no": "123456789012345654",
                "account_number": "1234567890123456",
                "account_name": "david",
                "payee_account": "9876543210987654",
                "payee_name": "Tom",
                "amount": "500.00",
                "currency": "CNY",
                "type": "TO",
                "debit_credit": "DR",
                "description": "Rent"
            }
        }


class UpdateTransactionCommandDTO(BaseModel):
    """
    Command DTO for updating a transaction

    Only the fields explicitly set are applied. id, trade_no, status and
    created_at are never replaceable.
    """

    account_number: Optional[str] = Field(default=None, min_length=1)

    account_name: Optional[str] = Field(default=None, min_length=1)

    payee_account: Optional[str] = Field(default=None, min_length=1)

    payee_name: Optional[str] = Field(default=None, min_length=1)

    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=19, decimal_places=2)

    currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)

    type: Optional[TransactionType] = None

    debit_credit: Optional[DebitCredit] = None

    description: Optional[str] = Field(default=None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "2000.00",
                "currency": "CNY",
                "description": "Rent, corrected amount"
            }
        }


class TransactionDTO(BaseModel):
    """
    Response DTO for a single transaction

    Returned by every TransactionService read/write operation.
    """

    id: int = Field(..., description="Transaction ID")
    trade_no: str = Field(..., description="18-digit trade number")
    account_number: str
    account_name: str
    payee_account: str
    payee_name: str
    amount: Decimal
    currency: str
    type: TransactionType
    debit_credit: DebitCredit
    status: TransactionStatus
    description: Optional[str] = None
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    class Config:
        from_attributes = True
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


class PagedResultDTO(BaseModel):
    """
    Response DTO for paginated transaction listing

    total_pages = ceil(total_elements / size)
    """

    content: List[TransactionDTO] = Field(..., description="Transactions on this page")
    page: int = Field(..., description="Zero-based page number")
    size: int = Field(..., description="Requested page size")
    total_elements: int = Field(..., description="Total number of transactions")
    total_pages: int = Field(..., description="Total number of pages")

    class Config:
        json_schema_extra = {
            "example": {
                "content": [],
                "page": 0,
                "size": 20,
                "total_elements": 45,
                "total_pages": 3
            }
        }
