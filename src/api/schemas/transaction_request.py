"""Request schemas for Transaction API

Pydantic models for validating incoming HTTP requests.
"""

import re
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.transaction import TransactionType, DebitCredit

# Label used in "<label> is required" messages, keyed by field name
FIELD_LABELS = {
    "trade_no": "Trade number",
    "account_number": "Account number",
    "account_name": "Account name",
    "payee_account": "Payee account",
    "payee_name": "Payee name",
    "amount": "Amount",
    "currency": "Currency",
    "type": "Transaction type",
    "debit_credit": "Debit/Credit indicator",
}

_DIGITS_RE = re.compile(r"\d+")
_LETTERS_AND_SPACES_RE = re.compile(r"[A-Za-z ]+")
_CURRENCY_RE = re.compile(r"[A-Z]{3}")
_TRADE_NO_RE = re.compile(r"\d{18}")

MAX_AMOUNT_INTEGER_DIGITS = 17
MAX_AMOUNT_FRACTION_DIGITS = 2


def _check_account(value: str, label: str) -> str:
    if not 10 <= len(value) <= 20:
        raise ValueError(f"{label} must be between 10 and 20 characters")
    if not _DIGITS_RE.fullmatch(value):
        raise ValueError(f"{label} can only contain digits")
    return value


def _check_name(value: str, label: str) -> str:
    if not 2 <= len(value) <= 100:
        raise ValueError(f"{label} must be between 2 and 100 characters")
    return value


class TransactionBodySchema(BaseModel):
    """
    Fields shared by create and update requests

    Every rule mirrors the column constraints of the transactions table.
    """

    account_number: str = Field(..., description="Payer account number (10-20 digits)")

    account_name: str = Field(..., description="Payer name (2-100 letters and spaces)")

    payee_account: str = Field(..., description="Payee account number (10-20 digits)")

    payee_name: str = Field(..., description="Payee name (2-100 characters)")

    amount: Decimal = Field(..., description="Amount (>= 0.01, 17 integer and 2 decimal digits max)")

    currency: str = Field(..., description="Three-letter uppercase currency code")

    type: TransactionType = Field(..., description="Transaction type code (e.g. 'TO')")

    debit_credit: DebitCredit = Field(..., description="'DR' for debit, 'CR' for credit")

    description: Optional[str] = Field(default=None, description="Optional description (max 500 chars)")

    @field_validator('account_number')
    @classmethod
    def validate_account_number(cls, v):
        return _check_account(v, "Account number")

    @field_validator('payee_account')
    @classmethod
    def validate_payee_account(cls, v):
        return _check_account(v, "Payee account")

    @field_validator('account_name')
    @classmethod
    def validate_account_name(cls, v):
        _check_name(v, "Account name")
        if not _LETTERS_AND_SPACES_RE.fullmatch(v):
            raise ValueError("Account name can only contain letters and spaces")
        return v

    @field_validator('payee_name')
    @classmethod
    def validate_payee_name(cls, v):
        return _check_name(v, "Payee name")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Ensure amount is at least 0.01 with at most 17 integer and 2 decimal digits"""
        if v < Decimal("0.01"):
            raise ValueError("Amount must be equal or greater than 0.01")
        sign, digits, exponent = v.as_tuple()
        fraction_digits = max(-exponent, 0)
        integer_digits = max(len(digits) + exponent, 0)
        if integer_digits > MAX_AMOUNT_INTEGER_DIGITS or fraction_digits > MAX_AMOUNT_FRACTION_DIGITS:
            raise ValueError("Amount can have maximum 17 integer digits and 2 decimal places")
        return v

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if not _CURRENCY_RE.fullmatch(v):
            raise ValueError("Currency must be a 3-letter uppercase code")
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if v is not None and len(v) > 500:
            raise ValueError("Description cannot exceed 500 characters")
        return v


class CreateTransactionRequestSchema(TransactionBodySchema):
    """
    Request schema for creating a transaction

    Used for POST /transaction endpoint.
    """

    trade_no: str = Field(..., description="18-digit trade number (unique)")

    @field_validator('trade_no')
    @classmethod
    def validate_trade_no(cls, v):
        if not _TRADE_NO_RE.fullmatch(v):
            raise ValueError("Trade number must be 18 digits")
        return v

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
                "description": "Test"
            }
        }


class UpdateTransactionRequestSchema(TransactionBodySchema):
    """
    Request schema for updating a transaction

    Used for PUT /transaction/{id} and PUT /transaction/by-trade-no/{trade_no}.
    The trade number is immutable; an id in the body must match the path.
    """

    id: Optional[int] = Field(default=None, description="Must match the path id when given")

    class Config:
        json_schema_extra = {
            "example": {
                "account_number": "1234567890123456",
                "account_name": "user one",
                "payee_account": "9876543210987654",
                "payee_name": "user 2",
                "amount": "2000.00",
                "currency": "CNY",
                "type": "TO",
                "debit_credit": "DR",
                "description": ""
            }
        }
