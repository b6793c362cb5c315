"""Transaction API Routes

FastAPI routes for transaction CRUD operations.
"""

import logging
from fastapi import APIRouter, Depends, Query, Response, status

from config import ApplicationConfig
from src.api.error import ClientError, ErrorDetail
from src.api.schemas.transaction_request import (
    CreateTransactionRequestSchema,
    UpdateTransactionRequestSchema,
)
from src.app.use_cases.transactions import (
    TransactionService,
    CreateTransactionCommandDTO,
    UpdateTransactionCommandDTO,
    TransactionDTO,
    PagedResultDTO,
)
from src.depends import get_transaction_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transaction", tags=["Transaction Management"])

_NOT_FOUND_RESPONSE = {
    "description": "Transaction not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "TRANSACTION_NOT_FOUND",
                    "message": "Transaction not found with ID: 999"
                }
            }
        }
    }
}

_VALIDATION_RESPONSE = {
    "description": "Invalid request parameters",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "VALIDATION_FAILED",
                    "message": "Input validation failed for one or more fields",
                    "validation_errors": {"trade_no": "Trade number must be 18 digits"}
                }
            }
        }
    }
}


def _update_command(request: UpdateTransactionRequestSchema) -> UpdateTransactionCommandDTO:
    return UpdateTransactionCommandDTO(**request.model_dump(exclude={"id"}))


@router.post(
    "",
    response_model=TransactionDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: _VALIDATION_RESPONSE,
        409: {
            "description": "Duplicated transaction",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "DUPLICATED_TRANSACTION",
                            "message": "Transaction with trade number 123456789012345654 already exists"
                        }
                    }
                }
            }
        }
    }
)
async def create_transaction(
    request: CreateTransactionRequestSchema,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Create a new banking transaction.

    The transaction starts with status `P` (pending). The trade number must
    be unique; a second create with the same trade number returns 409.

    **Returns:**
    - 201: Transaction created
    - 400: Invalid request body
    - 409: Trade number already exists
    """
    logger.info("Creating transaction, trade number %s", request.trade_no)
    command = CreateTransactionCommandDTO(**request.model_dump())
    return await service.create_transaction(command)


@router.get(
    "",
    response_model=PagedResultDTO,
    status_code=status.HTTP_200_OK,
    responses={400: _VALIDATION_RESPONSE}
)
async def list_transactions(
    page: int = Query(default=0, description="Zero-based page number"),
    size: int = Query(
        default=ApplicationConfig.PAGE_SIZE_DEFAULT,
        description=f"Page size, maximum {ApplicationConfig.PAGE_SIZE_MAX}",
    ),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    List transactions, most recent first.

    Results are always read from the database, never from the cache.

    **Returns:**
    - 200: One page of transactions with paging metadata
    - 400: Negative page or size outside the allowed range
    """
    return await service.list_transactions(page=page, size=size)


@router.get(
    "/by-trade-no/{trade_no}",
    response_model=TransactionDTO,
    status_code=status.HTTP_200_OK,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def get_transaction_by_trade_no(
    trade_no: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Query a transaction by its 18-digit trade number.

    **Returns:**
    - 200: Transaction found
    - 400: Trade number is not 18 digits
    - 404: Transaction not found
    """
    return await service.get_transaction_by_trade_no(trade_no)


@router.put(
    "/by-trade-no/{trade_no}",
    response_model=TransactionDTO,
    status_code=status.HTTP_200_OK,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def update_transaction_by_trade_no(
    trade_no: str,
    request: UpdateTransactionRequestSchema,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Update a transaction by its 18-digit trade number.

    All fields except id, trade number, status and creation time are replaced.

    **Returns:**
    - 200: Transaction updated
    - 400: Invalid trade number or request body
    - 404: Transaction not found
    """
    logger.info("Updating transaction by trade number %s", trade_no)
    return await service.update_transaction_by_trade_no(trade_no, _update_command(request))


@router.delete(
    "/by-trade-no/{trade_no}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def delete_transaction_by_trade_no(
    trade_no: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Delete a transaction by its 18-digit trade number.

    **Returns:**
    - 204: Transaction deleted
    - 400: Trade number is not 18 digits
    - 404: Transaction not found
    """
    logger.info("Deleting transaction by trade number %s", trade_no)
    await service.delete_transaction_by_trade_no(trade_no)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{transaction_id}",
    response_model=TransactionDTO,
    status_code=status.HTTP_200_OK,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def get_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Query a transaction by ID.

    **Returns:**
    - 200: Transaction found
    - 400: ID is not a positive integer
    - 404: Transaction not found
    """
    return await service.get_transaction_by_id(transaction_id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionDTO,
    status_code=status.HTTP_200_OK,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def update_transaction(
    transaction_id: int,
    request: UpdateTransactionRequestSchema,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Update a transaction by ID.

    An `id` in the request body, if present, must match the path.

    **Returns:**
    - 200: Transaction updated
    - 400: Invalid ID or request body
    - 404: Transaction not found
    """
    logger.info("Updating transaction, transaction id %s", transaction_id)
    if request.id is not None and request.id != transaction_id:
        raise ClientError(
            ErrorDetail(
                code="VALIDATION_FAILED",
                message="Transaction ID in request body does not match path variable",
            )
        )
    return await service.update_transaction_by_id(transaction_id, _update_command(request))


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: _VALIDATION_RESPONSE, 404: _NOT_FOUND_RESPONSE}
)
async def delete_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Delete a transaction by ID.

    **Returns:**
    - 204: Transaction deleted
    - 400: ID is not a positive integer
    - 404: Transaction not found
    """
    logger.info("Deleting transaction by ID %s", transaction_id)
    await service.delete_transaction_by_id(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
