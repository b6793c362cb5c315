"""Integration tests for Transaction API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from httpx import AsyncClient

from src.adapter.services.cache_manager import InMemoryCacheManager
from src.app.use_cases.transactions import TransactionService
from src.depends import get_transaction_service
from src.domain.exceptions import StoreUnavailableError

TRADE_NO = "123456789012345654"


def build_payload(trade_no: str = TRADE_NO, **overrides) -> dict:
    payload = {
        "trade_no": trade_no,
        "account_number": "1234567890123456",
        "account_name": "david",
        "payee_account": "9876543210987654",
        "payee_name": "Tom",
        "amount": "500.00",
        "currency": "CNY",
        "type": "TO",
        "debit_credit": "DR",
        "description": "Test",
    }
    payload.update(overrides)
    return payload


def build_update_payload(**overrides) -> dict:
    payload = build_payload(**overrides)
    payload.pop("trade_no")
    return payload


class TestTransactionAPIIntegration:
    """Integration test suite for Transaction API endpoints"""

    @pytest.mark.asyncio
    async def test_create_transaction_success(self, client: AsyncClient):
        """Test POST /transaction returns 201 with a pending transaction"""
        # Act
        response = await client.post("/transaction", json=build_payload())

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["trade_no"] == TRADE_NO
        assert data["status"] == "P"
        assert data["type"] == "TO"
        assert data["debit_credit"] == "DR"
        assert Decimal(data["amount"]) == Decimal("500.00")
        assert data["updated_at"] is None

    @pytest.mark.asyncio
    async def test_create_duplicate_returns_409(self, client: AsyncClient):
        # Arrange
        await client.post("/transaction", json=build_payload())

        # Act
        response = await client.post("/transaction", json=build_payload(amount="1.00"))

        # Assert
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "DUPLICATED_TRANSACTION"
        assert error["message"] == f"Transaction with trade number {TRADE_NO} already exists"

        stored = await client.get(f"/transaction/by-trade-no/{TRADE_NO}")
        assert Decimal(stored.json()["amount"]) == Decimal("500.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("trade_no", "12345", "Trade number must be 18 digits"),
            ("account_number", "123", "Account number must be between 10 and 20 characters"),
            ("account_name", "d4vid", "Account name can only contain letters and spaces"),
            ("amount", "0.00", "Amount must be equal or greater than 0.01"),
            ("amount", "1.001", "Amount can have maximum 17 integer digits and 2 decimal places"),
            ("description", "x" * 501, "Description cannot exceed 500 characters"),
        ],
    )
    async def test_create_invalid_field_returns_400(self, client: AsyncClient, field, value, message):
        response = await client.post("/transaction", json=build_payload(**{field: value}))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["validation_errors"][field] == message

    @pytest.mark.asyncio
    async def test_create_missing_field_returns_400(self, client: AsyncClient):
        payload = build_payload()
        payload.pop("payee_name")

        response = await client.post("/transaction", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["validation_errors"]["payee_name"] == "Payee name is required"

    @pytest.mark.asyncio
    async def test_get_by_id_and_trade_no(self, client: AsyncClient):
        created = (await client.post("/transaction", json=build_payload())).json()

        by_id = await client.get(f"/transaction/{created['id']}")
        by_trade_no = await client.get(f"/transaction/by-trade-no/{TRADE_NO}")

        assert by_id.status_code == 200
        assert by_trade_no.status_code == 200
        assert by_id.json() == by_trade_no.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, client: AsyncClient):
        response = await client.get("/transaction/999")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "TRANSACTION_NOT_FOUND"
        assert error["message"] == "Transaction not found with ID: 999"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/transaction/0", "/transaction/-5", "/transaction/abc"])
    async def test_get_invalid_id_returns_400(self, client: AsyncClient, path):
        response = await client.get(path)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_get_id_beyond_bigint_returns_400(self, client: AsyncClient):
        response = await client.get(f"/transaction/{10 ** 30}")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert "id" in error["validation_errors"]

    @pytest.mark.asyncio
    async def test_get_invalid_trade_no_returns_400(self, client: AsyncClient):
        response = await client.get("/transaction/by-trade-no/12345")

        assert response.status_code == 400
        assert response.json()["error"]["validation_errors"] == {
            "trade_no": "Trade number must be 18 digits"
        }

    @pytest.mark.asyncio
    async def test_update_by_id_visible_through_trade_no(self, client: AsyncClient):
        """Test PUT by id is visible through the trade number after both were cached"""
        # Arrange
        created = (await client.post("/transaction", json=build_payload())).json()
        await client.get(f"/transaction/{created['id']}")
        await client.get(f"/transaction/by-trade-no/{TRADE_NO}")

        # Act
        response = await client.put(
            f"/transaction/{created['id']}",
            json=build_update_payload(amount="2000.00", debit_credit="CR"),
        )

        # Assert
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("2000.00")
        assert response.json()["updated_at"] is not None

        refreshed = (await client.get(f"/transaction/by-trade-no/{TRADE_NO}")).json()
        assert Decimal(refreshed["amount"]) == Decimal("2000.00")
        assert refreshed["debit_credit"] == "CR"
        assert refreshed["trade_no"] == TRADE_NO
        assert refreshed["created_at"] == created["created_at"]

    @pytest.mark.asyncio
    async def test_update_by_trade_no(self, client: AsyncClient):
        created = (await client.post("/transaction", json=build_payload())).json()

        response = await client.put(
            f"/transaction/by-trade-no/{TRADE_NO}",
            json=build_update_payload(currency="USD"),
        )

        assert response.status_code == 200
        assert response.json()["currency"] == "USD"
        assert (await client.get(f"/transaction/{created['id']}")).json()["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_update_id_mismatch_returns_400(self, client: AsyncClient):
        created = (await client.post("/transaction", json=build_payload())).json()

        response = await client.put(
            f"/transaction/{created['id']}",
            json=build_update_payload(id=created["id"] + 1),
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Transaction ID in request body does not match path variable"
        )

    @pytest.mark.asyncio
    async def test_update_missing_returns_404(self, client: AsyncClient):
        response = await client.put("/transaction/999", json=build_update_payload())

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_by_id(self, client: AsyncClient):
        created = (await client.post("/transaction", json=build_payload())).json()
        await client.get(f"/transaction/by-trade-no/{TRADE_NO}")

        response = await client.delete(f"/transaction/{created['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/transaction/{created['id']}")).status_code == 404
        assert (await client.get(f"/transaction/by-trade-no/{TRADE_NO}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_by_trade_no(self, client: AsyncClient):
        created = (await client.post("/transaction", json=build_payload())).json()
        await client.get(f"/transaction/{created['id']}")

        response = await client.delete(f"/transaction/by-trade-no/{TRADE_NO}")

        assert response.status_code == 204
        assert (await client.get(f"/transaction/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_returns_404(self, client: AsyncClient):
        response = await client.delete(f"/transaction/by-trade-no/{TRADE_NO}")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == f"Transaction not found with TradeNo: {TRADE_NO}"

    @pytest.mark.asyncio
    async def test_list_transactions_paging(self, client: AsyncClient):
        """Test GET /transaction returns paging metadata"""
        # Arrange
        for i in range(1, 46):
            response = await client.post("/transaction", json=build_payload(trade_no=f"{i:018d}"))
            assert response.status_code == 201

        # Act
        response = await client.get("/transaction", params={"page": 2, "size": 20})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 2
        assert data["size"] == 20
        assert data["total_elements"] == 45
        assert data["total_pages"] == 3
        assert len(data["content"]) == 5

    @pytest.mark.asyncio
    async def test_list_defaults(self, client: AsyncClient):
        response = await client.get("/transaction")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 0
        assert data["size"] == 20
        assert data["content"] == []
        assert data["total_pages"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": -1}, {"size": 0}, {"size": 101}])
    async def test_list_invalid_paging_returns_400(self, client: AsyncClient, params):
        response = await client.get("/transaction", params=params)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_store_unavailable_returns_503(self, app, client: AsyncClient):
        """Test database outage surfaces as 503 without internal details"""
        # Arrange
        repo = AsyncMock()
        repo.get_by_id.side_effect = StoreUnavailableError(
            "Transaction store is unavailable", reason="connection refused"
        )
        app.dependency_overrides[get_transaction_service] = lambda: TransactionService(
            uow=AsyncMock(), transaction_repo=repo, cache_manager=InMemoryCacheManager()
        )

        # Act
        response = await client.get("/transaction/1")

        # Assert
        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "STORE_UNAVAILABLE"
        assert "reason" not in error

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_500(self, app, client: AsyncClient):
        repo = AsyncMock()
        repo.list_paginated.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_transaction_service] = lambda: TransactionService(
            uow=AsyncMock(), transaction_repo=repo, cache_manager=InMemoryCacheManager()
        )

        response = await client.get("/transaction")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"

    @pytest.mark.asyncio
    async def test_response_time_header(self, client: AsyncClient):
        response = await client.get("/transaction")

        assert "x-response-time" in response.headers
