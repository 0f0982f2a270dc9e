"""Tests for transactions API endpoints."""

import pytest
from decimal import Decimal

from app.models.currency import Currency


def payload(**overrides):
    data = {
        "type": "expense",
        "amount": "42.50",
        "currency": "USD",
        "category": "Groceries",
        "description": "Whole Foods",
        "date": "2026-10-01",
    }
    data.update(overrides)
    return data


class TestTransactionsAPI:
    """Test transactions endpoints."""

    def test_list_transactions_empty(self, client):
        """Should return empty paginated list."""
        response = client.get("/api/v1/transactions")
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0

    def test_create_transaction_updates_balance(self, client, sample_account, account_balance):
        """Should record the transaction and debit the account."""
        response = client.post("/api/v1/transactions", json=payload(bank_account_id=sample_account.id))
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("42.50")
        assert data["bank_account_id"] == sample_account.id
        assert data["recurring_transaction_id"] is None
        assert account_balance(sample_account.id) == Decimal("957.50")

    def test_list_transactions_with_data(self, client, sample_account):
        """Should return transactions newest first."""
        client.post("/api/v1/transactions", json=payload(date="2026-09-01"))
        client.post("/api/v1/transactions", json=payload(date="2026-10-01"))

        response = client.get("/api/v1/transactions")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["date"] for item in data["items"]] == ["2026-10-01", "2026-09-01"]

    def test_pagination(self, client):
        for day in range(1, 6):
            client.post("/api/v1/transactions", json=payload(date=f"2026-10-0{day}"))

        response = client.get("/api/v1/transactions", params={"page": 2, "per_page": 2})
        data = response.json()
        assert data["total"] == 5
        assert data["pages"] == 3
        assert data["page"] == 2
        assert [item["date"] for item in data["items"]] == ["2026-10-03", "2026-10-02"]

    def test_search_transactions(self, client):
        """Should filter by search term."""
        client.post("/api/v1/transactions", json=payload())

        response = client.get("/api/v1/transactions", params={"search": "Whole"})
        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

        response = client.get("/api/v1/transactions", params={"search": "xyz"})
        assert len(response.json()["items"]) == 0

    def test_filter_by_type_and_account(self, client, sample_account):
        client.post("/api/v1/transactions", json=payload(bank_account_id=sample_account.id))
        client.post("/api/v1/transactions", json=payload(type="income", category="Salary"))

        response = client.get("/api/v1/transactions", params={"type": "income"})
        assert [item["category"] for item in response.json()["items"]] == ["Salary"]

        response = client.get("/api/v1/transactions", params={"bank_account_id": sample_account.id})
        assert response.json()["total"] == 1

    def test_get_transaction(self, client):
        """Should return single transaction."""
        created = client.post("/api/v1/transactions", json=payload()).json()
        response = client.get(f"/api/v1/transactions/{created['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_get_missing_transaction(self, client):
        response = client.get("/api/v1/transactions/does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Transaction not found"

    def test_update_moves_effect(self, client, sample_account, sample_card, account_balance, card_balance):
        """Should move the amount from the account to the card."""
        created = client.post("/api/v1/transactions", json=payload(bank_account_id=sample_account.id)).json()

        response = client.put(
            f"/api/v1/transactions/{created['id']}",
            json=payload(amount="10.00", credit_card_id=sample_card.id)
        )
        assert response.status_code == 200
        assert response.json()["credit_card_id"] == sample_card.id
        assert account_balance(sample_account.id) == Decimal("1000.00")
        assert card_balance(sample_card.id, Currency.USD) == Decimal("210.00")

    def test_delete_reverses_effect(self, client, sample_account, account_balance):
        created = client.post("/api/v1/transactions", json=payload(bank_account_id=sample_account.id)).json()

        response = client.delete(f"/api/v1/transactions/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert account_balance(sample_account.id) == Decimal("1000.00")
        assert client.get(f"/api/v1/transactions/{created['id']}").status_code == 404

    def test_card_payment(self, client, sample_account, sample_card, account_balance, card_balance):
        response = client.post("/api/v1/transactions", json=payload(
            amount="150.00",
            category="Card payment",
            bank_account_id=sample_account.id,
            is_card_payment=True,
            target_card_id=sample_card.id,
        ))
        assert response.status_code == 201
        assert account_balance(sample_account.id) == Decimal("850.00")
        assert card_balance(sample_card.id, Currency.USD) == Decimal("50.00")


class TestTransactionValidation:
    """Test rejected requests leave balances untouched."""

    def test_account_and_card_rejected(self, client, sample_account, sample_card, account_balance):
        response = client.post("/api/v1/transactions", json=payload(
            bank_account_id=sample_account.id,
            credit_card_id=sample_card.id,
        ))
        assert response.status_code == 422
        assert response.json()["field"] == "credit_card_id"
        assert account_balance(sample_account.id) == Decimal("1000.00")

    def test_card_payment_without_target(self, client, sample_account):
        response = client.post("/api/v1/transactions", json=payload(
            bank_account_id=sample_account.id,
            is_card_payment=True,
        ))
        assert response.status_code == 422
        assert response.json()["field"] == "target_card_id"

    @pytest.mark.parametrize("amount", ["0", "-5.00", "1.001"])
    def test_invalid_amount(self, client, amount):
        response = client.post("/api/v1/transactions", json=payload(amount=amount))
        assert response.status_code == 422

    def test_category_too_long(self, client):
        response = client.post("/api/v1/transactions", json=payload(category="x" * 31))
        assert response.status_code == 422

    def test_other_users_account(self, client, foreign_account, account_balance):
        response = client.post("/api/v1/transactions", json=payload(bank_account_id=foreign_account.id))
        assert response.status_code == 404
        assert account_balance(foreign_account.id) == Decimal("300.00")

    def test_requires_user_header(self, client):
        """Without the identity override a missing header is rejected."""
        from app.dependencies import get_current_user_id
        from app.main import app

        override = app.dependency_overrides.pop(get_current_user_id)
        try:
            response = client.get("/api/v1/transactions")
            assert response.status_code == 401
            response = client.get("/api/v1/transactions", headers={"X-User-Id": "user-1"})
            assert response.status_code == 200
        finally:
            app.dependency_overrides[get_current_user_id] = override
