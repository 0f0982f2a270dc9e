"""Tests for credit card API endpoints."""

from decimal import Decimal

from app.models.currency import Currency


def card_payload(**overrides):
    data = {
        "name": "Travel Card",
        "bank_name": "Card Bank",
        "cut_off_day": 20,
        "payment_due_day": 10,
        "balances": [
            {"currency": "USD", "credit_limit": "5000.00", "balance": "120.00"},
        ],
    }
    data.update(overrides)
    return data


class TestCardsAPI:
    """Test card endpoints and per-currency balances."""

    def test_create_card(self, client):
        response = client.post("/api/v1/cards", json=card_payload())
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Travel Card"
        assert len(data["balances"]) == 1
        balance = data["balances"][0]
        assert balance["currency"] == "USD"
        assert Decimal(balance["balance"]) == Decimal("120.00")
        assert balance["credit_limit_set"] is True

    def test_create_card_requires_a_balance(self, client):
        response = client.post("/api/v1/cards", json=card_payload(balances=[]))
        assert response.status_code == 422

    def test_create_card_rejects_duplicate_currency(self, client):
        response = client.post("/api/v1/cards", json=card_payload(balances=[
            {"currency": "USD", "credit_limit": "100.00"},
            {"currency": "USD", "credit_limit": "200.00"},
        ]))
        assert response.status_code == 422

    def test_create_card_rejects_bad_cut_off_day(self, client):
        response = client.post("/api/v1/cards", json=card_payload(cut_off_day=32))
        assert response.status_code == 422

    def test_list_cards(self, client, sample_card, second_card):
        response = client.get("/api/v1/cards")
        assert response.status_code == 200
        names = {card["name"] for card in response.json()}
        assert names == {"Travel Card", "Grocery Card"}

    def test_get_card_lists_each_currency(self, client, sample_card):
        response = client.get(f"/api/v1/cards/{sample_card.id}")
        assert response.status_code == 200
        currencies = {b["currency"]: Decimal(b["balance"]) for b in response.json()["balances"]}
        assert currencies == {"USD": Decimal("200.00"), "MXN": Decimal("1500.00")}

    def test_first_use_of_currency_has_unset_limit(self, client, sample_card):
        """A currency created by a transaction reports no credit limit."""
        client.post("/api/v1/transactions", json={
            "type": "expense",
            "amount": "30.00",
            "currency": "EUR",
            "category": "Travel",
            "date": "2026-10-01",
            "credit_card_id": sample_card.id,
        })
        response = client.get(f"/api/v1/cards/{sample_card.id}")
        eur = next(b for b in response.json()["balances"] if b["currency"] == "EUR")
        assert Decimal(eur["balance"]) == Decimal("30.00")
        assert eur["credit_limit_set"] is False

    def test_update_credit_limits(self, client, sample_card, card_balance):
        """Limits can be set, including for a currency not used yet. Balances stay."""
        response = client.patch(f"/api/v1/cards/{sample_card.id}", json={
            "name": "Renamed",
            "credit_limits": [
                {"currency": "USD", "credit_limit": "7500.00"},
                {"currency": "EUR", "credit_limit": "2000.00"},
            ],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        limits = {b["currency"]: Decimal(b["credit_limit"]) for b in data["balances"]}
        assert limits == {
            "EUR": Decimal("2000.00"),
            "MXN": Decimal("40000.00"),
            "USD": Decimal("7500.00"),
        }
        assert card_balance(sample_card.id, Currency.USD) == Decimal("200.00")
        assert card_balance(sample_card.id, Currency.EUR) == Decimal("0.00")

    def test_delete_card(self, client, sample_card):
        response = client.delete(f"/api/v1/cards/{sample_card.id}")
        assert response.status_code == 200
        assert client.get(f"/api/v1/cards/{sample_card.id}").status_code == 404
        assert client.get("/api/v1/cards").json() == []
