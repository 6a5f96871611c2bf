"""Integration tests for the Plaid Link endpoints."""

from api.plaid import _get_plaid_client
from integrations.exceptions import ProviderAPIError, ProviderAuthError
from main import app
from models import PlaidItem
from tests.fixtures.mocks import MockPlaidClient, make_account


def _use(plaid):
    app.dependency_overrides[_get_plaid_client] = lambda: plaid
    return plaid


class TestCreateLinkToken:
    def test_success(self, client, mock_plaid):
        response = client.post("/api/plaid/create-link-token")

        assert response.status_code == 200
        assert response.json() == {"link_token": "link-sandbox-123"}

    def test_registers_webhook(self, client, mock_plaid):
        client.post("/api/plaid/create-link-token", json={"webhook": "https://example.com/api/webhooks/plaid"})

        assert mock_plaid.link_token_calls == ["https://example.com/api/webhooks/plaid"]

    def test_not_configured(self, client):
        _use(MockPlaidClient(configured=False))

        response = client.post("/api/plaid/create-link-token")

        assert response.status_code == 400
        assert response.json()["detail"] == "Plaid is not configured"

    def test_invalid_api_keys_hint(self, client):
        _use(MockPlaidClient(failures={
            "create_link_token": ProviderAuthError("Plaid error (INVALID_API_KEYS): invalid client_id or secret"),
        }))

        response = client.post("/api/plaid/create-link-token")

        assert response.status_code == 400
        assert "PLAID_ENVIRONMENT" in response.json()["detail"]

    def test_other_provider_error(self, client):
        _use(MockPlaidClient(failures={"create_link_token": ProviderAPIError("Plaid error (INTERNAL_SERVER_ERROR)")}))

        assert client.post("/api/plaid/create-link-token").status_code == 500


class TestExchangeToken:
    def test_creates_one_row_per_account(self, client, db):
        _use(MockPlaidClient(accounts=[make_account("acc-1"), make_account("acc-2", name="Savings")]))

        response = client.post(
            "/api/plaid/exchange-token",
            json={"public_token": "public-sandbox-1", "institution_id": "ins_109508"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["item_id"] == "item-1"
        assert data["accounts_created"] == 2
        rows = db.query(PlaidItem).order_by(PlaidItem.account_name).all()
        assert [r.account_name for r in rows] == ["Checking", "Savings"]
        assert {r.institution_name for r in rows} == {"First Platypus Bank"}
        assert {r.access_token for r in rows} == {"access-sandbox-1"}

    def test_relink_reuses_rows(self, client, db, mock_plaid):
        body = {"public_token": "public-sandbox-1"}
        first = client.post("/api/plaid/exchange-token", json=body).json()
        second = client.post("/api/plaid/exchange-token", json=body).json()

        assert first["accounts"] == second["accounts"]
        assert db.query(PlaidItem).count() == 1

    def test_missing_public_token(self, client):
        response = client.post("/api/plaid/exchange-token", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing public_token"

    def test_exchange_failure(self, client, db):
        _use(MockPlaidClient(failures={"exchange_public_token": ProviderAPIError("Plaid error (INVALID_PUBLIC_TOKEN)")}))

        response = client.post("/api/plaid/exchange-token", json={"public_token": "bad"})

        assert response.status_code == 500
        assert db.query(PlaidItem).count() == 0

    def test_institution_lookup_failure_is_tolerated(self, client, db):
        _use(MockPlaidClient(failures={"get_institution": ProviderAPIError("Plaid error (INSTITUTION_NOT_FOUND)")}))

        response = client.post(
            "/api/plaid/exchange-token", json={"public_token": "public-1", "institution_id": "ins_x"}
        )

        assert response.status_code == 200
        assert db.query(PlaidItem).one().institution_name is None
