"""Integration tests for the Plaid webhook receiver."""

from api.sync import get_sync_service
from integrations.exceptions import ProviderAPIError
from main import app
from models import Transaction
from services.sync_service import SyncService
from tests.fixtures.mocks import MockPlaidClient, make_page, make_transaction

URL = "/api/webhooks/plaid"


def _sync_updates(item_id="item-1"):
    return {
        "webhook_type": "TRANSACTIONS",
        "webhook_code": "SYNC_UPDATES_AVAILABLE",
        "item_id": item_id,
        "initial_update_complete": True,
        "historical_update_complete": False,
    }


def _use(plaid):
    app.dependency_overrides[get_sync_service] = lambda: SyncService(plaid_client=plaid)


def test_other_codes_acknowledged(client, account, mock_plaid):
    response = client.post(
        URL, json={"webhook_type": "ITEM", "webhook_code": "WEBHOOK_UPDATE_ACKNOWLEDGED", "item_id": "item-1"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Webhook received"}
    assert mock_plaid.sync_calls == []


def test_unknown_item(client):
    response = client.post(URL, json=_sync_updates("item-unknown"))

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_incremental_sync(client, db, account):
    account.cursor = "cursor-5"
    db.commit()
    plaid = MockPlaidClient(pages=[make_page(added=[make_transaction("t1")], next_cursor="cursor-6")])
    _use(plaid)

    response = client.post(URL, json=_sync_updates())

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Sync completed"
    assert data["item_id"] == "item-1"
    assert data["added"] == 1
    assert plaid.sync_calls == [("access-sandbox-1", "cursor-5")]
    db.refresh(account)
    assert account.cursor == "cursor-6"
    assert db.query(Transaction).count() == 1


def test_sync_failure_returns_500(client, db, account):
    _use(MockPlaidClient(failures={"sync_transactions": ProviderAPIError("Plaid error (PRODUCT_NOT_READY)")}))

    response = client.post(URL, json=_sync_updates())

    assert response.status_code == 500
    assert "PRODUCT_NOT_READY" in response.json()["error"]
    db.refresh(account)
    assert account.sync_status == "error"
