"""Integration tests for sync API endpoints."""

import pytest

from api.sync import get_sync_service
from main import app
from models import Transaction
from services.sync_service import NO_ACCOUNTS_MESSAGE, SyncService
from tests.fixtures.mocks import MockPlaidClient, make_page, make_transaction


@pytest.fixture
def use_plaid():
    """Swap in a MockPlaidClient scripted for one test."""

    def _use(**kwargs):
        plaid = MockPlaidClient(**kwargs)
        app.dependency_overrides[get_sync_service] = lambda: SyncService(plaid_client=plaid)
        return plaid

    return _use


class FailingSyncService(SyncService):
    def trigger_full_sync(self, db):
        raise RuntimeError("database is locked")


def test_full_sync_response(client, db, account, use_plaid):
    use_plaid(pages=[make_page(added=[make_transaction("t1"), make_transaction("t2")], next_cursor="c-1")])

    response = client.post("/api/sync")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["synced"] == 1
    assert data["added"] == 2
    assert data["totalInDatabase"] == 2
    assert db.query(Transaction).count() == 2


def test_full_sync_replaces_existing_rows(client, db, account, use_plaid):
    use_plaid(pages=[make_page(added=[make_transaction("t1")])])
    client.post("/api/sync")
    use_plaid(pages=[make_page(added=[make_transaction("t9")])])

    response = client.post("/api/sync")

    assert response.json()["totalInDatabase"] == 1
    assert [t.plaid_transaction_id for t in db.query(Transaction).all()] == ["t9"]


def test_sync_without_accounts(client):
    response = client.post("/api/sync")

    assert response.status_code == 200
    assert response.json()["message"] == NO_ACCOUNTS_MESSAGE
    assert response.json()["synced"] == 0


def test_sync_conflict_while_locked(client, account):
    SyncService._sync_lock.acquire()
    try:
        response = client.post("/api/sync")
    finally:
        SyncService._sync_lock.release()

    assert response.status_code == 409
    assert "already in progress" in response.json()["detail"]


def test_unexpected_error_returns_500(client):
    app.dependency_overrides[get_sync_service] = lambda: FailingSyncService()

    response = client.post("/api/sync")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database is locked"}


def test_institution_failure_is_not_a_request_failure(client, db, account, use_plaid):
    use_plaid(failures={"sync_transactions": RuntimeError("ITEM_LOGIN_REQUIRED")})

    response = client.post("/api/sync")

    assert response.status_code == 200
    db.refresh(account)
    assert account.sync_status == "error"
    assert "ITEM_LOGIN_REQUIRED" in account.error_message


def test_sync_status_lists_cursors(client, account, use_plaid):
    use_plaid(pages=[make_page(next_cursor="cursor-after")])
    client.post("/api/sync")

    response = client.get("/api/sync")

    assert response.status_code == 200
    [item] = response.json()["items"]
    assert item["item_id"] == "item-1"
    assert item["cursor"] == "cursor-after"
    assert "access_token" not in item
