"""Integration tests for accounts API endpoints."""

from tests.fixtures import create_account, create_transaction


def test_list_accounts_hides_access_token(client, account):
    response = client.get("/api/accounts")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    [acct] = data["accounts"]
    assert acct["display_name"] == "Checking"
    assert acct["institution_name"] == "First Platypus Bank"
    assert "access_token" not in acct


def test_inactive_accounts_listed(client, db):
    create_account(db)
    create_account(db, plaid_account_id="acc-closed", sync_status="inactive")
    db.commit()

    statuses = sorted(a["sync_status"] for a in client.get("/api/accounts").json()["accounts"])

    assert statuses == ["active", "inactive"]


def test_rename_and_hide(client, account):
    response = client.patch(f"/api/accounts/{account.id}", json={"custom_name": "Joint", "is_hidden": True})

    assert response.status_code == 200
    assert response.json()["display_name"] == "Joint"
    assert response.json()["is_hidden"] is True

    response = client.patch(f"/api/accounts/{account.id}", json={"custom_name": "   "})
    assert response.json()["display_name"] == "Checking"
    assert response.json()["is_hidden"] is True


def test_update_missing_account(client):
    response = client.patch("/api/accounts/nope", json={"is_hidden": True})
    assert response.status_code == 404


def test_unreviewed_counts(client, db, account):
    create_transaction(db, account, "t1")
    create_transaction(db, account, "t2", is_reviewed=True)
    db.commit()

    response = client.get("/api/accounts/unreviewed-counts")

    assert response.status_code == 200
    assert response.json()["counts"] == {account.id: 1}
