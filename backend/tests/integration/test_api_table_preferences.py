"""Integration tests for table preference endpoints."""

URL = "/api/table-preferences"

BODY = {
    "context_type": "account",
    "context_id": "acc-1",
    "column_visibility": {"notes": False},
    "column_order": ["date", "name", "amount"],
    "column_sizing": {"name": 300},
    "sorting": [{"id": "amount", "desc": False}],
}


def test_get_unsaved(client):
    response = client.get(URL, params={"contextType": "account", "contextId": "acc-1"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "preferences": None}


def test_save_then_get(client):
    saved = client.post(URL, json=BODY)
    assert saved.status_code == 200
    assert saved.json()["preferences"]["column_order"] == ["date", "name", "amount"]

    client.post(URL, json={**BODY, "column_order": ["amount"]})

    prefs = client.get(URL, params={"contextType": "account", "contextId": "acc-1"}).json()["preferences"]
    assert prefs["column_order"] == ["amount"]
    assert prefs["column_sizing"] == {"name": 300}


def test_context_without_id(client):
    client.post(URL, json={**BODY, "context_type": "merchants", "context_id": None})

    assert client.get(URL, params={"contextType": "merchants"}).json()["preferences"] is not None
    assert client.get(URL, params={"contextType": "merchants", "contextId": "x"}).json()["preferences"] is None


def test_invalid_context_type(client):
    assert client.get(URL, params={"contextType": "dashboard"}).status_code == 400
    assert client.delete(URL, params={"contextType": "dashboard"}).status_code == 400
    assert client.post(URL, json={**BODY, "context_type": "dashboard"}).status_code == 422


def test_delete(client):
    client.post(URL, json=BODY)

    params = {"contextType": "account", "contextId": "acc-1"}
    assert client.delete(URL, params=params).json() == {"success": True}
    assert client.delete(URL, params=params).status_code == 404
