"""Tests for services.credential_manager."""

from unittest.mock import patch

import pytest

from services.credential_manager import (
    CREDENTIAL_KEYS,
    SERVICE_NAME,
    delete_credential,
    get_credential,
    list_credentials,
    set_credential,
)


@pytest.fixture
def mock_keyring():
    with patch("services.credential_manager.keyring") as mk:
        yield mk


# ---------------------------------------------------------------------------
# get_credential
# ---------------------------------------------------------------------------


class TestGetCredential:
    def test_returns_value(self, mock_keyring):
        mock_keyring.get_password.return_value = "secret123"

        assert get_credential("PLAID_SECRET") == "secret123"
        mock_keyring.get_password.assert_called_once_with(SERVICE_NAME, "PLAID_SECRET")

    def test_returns_none_when_not_found(self, mock_keyring):
        mock_keyring.get_password.return_value = None
        assert get_credential("PLAID_SECRET") is None

    def test_returns_none_on_backend_error(self, mock_keyring):
        mock_keyring.get_password.side_effect = RuntimeError("No recommended backend")
        assert get_credential("PLAID_SECRET") is None


# ---------------------------------------------------------------------------
# set_credential
# ---------------------------------------------------------------------------


class TestSetCredential:
    def test_stores_value(self, mock_keyring):
        assert set_credential("PLAID_CLIENT_ID", "client-123") is True
        mock_keyring.set_password.assert_called_once_with(SERVICE_NAME, "PLAID_CLIENT_ID", "client-123")

    def test_rejects_non_credential_key(self, mock_keyring):
        assert set_credential("DATABASE_URL", "sqlite://") is False
        mock_keyring.set_password.assert_not_called()

    @pytest.mark.parametrize("value", ["", "   "])
    def test_rejects_empty_value(self, mock_keyring, value):
        assert set_credential("PLAID_SECRET", value) is False
        mock_keyring.set_password.assert_not_called()

    def test_returns_false_on_backend_error(self, mock_keyring):
        mock_keyring.set_password.side_effect = RuntimeError("locked")
        assert set_credential("PLAID_SECRET", "s") is False


# ---------------------------------------------------------------------------
# delete_credential / list_credentials
# ---------------------------------------------------------------------------


class TestDeleteCredential:
    def test_deletes(self, mock_keyring):
        assert delete_credential("PLAID_SECRET") is True
        mock_keyring.delete_password.assert_called_once_with(SERVICE_NAME, "PLAID_SECRET")

    def test_rejects_non_credential_key(self, mock_keyring):
        assert delete_credential("LOG_LEVEL") is False

    def test_missing_entry(self, mock_keyring):
        mock_keyring.delete_password.side_effect = RuntimeError("not found")
        assert delete_credential("PLAID_SECRET") is False


class TestListCredentials:
    def test_only_stored_keys(self, mock_keyring):
        mock_keyring.get_password.side_effect = lambda service, key: (
            "client-123" if key == "PLAID_CLIENT_ID" else None
        )

        assert list_credentials() == {"PLAID_CLIENT_ID": "client-123"}
        assert mock_keyring.get_password.call_count == len(CREDENTIAL_KEYS)
