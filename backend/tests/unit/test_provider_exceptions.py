"""Unit tests for the provider exception hierarchy."""

import pytest

from integrations.exceptions import (
    ProviderAPIError,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderDataError,
    ProviderError,
)


@pytest.mark.parametrize(
    "exc",
    [
        ProviderAuthError("ITEM_LOGIN_REQUIRED"),
        ProviderConnectionError("timeout"),
        ProviderAPIError("bad request", status_code=400),
        ProviderDataError("unexpected response"),
    ],
)
def test_all_are_provider_errors(exc):
    assert isinstance(exc, ProviderError)
    assert exc.provider_name == "Plaid"


@pytest.mark.parametrize(
    "status_code,retriable",
    [(429, True), (500, True), (503, True), (400, False), (404, False), (None, False)],
)
def test_api_error_retriable(status_code, retriable):
    assert ProviderAPIError("x", status_code=status_code).retriable is retriable


def test_connection_error_retriable_by_default():
    assert ProviderConnectionError("refused").retriable is True
    assert ProviderConnectionError("dns", retriable=False).retriable is False


def test_auth_and_data_errors_not_retriable():
    assert ProviderAuthError("ITEM_LOGIN_REQUIRED", error_code="ITEM_LOGIN_REQUIRED").retriable is False
    assert ProviderDataError("bad payload").retriable is False
