"""Integration tests for investment transactions and holdings endpoints."""

from datetime import date
from decimal import Decimal

import pytest

from integrations.plaid_types import PlaidInvestmentTransaction, PlaidSecurity
from services.investment_service import InvestmentService
from tests.fixtures import create_account


@pytest.fixture
def brokerage(db):
    account = create_account(db, account_type="investment", account_name="Brokerage")
    InvestmentService.upsert_security(
        db, PlaidSecurity(security_id="sec-vti", name="Vanguard Total Stock", ticker_symbol="VTI",
                          close_price=Decimal("250"))
    )
    for txn_id, txn_type, day in (("inv-1", "buy", 2), ("inv-2", "buy", 9)):
        InvestmentService.upsert_investment_transaction(
            db,
            PlaidInvestmentTransaction(
                investment_transaction_id=txn_id,
                account_id="acc-1",
                date=date(2024, 1, day),
                security_id="sec-vti",
                name=f"BUY VTI {day}",
                amount=Decimal("200"),
                quantity=Decimal("1"),
                price=Decimal("200"),
                type=txn_type,
                iso_currency_code="USD",
            ),
            account.id,
        )
    db.commit()
    return account


def test_list_investment_transactions(client, brokerage):
    response = client.get("/api/investment-transactions")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    first = data["transactions"][0]
    assert first["plaid_investment_transaction_id"] == "inv-2"
    assert first["security_ticker"] == "VTI"
    assert first["institution_name"] == "First Platypus Bank"

    assert client.get("/api/investment-transactions", params={"limit": 1}).json()["count"] == 1


def test_holdings(client, brokerage):
    response = client.get("/api/holdings")

    assert response.status_code == 200
    [holding] = response.json()["holdings"]
    assert holding["security_name"] == "Vanguard Total Stock"
    assert Decimal(holding["quantity"]) == Decimal("2")
    assert Decimal(holding["cost_basis"]) == Decimal("400")
    assert Decimal(holding["current_value"]) == Decimal("500")
    assert Decimal(holding["gain_loss_percent"]) == Decimal("25")


def test_no_holdings(client):
    assert client.get("/api/holdings").json() == {"success": True, "holdings": [], "count": 0}
