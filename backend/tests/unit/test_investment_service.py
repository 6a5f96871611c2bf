"""Tests for InvestmentService storage and holdings derivation."""

from datetime import date
from decimal import Decimal

from integrations.plaid_types import PlaidInvestmentTransaction, PlaidSecurity
from models import InvestmentTransaction, Security
from services.investment_service import InvestmentService
from tests.fixtures import create_account


def _inv_txn(txn_id, txn_type, quantity, price, day, security_id="sec-vti", fees=None, **kwargs):
    return PlaidInvestmentTransaction(
        investment_transaction_id=txn_id,
        account_id="acc-1",
        date=date(2024, 1, day),
        security_id=security_id,
        quantity=Decimal(quantity),
        price=Decimal(price),
        amount=Decimal(quantity) * Decimal(price),
        fees=Decimal(fees) if fees is not None else None,
        type=txn_type,
        iso_currency_code="USD",
        **kwargs,
    )


class TestUpserts:
    def test_security_overwritten(self, db):
        InvestmentService.upsert_security(db, PlaidSecurity(security_id="sec-1", name=None))
        row = InvestmentService.upsert_security(
            db, PlaidSecurity(security_id="sec-1", name="Vanguard Total Stock", ticker_symbol="VTI")
        )

        assert row.name == "Vanguard Total Stock"
        assert row.ticker_symbol == "VTI"
        assert db.query(Security).count() == 1

    def test_unnamed_security(self, db):
        row = InvestmentService.upsert_security(db, PlaidSecurity(security_id="sec-1"))
        assert row.name == "Unknown Security"

    def test_investment_transaction_keeps_sign_and_owner(self, db):
        first = create_account(db, account_type="investment")
        second = create_account(db, plaid_account_id="acc-2", account_type="investment")
        txn = _inv_txn("inv-1", "sell", "2", "50", 3)
        txn.amount = Decimal("-100")

        InvestmentService.upsert_investment_transaction(db, txn, first.id)
        row = InvestmentService.upsert_investment_transaction(db, txn, second.id)

        assert row.amount == Decimal("-100")
        assert row.plaid_item_id == first.id
        assert db.query(InvestmentTransaction).count() == 1


class TestCalculateHoldings:
    def test_average_cost_after_partial_sell(self, db):
        account = create_account(db, account_type="investment")
        InvestmentService.upsert_security(
            db,
            PlaidSecurity(
                security_id="sec-vti", name="Vanguard Total Stock", ticker_symbol="VTI",
                close_price=Decimal("180"),
            ),
        )
        for txn in (
            _inv_txn("inv-1", "buy", "10", "100", 2),
            _inv_txn("inv-2", "buy", "10", "200", 3),
            _inv_txn("inv-3", "sell", "5", "190", 4),
        ):
            InvestmentService.upsert_investment_transaction(db, txn, account.id)

        [holding] = InvestmentService.calculate_holdings(db)

        assert holding.security_ticker == "VTI"
        assert holding.institution_name == "First Platypus Bank"
        assert holding.quantity == Decimal("15")
        assert holding.cost_basis == Decimal("2250")
        assert holding.current_value == Decimal("2700")
        assert holding.gain_loss == Decimal("450")
        assert holding.gain_loss_percent == Decimal("20")

    def test_buy_fees_added_to_cost(self, db):
        account = create_account(db, account_type="investment")
        InvestmentService.upsert_investment_transaction(
            db, _inv_txn("inv-1", "buy", "4", "25", 2, fees="1.50"), account.id
        )

        [holding] = InvestmentService.calculate_holdings(db)

        assert holding.cost_basis == Decimal("101.50")
        assert holding.current_price == Decimal("0")

    def test_closed_and_cash_only_positions_dropped(self, db):
        account = create_account(db, account_type="investment")
        for txn in (
            _inv_txn("inv-1", "buy", "3", "10", 2),
            _inv_txn("inv-2", "sell", "3", "12", 5),
            _inv_txn("inv-3", "cash", "0", "0", 6, security_id=None),
        ):
            InvestmentService.upsert_investment_transaction(db, txn, account.id)

        assert InvestmentService.calculate_holdings(db) == []

    def test_positions_tracked_per_account(self, db):
        first = create_account(db, account_type="investment")
        second = create_account(db, plaid_account_id="acc-2", account_type="investment")
        InvestmentService.upsert_investment_transaction(db, _inv_txn("inv-1", "buy", "1", "10", 2), first.id)
        InvestmentService.upsert_investment_transaction(db, _inv_txn("inv-2", "buy", "2", "10", 2), second.id)

        holdings = InvestmentService.calculate_holdings(db)

        assert sorted(h.quantity for h in holdings) == [Decimal("1"), Decimal("2")]
