"""Tests for shared API helpers."""

from datetime import date

import pytest
from fastapi import HTTPException

from api.helpers import get_or_404, investment_transaction_response_dict, transaction_response_dict
from models import InvestmentTransaction, Security, Tag
from tests.fixtures import create_account, create_transaction


class TestGetOr404:
    def test_returns_entity(self, db, tag):
        assert get_or_404(db, Tag, tag.id, "Tag not found").name == "Business"

    def test_raises_404_when_missing(self, db):
        with pytest.raises(HTTPException) as exc_info:
            get_or_404(db, Tag, "nonexistent-id", "Tag not found")
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Tag not found"


class TestTransactionResponseDict:
    def test_joined_names(self, db, category, tag):
        account = create_account(db, custom_name="Joint Checking")
        txn = create_transaction(db, account, "t1", category_id=category.id, tag_id=tag.id)

        data = transaction_response_dict(txn)

        assert data["plaid_transaction_id"] == "t1"
        assert data["category_name"] == "Groceries"
        assert data["tag_name"] == "Business"
        assert data["account_name"] == "Joint Checking"
        assert data["institution_name"] == "First Platypus Bank"

    def test_unassigned(self, db):
        txn = create_transaction(db, create_account(db), "t1")

        data = transaction_response_dict(txn)

        assert data["category_name"] is None
        assert data["tag_name"] is None


class TestInvestmentTransactionResponseDict:
    def test_joined_names(self, db):
        account = create_account(db, account_type="investment")
        db.add(Security(plaid_security_id="sec-1", name="Vanguard Total Stock", ticker_symbol="VTI"))
        txn = InvestmentTransaction(
            plaid_investment_transaction_id="inv-1",
            plaid_item_id=account.id,
            account_id="acc-1",
            security_id="sec-1",
            date=date(2024, 1, 15),
            name="Buy VTI",
        )
        db.add(txn)
        db.flush()

        data = investment_transaction_response_dict(txn)

        assert data["plaid_investment_transaction_id"] == "inv-1"
        assert data["security_name"] == "Vanguard Total Stock"
        assert data["security_ticker"] == "VTI"
        assert data["institution_name"] == "First Platypus Bank"
