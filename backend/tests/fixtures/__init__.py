"""Test fixtures and sample data."""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from models import Category, Merchant, PlaidItem, Tag, Transaction


def create_account(
    db: Session,
    item_id: str = "item-1",
    plaid_account_id: str | None = "acc-1",
    access_token: str = "access-sandbox-1",
    institution_name: str = "First Platypus Bank",
    account_type: str = "depository",
    **kwargs,
) -> PlaidItem:
    """Create a linked account row.

    This is a helper function (not a fixture) for tests that need several
    accounts with different ids.
    """
    account = PlaidItem(
        item_id=item_id,
        plaid_account_id=plaid_account_id,
        access_token=access_token,
        institution_name=institution_name,
        account_name=kwargs.pop("account_name", "Checking"),
        account_type=account_type,
        **kwargs,
    )
    db.add(account)
    db.flush()
    return account


def create_transaction(
    db: Session,
    account: PlaidItem,
    plaid_transaction_id: str,
    amount: str = "-12.50",
    txn_date: date = date(2024, 1, 15),
    merchant_name: str | None = None,
    **kwargs,
) -> Transaction:
    """Create a stored transaction (amount already in local sign convention)."""
    txn = Transaction(
        plaid_transaction_id=plaid_transaction_id,
        plaid_item_id=account.id,
        account_id=account.plaid_account_id,
        date=txn_date,
        amount=Decimal(amount),
        name=kwargs.pop("name", merchant_name or "Transaction"),
        merchant_name=merchant_name,
        plaid_merchant_name=merchant_name,
        **kwargs,
    )
    db.add(txn)
    db.flush()
    return txn


@pytest.fixture
def account(db):
    """A committed checking account on item-1."""
    acct = create_account(db)
    db.commit()
    return acct


@pytest.fixture
def category(db):
    cat = Category(name="Groceries", color="#22c55e")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def tag(db):
    t = Tag(name="Business", color="#3b82f6")
    db.add(t)
    db.commit()
    return t


@pytest.fixture
def merchant(db, category):
    """A merchant whose default category is the ``category`` fixture."""
    m = Merchant(name="Trader Joe's", default_category_id=category.id)
    db.add(m)
    db.commit()
    return m
