"""Lookups and response builders shared by the route modules."""

from typing import TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

from database import Base
from models import InvestmentTransaction, Transaction

T = TypeVar("T", bound=Base)


def get_or_404(db: Session, model: type[T], entity_id: str, detail: str = "Not found") -> T:
    """Load ``model`` by primary key.

    Raises:
        HTTPException: 404 with ``detail`` when no row has that id.
    """
    entity = db.get(model, entity_id)
    if entity is None:
        raise HTTPException(status_code=404, detail=detail)
    return entity


def _columns(row: Base) -> dict:
    return {attr.key: getattr(row, attr.key) for attr in type(row).__mapper__.column_attrs}


def transaction_response_dict(txn: Transaction) -> dict:
    """Transaction columns plus category, tag and account display names."""
    data = _columns(txn)
    account = txn.account
    data.update(
        category_name=txn.category.name if txn.category else None,
        tag_name=txn.tag.name if txn.tag else None,
        institution_name=account.institution_name if account else None,
        account_name=account.display_name if account else None,
    )
    return data


def investment_transaction_response_dict(txn: InvestmentTransaction) -> dict:
    """Investment transaction columns plus security and institution names."""
    data = _columns(txn)
    security = txn.security
    data.update(
        security_name=security.name if security else None,
        security_ticker=security.ticker_symbol if security else None,
        institution_name=txn.account.institution_name if txn.account else None,
    )
    return data
