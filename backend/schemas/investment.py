"""Pydantic schemas for investment transactions and holdings."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvestmentTransactionResponse(BaseModel):
    """Investment transaction with security and institution names."""

    id: str
    plaid_investment_transaction_id: str
    plaid_item_id: str
    account_id: Optional[str] = None
    security_id: Optional[str] = None
    security_name: Optional[str] = None
    security_ticker: Optional[str] = None
    institution_name: Optional[str] = None
    date: date
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    iso_currency_code: Optional[str] = None
    unofficial_currency_code: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InvestmentTransactionListResponse(BaseModel):
    success: bool = True
    transactions: list[InvestmentTransactionResponse]
    count: int


class HoldingResponse(BaseModel):
    """A position derived from investment transactions."""

    plaid_item_id: str
    account_id: Optional[str] = None
    security_id: str
    security_name: Optional[str] = None
    security_ticker: Optional[str] = None
    institution_name: Optional[str] = None
    currency_code: str
    quantity: Decimal
    cost_basis: Decimal
    current_price: Decimal
    current_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal

    model_config = ConfigDict(from_attributes=True)


class HoldingListResponse(BaseModel):
    success: bool = True
    holdings: list[HoldingResponse]
    count: int
