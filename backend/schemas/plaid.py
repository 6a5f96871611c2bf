"""Pydantic schemas for Plaid Link endpoints."""

from typing import Optional

from pydantic import BaseModel


class LinkTokenRequest(BaseModel):
    """Optional webhook URL to register on the new Item."""

    webhook: Optional[str] = None


class LinkTokenResponse(BaseModel):
    link_token: str


class ExchangeTokenRequest(BaseModel):
    public_token: Optional[str] = None
    institution_id: Optional[str] = None


class ExchangeTokenResponse(BaseModel):
    success: bool = True
    item_id: str
    accounts_created: int
    accounts: list[str]
