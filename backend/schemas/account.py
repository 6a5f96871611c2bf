"""Pydantic schemas for linked accounts."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AccountUpdate(BaseModel):
    """Schema for updating an account's display overrides."""

    custom_name: Optional[str] = None
    is_hidden: Optional[bool] = None


class AccountResponse(BaseModel):
    """Schema for a linked account. Never carries the access token."""

    id: str
    item_id: str
    institution_id: Optional[str] = None
    institution_name: Optional[str] = None
    plaid_account_id: Optional[str] = None
    persistent_account_id: Optional[str] = None
    account_name: Optional[str] = None
    official_name: Optional[str] = None
    mask: Optional[str] = None
    account_type: Optional[str] = None
    account_subtype: Optional[str] = None
    holder_category: Optional[str] = None
    custom_name: Optional[str] = None
    is_hidden: bool = False
    display_name: str
    current_balance: Optional[Decimal] = None
    available_balance: Optional[Decimal] = None
    balance_limit: Optional[Decimal] = None
    balance_currency_code: Optional[str] = None
    unofficial_currency_code: Optional[str] = None
    balance_last_updated_datetime: Optional[datetime] = None
    verification_status: Optional[str] = None
    verification_name: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    sync_status: str
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountSyncStatus(AccountResponse):
    """Account with its stored sync cursor."""

    cursor: Optional[str] = None


class AccountListResponse(BaseModel):
    success: bool = True
    accounts: list[AccountResponse]
    count: int


class UnreviewedCountsResponse(BaseModel):
    success: bool = True
    counts: dict[str, int]
