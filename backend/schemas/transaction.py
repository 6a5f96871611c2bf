"""Pydantic schemas for transactions."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from integrations.parsing_utils import load_json_list, load_json_object


class TransactionUpdate(BaseModel):
    """Schema for editing a transaction. Only fields sent are applied."""

    category_id: Optional[str] = None
    tag_id: Optional[str] = None
    notes: Optional[str] = None
    merchant_name: Optional[str] = None
    is_reviewed: Optional[bool] = None
    is_recurring: Optional[bool] = None


class TransactionBulkUpdate(BaseModel):
    """Schema for applying one edit to many transactions."""

    transaction_ids: list[str] = Field(alias="transactionIds", min_length=1)
    updates: TransactionUpdate

    model_config = ConfigDict(populate_by_name=True)


class TransactionResponse(BaseModel):
    """Schema for a transaction with its category, tag and account names."""

    id: str
    plaid_transaction_id: str
    plaid_item_id: str
    account_id: Optional[str] = None
    date: date
    amount: Decimal
    name: str
    merchant_name: Optional[str] = None
    plaid_merchant_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    tag_id: Optional[str] = None
    tag_name: Optional[str] = None
    institution_name: Optional[str] = None
    account_name: Optional[str] = None
    pending: bool = False
    notes: Optional[str] = None
    is_recurring: bool = False
    is_reviewed: bool = False
    payment_channel: Optional[str] = None
    transaction_code: Optional[str] = None
    iso_currency_code: Optional[str] = None
    unofficial_currency_code: Optional[str] = None
    authorized_date: Optional[date] = None
    authorized_datetime: Optional[datetime] = None
    transaction_datetime: Optional[datetime] = None
    check_number: Optional[str] = None
    merchant_entity_id: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    account_owner: Optional[str] = None
    pending_transaction_id: Optional[str] = None
    original_description: Optional[str] = None
    personal_finance_category_icon_url: Optional[str] = None
    personal_finance_category_version: Optional[str] = None
    location: Optional[dict[str, Any]] = None
    payment_meta: Optional[dict[str, Any]] = None
    personal_finance_category_detailed: Optional[dict[str, Any]] = None
    counterparties: Optional[list[Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("location", "payment_meta", "personal_finance_category_detailed", mode="before")
    @classmethod
    def decode_object(cls, v):
        """Stored JSON text is decoded; malformed blobs read as absent."""
        return load_json_object(v)

    @field_validator("counterparties", mode="before")
    @classmethod
    def decode_list(cls, v):
        return load_json_list(v)


class TransactionListResponse(BaseModel):
    success: bool = True
    transactions: list[TransactionResponse]
    count: int


class BulkUpdateResponse(BaseModel):
    success: bool = True
    updated_count: int = Field(serialization_alias="updatedCount")
