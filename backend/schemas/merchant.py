"""Pydantic schemas for merchants."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class MerchantCreate(BaseModel):
    """Schema for creating a merchant."""

    name: str
    default_category_id: Optional[str] = None
    default_tag_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Merchant name is required")
        return v.strip()


class MerchantUpdate(BaseModel):
    """Schema for updating a merchant. Only fields sent are applied."""

    name: Optional[str] = None
    default_category_id: Optional[str] = None
    default_tag_id: Optional[str] = None
    merchant_entity_id: Optional[str] = None
    notes: Optional[str] = None
    logo_url: Optional[str] = None
    confidence_level: Optional[str] = None
    is_confirmed: Optional[bool] = None


class MerchantBulkUpdate(BaseModel):
    """Schema for setting a merchant's defaults and optionally its transactions.

    ``entity_id`` is the older name for ``tag_id`` and is used when
    ``tag_id`` is not sent.
    """

    merchant_name: Optional[str] = None
    category_id: Optional[str] = None
    tag_id: Optional[str] = None
    entity_id: Optional[str] = None
    update_existing: bool = False


class MerchantMerge(BaseModel):
    target_merchant_id: Optional[str] = None


class MerchantResponse(BaseModel):
    """Schema for a merchant."""

    id: str
    name: str
    merchant_entity_id: Optional[str] = None
    default_category_id: Optional[str] = None
    default_tag_id: Optional[str] = None
    notes: Optional[str] = None
    is_confirmed: bool = False
    merged_into_merchant_id: Optional[str] = None
    logo_url: Optional[str] = None
    confidence_level: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MerchantWithStats(MerchantResponse):
    """Merchant with default names and transaction statistics."""

    default_category_name: Optional[str] = None
    default_tag_name: Optional[str] = None
    transaction_count: int = 0
    total_amount: Decimal = Decimal("0")
    last_transaction_date: Optional[date] = None


class MerchantBulkUpdateResponse(BaseModel):
    success: bool = True
    merchant: MerchantResponse
    transactions_updated: int


class MerchantSyncResponse(BaseModel):
    success: bool = True
    created: int
    updated: int


class MerchantNamesResponse(BaseModel):
    names: list[str]
