"""Pydantic schemas for sync and webhook endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.account import AccountSyncStatus


class SyncResponse(BaseModel):
    """Result of a manual full resync."""

    success: bool = True
    message: str
    synced: int
    added: int = 0
    modified: int = 0
    removed: int = 0
    total_in_database: int = Field(0, serialization_alias="totalInDatabase")


class SyncStatusResponse(BaseModel):
    success: bool = True
    items: list[AccountSyncStatus]


class PlaidWebhook(BaseModel):
    """Webhook payload posted by Plaid. Unknown fields are kept."""

    webhook_type: Optional[str] = None
    webhook_code: Optional[str] = None
    item_id: Optional[str] = None

    model_config = ConfigDict(extra="allow")
