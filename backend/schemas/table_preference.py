"""Pydantic schemas for table display preferences."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel

ContextType = Literal["account", "category", "all", "merchants", "merchant_categories"]


class TablePreferenceSet(BaseModel):
    """Request body for saving a table's layout."""

    context_type: ContextType
    context_id: Optional[str] = None
    column_visibility: dict[str, Any]
    column_order: list[Any]
    column_sizing: dict[str, Any]
    sorting: list[Any]


class TablePreferenceResponse(BaseModel):
    """A saved table layout."""

    id: str
    context_type: str
    context_id: Optional[str] = None
    column_visibility: dict[str, Any]
    column_order: list[Any]
    column_sizing: dict[str, Any]
    sorting: list[Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TablePreferenceEnvelope(BaseModel):
    success: bool = True
    preferences: Optional[TablePreferenceResponse] = None
