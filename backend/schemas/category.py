"""Pydantic schemas for categories and tags."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_parent_category: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryUpdate(BaseModel):
    """Schema for updating a category. An empty parent_id clears the parent."""

    name: Optional[str] = None
    parent_id: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_parent_category: Optional[bool] = None
    plaid_description: Optional[str] = None


class CategoryBulkUpdate(BaseModel):
    """Schema for applying one edit to several categories."""

    category_ids: list[str] = Field(alias="categoryIds", min_length=1)
    updates: CategoryUpdate

    model_config = ConfigDict(populate_by_name=True)


class CategoryResponse(BaseModel):
    """Schema for a category."""

    id: str
    name: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_parent_category: bool = False
    plaid_detailed_category_id: Optional[str] = None
    plaid_primary_category: Optional[str] = None
    plaid_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tag name is required")
        return v


class TagUpdate(BaseModel):
    """Schema for updating a tag."""

    name: Optional[str] = None
    color: Optional[str] = None


class TagResponse(BaseModel):
    """Schema for a tag."""

    id: str
    name: str
    color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
