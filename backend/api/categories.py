"""Categories and tags API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import get_or_404
from database import get_db
from models import Category, Tag
from schemas import (
    CategoryBulkUpdate, CategoryCreate, CategoryResponse, CategoryUpdate,
    TagCreate, TagResponse, TagUpdate,
)
from services.category_service import CategoryService, CategoryValidationError, TagService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])
tags_router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """List all categories by name."""
    return CategoryService.list_categories(db)


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(body: CategoryCreate, db: Session = Depends(get_db)):
    """Create a category."""
    if body.parent_id:
        get_or_404(db, Category, body.parent_id, "Parent category not found")
    category = CategoryService.create_category(db, **body.model_dump())
    db.commit()
    db.refresh(category)
    return category


@router.post("/bulk-update")
def bulk_update_categories(body: CategoryBulkUpdate, db: Session = Depends(get_db)):
    """Apply the same edit to several categories."""
    try:
        updated = CategoryService.bulk_update(
            db, body.category_ids, body.updates.model_dump(exclude_unset=True)
        )
    except CategoryValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return {"success": True, "updatedCount": updated}


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: str, body: CategoryUpdate, db: Session = Depends(get_db)):
    """Update a category, rejecting parents that would create a cycle."""
    category = get_or_404(db, Category, category_id, "Category not found")
    try:
        CategoryService.update_category(db, category, body.model_dump(exclude_unset=True))
    except CategoryValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    """Delete a category; its children become top-level."""
    category = get_or_404(db, Category, category_id, "Category not found")
    CategoryService.delete_category(db, category)
    db.commit()
    return {"success": True}


@tags_router.get("", response_model=list[TagResponse])
def list_tags(db: Session = Depends(get_db)):
    """List all tags by name."""
    return TagService.list_tags(db)


@tags_router.post("", response_model=TagResponse, status_code=201)
def create_tag(body: TagCreate, db: Session = Depends(get_db)):
    """Create a tag."""
    tag = TagService.create_tag(db, body.name, body.color)
    db.commit()
    db.refresh(tag)
    return tag


@tags_router.patch("/{tag_id}", response_model=TagResponse)
def update_tag(tag_id: str, body: TagUpdate, db: Session = Depends(get_db)):
    """Rename or recolor a tag."""
    tag = get_or_404(db, Tag, tag_id, "Tag not found")
    TagService.update_tag(db, tag, body.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(tag)
    return tag


@tags_router.delete("/{tag_id}")
def delete_tag(tag_id: str, db: Session = Depends(get_db)):
    """Delete a tag and clear it wherever it is used."""
    tag = get_or_404(db, Tag, tag_id, "Tag not found")
    TagService.delete_tag(db, tag)
    db.commit()
    return {"success": True}
