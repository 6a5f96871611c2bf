"""Category and tag management service."""

import logging

from sqlalchemy.orm import Session

from models import Category, Merchant, Tag, Transaction

logger = logging.getLogger(__name__)

CATEGORY_EDITABLE_FIELDS = (
    "name",
    "parent_id",
    "description",
    "color",
    "icon",
    "is_parent_category",
    "plaid_description",
)


class CategoryValidationError(ValueError):
    """Raised when a category edit would break the hierarchy."""


class CategoryService:
    """CRUD for hierarchical categories.

    Writes ``flush()``; the caller commits.
    """

    @staticmethod
    def list_categories(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.name).all()

    @staticmethod
    def create_category(
        db: Session,
        name: str,
        *,
        parent_id: str | None = None,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        is_parent_category: bool = False,
    ) -> Category:
        category = Category(
            name=name,
            parent_id=None if is_parent_category else (parent_id or None),
            description=description,
            color=color,
            icon=icon,
            is_parent_category=is_parent_category,
        )
        db.add(category)
        db.flush()
        logger.info("Created category: %s", name)
        return category

    @staticmethod
    def _check_parent(db: Session, category_id: str, parent_id: str) -> None:
        """Reject a parent that is the category itself or one of its descendants."""
        if parent_id == category_id:
            raise CategoryValidationError("A category cannot be its own parent")

        parents = dict(db.query(Category.id, Category.parent_id).all())
        if parent_id not in parents:
            raise CategoryValidationError("Parent category not found")

        visited = set()
        current = parent_id
        while current and current not in visited:
            if current == category_id:
                raise CategoryValidationError(
                    "Cannot set parent: would create a circular reference"
                )
            visited.add(current)
            current = parents.get(current)

    @staticmethod
    def update_category(db: Session, category: Category, fields: dict) -> Category:
        """Apply edits to a category.

        An empty ``parent_id`` clears the parent. Turning a category into a
        parent clears its own parent; turning a parent back into a leaf
        detaches its children.

        Raises:
            CategoryValidationError: If the new parent would create a cycle.
        """
        fields = dict(fields)
        if fields.get("parent_id") == "":
            fields["parent_id"] = None
        if fields.get("is_parent_category") is True:
            fields["parent_id"] = None
        if fields.get("parent_id"):
            CategoryService._check_parent(db, category.id, fields["parent_id"])

        if fields.get("is_parent_category") is False and category.is_parent_category:
            CategoryService._detach_children(db, category.id)

        for key, value in fields.items():
            if key in CATEGORY_EDITABLE_FIELDS:
                setattr(category, key, value)
        db.flush()
        return category

    @staticmethod
    def bulk_update(db: Session, category_ids: list[str], fields: dict) -> int:
        """Apply the same edits to several categories. Returns how many were updated."""
        updated = 0
        for category in db.query(Category).filter(Category.id.in_(category_ids)).all():
            CategoryService.update_category(db, category, fields)
            updated += 1
        return updated

    @staticmethod
    def delete_category(db: Session, category: Category) -> None:
        """Delete a category, detaching its children and clearing references to it."""
        CategoryService._detach_children(db, category.id)
        db.query(Transaction).filter(Transaction.category_id == category.id).update(
            {Transaction.category_id: None}
        )
        db.query(Merchant).filter(Merchant.default_category_id == category.id).update(
            {Merchant.default_category_id: None}
        )
        db.delete(category)
        db.flush()
        logger.info("Deleted category: %s", category.name)

    @staticmethod
    def _detach_children(db: Session, category_id: str) -> None:
        db.query(Category).filter(Category.parent_id == category_id).update(
            {Category.parent_id: None}
        )


class TagService:
    """CRUD for flat tags."""

    @staticmethod
    def list_tags(db: Session) -> list[Tag]:
        return db.query(Tag).order_by(Tag.name).all()

    @staticmethod
    def create_tag(db: Session, name: str, color: str | None = None) -> Tag:
        tag = Tag(name=name, color=color)
        db.add(tag)
        db.flush()
        logger.info("Created tag: %s", name)
        return tag

    @staticmethod
    def update_tag(db: Session, tag: Tag, fields: dict) -> Tag:
        for key in ("name", "color"):
            if key in fields:
                setattr(tag, key, fields[key])
        db.flush()
        return tag

    @staticmethod
    def delete_tag(db: Session, tag: Tag) -> None:
        """Delete a tag and clear it from transactions and merchant defaults."""
        db.query(Transaction).filter(Transaction.tag_id == tag.id).update(
            {Transaction.tag_id: None}
        )
        db.query(Merchant).filter(Merchant.default_tag_id == tag.id).update(
            {Merchant.default_tag_id: None}
        )
        db.delete(tag)
        db.flush()
        logger.info("Deleted tag: %s", tag.name)
