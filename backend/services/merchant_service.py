"""Merchant service - merchant lookup, creation, editing and merging."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from integrations.parsing_utils import load_json_object
from integrations.plaid_types import PersonalFinanceCategory
from models import Category, Merchant, Transaction

logger = logging.getLogger(__name__)

MERCHANT_EDITABLE_FIELDS = (
    "name",
    "default_category_id",
    "default_tag_id",
    "merchant_entity_id",
    "notes",
    "logo_url",
    "confidence_level",
    "is_confirmed",
)


class DuplicateMerchantError(Exception):
    """Raised when a merchant name is already taken."""


class MerchantService:
    """Operations on merchants and the transactions that reference them by name.

    Writes ``flush()``; the caller commits.
    """

    @staticmethod
    def get_by_name(db: Session, name: str) -> Merchant | None:
        return db.query(Merchant).filter(Merchant.name == name).first()

    @staticmethod
    def get_by_entity_id(db: Session, entity_id: str | None) -> Merchant | None:
        if not entity_id:
            return None
        return db.query(Merchant).filter(Merchant.merchant_entity_id == entity_id).first()

    @staticmethod
    def ensure_merchant_exists(
        db: Session,
        name: str | None,
        logo_url: str | None = None,
        pfc: PersonalFinanceCategory | None = None,
        entity_id: str | None = None,
    ) -> Merchant | None:
        """Find the merchant for a transaction, creating it when absent.

        Lookup is by entity id first, then by name. A new merchant gets the
        category linked to the PFC detailed code (if one exists) as its
        default. An existing merchant has its empty entity id, logo and
        confidence level back-filled.

        Returns:
            The merchant, or None if ``name`` is empty.
        """
        if not name:
            return None

        confidence_level = pfc.confidence_level if pfc else None
        detailed = pfc.detailed if pfc else None

        merchant = MerchantService.get_by_entity_id(db, entity_id)
        if merchant is None:
            merchant = MerchantService.get_by_name(db, name)

        if merchant is None:
            default_category_id = None
            if detailed:
                category = (
                    db.query(Category)
                    .filter(Category.plaid_detailed_category_id == detailed)
                    .first()
                )
                if category is not None:
                    default_category_id = category.id
            merchant = Merchant(
                name=name,
                merchant_entity_id=entity_id,
                default_category_id=default_category_id,
                logo_url=logo_url,
                confidence_level=confidence_level,
            )
            db.add(merchant)
            db.flush()
            logger.info("Created merchant: %s", name)
            return merchant

        changed = False
        if entity_id and not merchant.merchant_entity_id:
            merchant.merchant_entity_id = entity_id
            changed = True
        if logo_url and not merchant.logo_url:
            merchant.logo_url = logo_url
            changed = True
        if confidence_level and not merchant.confidence_level:
            merchant.confidence_level = confidence_level
            changed = True
        if changed:
            db.flush()
        return merchant

    @staticmethod
    def list_merchants(db: Session, include_merged: bool = False) -> list[Merchant]:
        query = db.query(Merchant).options(
            joinedload(Merchant.default_category),
            joinedload(Merchant.default_tag),
        )
        if not include_merged:
            query = query.filter(Merchant.merged_into_merchant_id.is_(None))
        return query.order_by(Merchant.name).all()

    @staticmethod
    def unique_names(db: Session) -> list[str]:
        """Sorted union of transaction merchant names and merchant-table names."""
        from_transactions = (
            db.query(Transaction.merchant_name)
            .filter(Transaction.merchant_name.isnot(None), Transaction.merchant_name != "")
            .distinct()
        )
        names = {name for (name,) in from_transactions}
        names.update(name for (name,) in db.query(Merchant.name))
        return sorted(names)

    @staticmethod
    def get_stats(db: Session) -> dict[str, dict]:
        """Transaction count, total amount and last date per merchant name."""
        rows = (
            db.query(
                Transaction.merchant_name,
                func.count(Transaction.id),
                func.coalesce(func.sum(Transaction.amount), 0),
                func.max(Transaction.date),
            )
            .filter(Transaction.merchant_name.isnot(None), Transaction.merchant_name != "")
            .group_by(Transaction.merchant_name)
            .all()
        )
        return {
            name: {
                "transaction_count": count,
                "total_amount": total,
                "last_transaction_date": last_date,
            }
            for name, count, total, last_date in rows
        }

    @staticmethod
    def create_merchant(
        db: Session,
        name: str,
        *,
        default_category_id: str | None = None,
        default_tag_id: str | None = None,
        notes: str | None = None,
    ) -> Merchant:
        """Create a merchant.

        Raises:
            DuplicateMerchantError: If a merchant with this name exists.
        """
        name = name.strip()
        if MerchantService.get_by_name(db, name) is not None:
            raise DuplicateMerchantError(f"Merchant with name '{name}' already exists")
        merchant = Merchant(
            name=name,
            default_category_id=default_category_id,
            default_tag_id=default_tag_id,
            notes=notes,
        )
        db.add(merchant)
        db.flush()
        logger.info("Created merchant: %s", name)
        return merchant

    @staticmethod
    def update_merchant(db: Session, merchant: Merchant, fields: dict) -> Merchant:
        """Apply the given fields to a merchant.

        Raises:
            DuplicateMerchantError: If renaming onto another merchant's name.
        """
        new_name = fields.get("name")
        if new_name is not None:
            new_name = new_name.strip()
            other = MerchantService.get_by_name(db, new_name)
            if other is not None and other.id != merchant.id:
                raise DuplicateMerchantError(f"Merchant with name '{new_name}' already exists")
            fields = {**fields, "name": new_name}
        for key, value in fields.items():
            if key in MERCHANT_EDITABLE_FIELDS:
                setattr(merchant, key, value)
        db.flush()
        return merchant

    @staticmethod
    def delete_merchant(db: Session, merchant: Merchant) -> None:
        db.query(Merchant).filter(Merchant.merged_into_merchant_id == merchant.id).update(
            {Merchant.merged_into_merchant_id: None}
        )
        db.delete(merchant)
        db.flush()
        logger.info("Deleted merchant: %s", merchant.name)

    @staticmethod
    def confirm_merchant(db: Session, merchant: Merchant) -> Merchant:
        merchant.is_confirmed = True
        db.flush()
        return merchant

    @staticmethod
    def merge_merchants(db: Session, source: Merchant, target: Merchant) -> int:
        """Move the source merchant's transactions onto the target's name.

        The source row is kept and marked as merged into the target.

        Returns:
            Number of transactions renamed.
        """
        if source.id == target.id:
            raise ValueError("Cannot merge a merchant into itself")
        renamed = (
            db.query(Transaction)
            .filter(Transaction.merchant_name == source.name)
            .update({Transaction.merchant_name: target.name})
        )
        source.merged_into_merchant_id = target.id
        db.flush()
        logger.info("Merged merchant %s into %s (%d transactions)", source.name, target.name, renamed)
        return renamed

    @staticmethod
    def bulk_update(db: Session, merchant_name: str, updates: dict, update_existing: bool) -> tuple[Merchant, int]:
        """Set a merchant's defaults and optionally apply them to its transactions.

        ``updates`` may hold ``category_id`` and ``tag_id``; a key that is
        present (even with a None value) is applied, a missing key is left
        alone. The merchant is created if no merchant has this name.

        Returns:
            (merchant, number of transactions changed)
        """
        merchant = MerchantService.get_by_name(db, merchant_name)
        if merchant is None:
            merchant = Merchant(
                name=merchant_name,
                default_category_id=updates.get("category_id"),
                default_tag_id=updates.get("tag_id"),
            )
            db.add(merchant)
            db.flush()
            logger.info("Created merchant: %s", merchant_name)

        updated_count = 0
        txn_values = {}
        if "category_id" in updates:
            txn_values[Transaction.category_id] = updates["category_id"]
        if "tag_id" in updates:
            txn_values[Transaction.tag_id] = updates["tag_id"]
        if update_existing and txn_values:
            updated_count = (
                db.query(Transaction)
                .filter(Transaction.merchant_name == merchant.name)
                .update(txn_values)
            )

        if "category_id" in updates:
            merchant.default_category_id = updates["category_id"]
        if "tag_id" in updates:
            merchant.default_tag_id = updates["tag_id"]
        db.flush()
        return merchant, updated_count

    @staticmethod
    def get_transactions(db: Session, merchant: Merchant) -> list[Transaction]:
        return (
            db.query(Transaction)
            .options(
                joinedload(Transaction.category),
                joinedload(Transaction.tag),
                joinedload(Transaction.account),
            )
            .filter(Transaction.merchant_name == merchant.name)
            .order_by(Transaction.date.desc())
            .all()
        )

    @staticmethod
    def sync_from_transactions(db: Session) -> dict[str, int]:
        """Create or back-fill merchants from stored transactions.

        Returns:
            ``{"created": n, "updated": m}``
        """
        rows = (
            db.query(
                Transaction.merchant_name,
                Transaction.logo_url,
                Transaction.personal_finance_category_detailed,
                Transaction.merchant_entity_id,
            )
            .filter(Transaction.merchant_name.isnot(None), Transaction.merchant_name != "")
            .distinct()
            .all()
        )

        created = 0
        updated = 0
        for name, logo_url, pfc_json, entity_id in rows:
            pfc = PersonalFinanceCategory.from_dict(load_json_object(pfc_json))
            existing = MerchantService.get_by_name(db, name)
            had_logo = bool(existing and existing.logo_url)
            had_confidence = bool(existing and existing.confidence_level)

            merchant = MerchantService.ensure_merchant_exists(db, name, logo_url, pfc, entity_id)
            if merchant is None:
                continue
            if existing is None:
                created += 1
                continue
            if logo_url and not had_logo:
                updated += 1
            if pfc and pfc.confidence_level and not had_confidence:
                updated += 1

        logger.info("Merchant sync: %d created, %d updated", created, updated)
        return {"created": created, "updated": updated}
