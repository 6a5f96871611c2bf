"""Auto-categorization of incoming Plaid transactions.

Added transactions go through the full cascade:

1. Merchant matched by ``merchant_entity_id`` (its default category/tag)
2. Merchant matched by exact name
3. Category linked to the PFC detailed code, auto-created if missing
4. No category

A transaction with a merchant name and no matching merchant then gets a
merchant created for it; when that merchant carries a default category,
its defaults win.

Modified transactions only get a reduced lookup (confirmed merchant, then
the PFC-linked category) and never create categories.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from integrations.plaid_types import PersonalFinanceCategory, PlaidTransaction
from models import Category
from services.merchant_service import MerchantService

logger = logging.getLogger(__name__)


def format_category_name(detailed: str, primary: str | None) -> str:
    """Turn a PFC detailed code into a display name.

    >>> format_category_name("FOOD_AND_DRINK_RESTAURANTS", "FOOD_AND_DRINK")
    'Restaurants'
    """
    name = detailed
    prefix = f"{primary or ''}_"
    if name.startswith(prefix):
        name = name[len(prefix):]
    words = name.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


@dataclass
class Categorization:
    """Category and tag chosen for a transaction (either may be None)."""

    category_id: str | None = None
    tag_id: str | None = None


class CategorizationService:
    """Resolves categories for synced transactions."""

    @staticmethod
    def get_category_for_pfc(db: Session, detailed: str) -> Category | None:
        return (
            db.query(Category)
            .filter(Category.plaid_detailed_category_id == detailed)
            .first()
        )

    @staticmethod
    def get_or_create_category_for_pfc(db: Session, pfc: PersonalFinanceCategory) -> Category:
        """Return the category linked to a PFC detailed code, creating it if needed.

        Only one category may claim a code. If the insert loses a race to
        another writer, the existing row is returned.
        """
        existing = CategorizationService.get_category_for_pfc(db, pfc.detailed)
        if existing is not None:
            return existing

        category = Category(
            name=format_category_name(pfc.detailed, pfc.primary),
            plaid_detailed_category_id=pfc.detailed,
            plaid_primary_category=pfc.primary or "",
        )
        try:
            with db.begin_nested():
                db.add(category)
                db.flush()
        except IntegrityError:
            logger.debug("Category for %s created concurrently; reusing", pfc.detailed)
            existing = CategorizationService.get_category_for_pfc(db, pfc.detailed)
            if existing is None:
                raise
            return existing

        logger.info("Created category %r for Plaid category %s", category.name, pfc.detailed)
        return category

    @staticmethod
    def categorize_added(db: Session, txn: PlaidTransaction) -> Categorization:
        """Run the full cascade for a newly added transaction."""
        result = Categorization()

        merchant = MerchantService.get_by_entity_id(db, txn.merchant_entity_id)
        if merchant is None and txn.merchant_name:
            merchant = MerchantService.get_by_name(db, txn.merchant_name)
        if merchant is not None:
            result.category_id = merchant.default_category_id
            result.tag_id = merchant.default_tag_id

        pfc = txn.personal_finance_category
        if result.category_id is None and pfc is not None and pfc.detailed:
            result.category_id = CategorizationService.get_or_create_category_for_pfc(db, pfc).id

        if txn.merchant_name and merchant is None:
            created = MerchantService.ensure_merchant_exists(
                db, txn.merchant_name, txn.logo_url, pfc, txn.merchant_entity_id
            )
            if created is not None and created.default_category_id:
                result.category_id = created.default_category_id
                result.tag_id = created.default_tag_id

        return result

    @staticmethod
    def categorize_modified(db: Session, txn: PlaidTransaction) -> str | None:
        """Pick a category for a modified transaction, or None to leave it unchanged.

        Ensures the merchant exists first, so merchants are back-filled as
        Plaid refines its data.
        """
        if txn.merchant_name:
            MerchantService.ensure_merchant_exists(
                db,
                txn.merchant_name,
                txn.logo_url,
                txn.personal_finance_category,
                txn.merchant_entity_id,
            )
            merchant = MerchantService.get_by_name(db, txn.merchant_name)
            if merchant is not None and merchant.is_confirmed and merchant.default_category_id:
                return merchant.default_category_id

        pfc = txn.personal_finance_category
        if pfc is not None and pfc.detailed:
            category = CategorizationService.get_category_for_pfc(db, pfc.detailed)
            if category is not None:
                return category.id
        return None
