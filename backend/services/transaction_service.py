"""Transaction store - upsert/update/delete primitives and read queries."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from integrations.parsing_utils import dump_json
from integrations.plaid_types import PlaidTransaction
from models import Transaction

logger = logging.getLogger(__name__)

# Fields a user may change through the API
USER_EDITABLE_FIELDS = ("category_id", "tag_id", "notes", "merchant_name", "is_reviewed", "is_recurring")


def provider_fields(txn: PlaidTransaction) -> dict:
    """Map a Plaid transaction to Transaction column values.

    Categorization (``category_id``/``tag_id``) and the owning account
    (``plaid_item_id``) are resolved by the caller. The amount is negated
    so expenses are stored negative.
    """
    pfc = txn.personal_finance_category
    return {
        "account_id": txn.account_id,
        "date": txn.date,
        "amount": -txn.amount,
        "name": txn.original_description or txn.merchant_name or "",
        "merchant_name": txn.merchant_name,
        "plaid_merchant_name": txn.merchant_name,
        "pending": txn.pending,
        "payment_channel": txn.payment_channel,
        "transaction_code": txn.transaction_code,
        "iso_currency_code": txn.iso_currency_code,
        "unofficial_currency_code": txn.unofficial_currency_code,
        "authorized_date": txn.authorized_date,
        "authorized_datetime": txn.authorized_datetime,
        "transaction_datetime": txn.transaction_datetime,
        "check_number": txn.check_number,
        "merchant_entity_id": txn.merchant_entity_id,
        "logo_url": txn.logo_url,
        "website": txn.website,
        "account_owner": txn.account_owner,
        "pending_transaction_id": txn.pending_transaction_id,
        "original_description": txn.original_description,
        "location": dump_json(txn.location.to_dict()) if txn.location else None,
        "payment_meta": dump_json(txn.payment_meta.to_dict()) if txn.payment_meta else None,
        "personal_finance_category_detailed": dump_json(pfc.to_dict()) if pfc else None,
        "counterparties": (
            dump_json([c.to_dict() for c in txn.counterparties]) if txn.counterparties else None
        ),
        "personal_finance_category_icon_url": txn.personal_finance_category_icon_url,
        "personal_finance_category_version": pfc.version if pfc else None,
    }


class TransactionService:
    """Persistence operations for synced transactions.

    All writes ``flush()``; committing is left to the caller.
    """

    @staticmethod
    def get_by_plaid_id(db: Session, plaid_transaction_id: str) -> Transaction | None:
        """Get a transaction by Plaid's transaction_id."""
        return (
            db.query(Transaction)
            .filter(Transaction.plaid_transaction_id == plaid_transaction_id)
            .first()
        )

    @staticmethod
    def upsert_transaction(db: Session, plaid_transaction_id: str, values: dict) -> Transaction:
        """Insert a transaction, or overwrite the existing row's synced fields.

        ``plaid_merchant_name`` is only written while the stored value is
        empty. User-owned fields (notes, review and recurring flags) are
        never touched.
        """
        existing = TransactionService.get_by_plaid_id(db, plaid_transaction_id)
        if existing is None:
            txn = Transaction(plaid_transaction_id=plaid_transaction_id, **values)
            db.add(txn)
            db.flush()
            return txn

        for key, value in values.items():
            if key == "plaid_merchant_name":
                if existing.plaid_merchant_name is None:
                    existing.plaid_merchant_name = value
                continue
            setattr(existing, key, value)
        db.flush()
        return existing

    @staticmethod
    def update_transaction(db: Session, plaid_transaction_id: str, values: dict) -> Transaction | None:
        """Update only the given fields of an existing transaction.

        Never inserts. Keys whose value is None are ignored, and
        ``plaid_merchant_name`` follows the same keep-first rule as
        :meth:`upsert_transaction`.

        Returns:
            The updated transaction, or None if no row has that id.
        """
        existing = TransactionService.get_by_plaid_id(db, plaid_transaction_id)
        if existing is None:
            logger.debug("Modified transaction %s not stored locally; skipping", plaid_transaction_id)
            return None

        for key, value in values.items():
            if value is None:
                continue
            if key == "plaid_merchant_name":
                if existing.plaid_merchant_name is None:
                    existing.plaid_merchant_name = value
                continue
            setattr(existing, key, value)
        db.flush()
        return existing

    @staticmethod
    def delete_transaction(db: Session, plaid_transaction_id: str) -> bool:
        """Delete a transaction by Plaid id. Returns False if it was not stored."""
        deleted = (
            db.query(Transaction)
            .filter(Transaction.plaid_transaction_id == plaid_transaction_id)
            .delete()
        )
        return deleted > 0

    @staticmethod
    def delete_all_transactions(db: Session) -> int:
        """Delete every stored transaction. Returns the number deleted."""
        return db.query(Transaction).delete()

    @staticmethod
    def count_transactions(db: Session) -> int:
        """Total number of stored transactions."""
        return db.query(func.count(Transaction.id)).scalar() or 0

    @staticmethod
    def count_unreviewed(db: Session, plaid_item_id: str) -> int:
        """Number of transactions on an account not yet marked reviewed."""
        return (
            db.query(func.count(Transaction.id))
            .filter(
                Transaction.plaid_item_id == plaid_item_id,
                Transaction.is_reviewed.is_(False),
            )
            .scalar()
            or 0
        )

    @staticmethod
    def list_transactions(
        db: Session,
        *,
        limit: int = 1000,
        plaid_item_id: str | None = None,
        category_id: str | None = None,
        merchant_name: str | None = None,
    ) -> list[Transaction]:
        """List transactions newest first, with category, tag and account loaded."""
        query = db.query(Transaction).options(
            joinedload(Transaction.category),
            joinedload(Transaction.tag),
            joinedload(Transaction.account),
        )
        if plaid_item_id is not None:
            query = query.filter(Transaction.plaid_item_id == plaid_item_id)
        if category_id is not None:
            query = query.filter(Transaction.category_id == category_id)
        if merchant_name is not None:
            query = query.filter(Transaction.merchant_name == merchant_name)
        return (
            query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def update_transaction_by_id(db: Session, transaction_id: str, fields: dict) -> Transaction | None:
        """Apply user edits to a transaction by local id.

        Only :data:`USER_EDITABLE_FIELDS` are applied; explicit None values
        clear the field.
        """
        txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
        if txn is None:
            return None
        for key, value in fields.items():
            if key in USER_EDITABLE_FIELDS:
                setattr(txn, key, value)
        db.flush()
        return txn

    @staticmethod
    def bulk_update_transactions(db: Session, transaction_ids: list[str], fields: dict) -> int:
        """Apply the same user edit to many transactions.

        Returns the number of transactions found and updated; unknown ids
        are skipped.
        """
        updated = 0
        for transaction_id in transaction_ids:
            if TransactionService.update_transaction_by_id(db, transaction_id, fields) is not None:
                updated += 1
        return updated
