"""Account management service - linked accounts and their reconciliation with Plaid."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from integrations.parsing_utils import dump_json
from integrations.plaid_types import PlaidAccount
from models import PlaidItem, Transaction
from models.plaid_item import SYNC_STATUS_ACTIVE, SYNC_STATUS_ERROR, SYNC_STATUS_INACTIVE

logger = logging.getLogger(__name__)

MIGRATED_MESSAGE = "Account migrated to new structure"
UNAVAILABLE_MESSAGE = "Account no longer available"


@dataclass
class ReconciliationResult:
    """What a reconciliation pass did to an institution's accounts."""

    updated: int = 0
    created: int = 0
    deactivated: int = 0
    migrated: bool = False


def _apply_provider_account(account: PlaidItem, plaid_account: PlaidAccount) -> None:
    """Copy balances and metadata reported by Plaid onto a local account row."""
    account.plaid_account_id = plaid_account.account_id
    account.account_name = plaid_account.name
    account.official_name = plaid_account.official_name
    account.mask = plaid_account.mask
    if plaid_account.type:
        account.account_type = plaid_account.type
    account.account_subtype = plaid_account.subtype
    account.current_balance = plaid_account.current_balance or Decimal("0")
    account.available_balance = plaid_account.available_balance
    account.balance_limit = plaid_account.limit
    account.balance_currency_code = plaid_account.iso_currency_code or "USD"
    account.unofficial_currency_code = plaid_account.unofficial_currency_code
    account.balance_last_updated_datetime = plaid_account.balance_last_updated
    account.verification_status = plaid_account.verification_status
    account.verification_name = plaid_account.verification_name
    account.verification_insights = dump_json(plaid_account.verification_insights)
    account.persistent_account_id = plaid_account.persistent_account_id
    account.holder_category = plaid_account.holder_category


class AccountService:
    """Service for linked Plaid accounts."""

    @staticmethod
    def list_accounts(db: Session) -> list[PlaidItem]:
        """List all accounts, oldest first."""
        return db.query(PlaidItem).order_by(PlaidItem.created_at).all()

    @staticmethod
    def get_account(db: Session, account_id: str) -> PlaidItem | None:
        """Get a specific account by ID."""
        return db.query(PlaidItem).filter(PlaidItem.id == account_id).first()

    @staticmethod
    def get_active_accounts(db: Session) -> list[PlaidItem]:
        """Accounts eligible for sync, in creation order."""
        return (
            db.query(PlaidItem)
            .filter(PlaidItem.sync_status == SYNC_STATUS_ACTIVE)
            .order_by(PlaidItem.created_at)
            .all()
        )

    @staticmethod
    def get_accounts_for_item(db: Session, item_id: str) -> list[PlaidItem]:
        """All accounts sharing a Plaid Item, any status, in creation order."""
        return (
            db.query(PlaidItem)
            .filter(PlaidItem.item_id == item_id)
            .order_by(PlaidItem.created_at)
            .all()
        )

    @staticmethod
    def update_account(
        db: Session,
        account_id: str,
        *,
        custom_name: str | None = None,
        is_hidden: bool | None = None,
    ) -> PlaidItem | None:
        """Update an account's display overrides. An empty custom name clears it."""
        account = AccountService.get_account(db, account_id)
        if not account:
            return None

        if custom_name is not None:
            account.custom_name = custom_name.strip() or None
        if is_hidden is not None:
            account.is_hidden = is_hidden

        db.commit()
        db.refresh(account)
        logger.info("Account updated: %s (id=%s)", account.display_name, account.id)
        return account

    @staticmethod
    def unreviewed_counts(db: Session) -> dict[str, int]:
        """Number of unreviewed transactions per account id."""
        rows = (
            db.query(Transaction.plaid_item_id, func.count(Transaction.id))
            .filter(Transaction.is_reviewed.is_(False))
            .group_by(Transaction.plaid_item_id)
            .all()
        )
        return {plaid_item_id: count for plaid_item_id, count in rows}

    @staticmethod
    def reset_all_cursors(db: Session) -> int:
        """Clear every stored sync cursor so the next sync starts from scratch."""
        return db.query(PlaidItem).update({PlaidItem.cursor: None})

    @staticmethod
    def mark_error(db: Session, accounts: list[PlaidItem], message: str) -> None:
        for account in accounts:
            account.sync_status = SYNC_STATUS_ERROR
            account.error_message = message
        db.flush()

    @staticmethod
    def mark_synced(
        db: Session, accounts: list[PlaidItem], cursor: str | None, synced_at: datetime
    ) -> None:
        """Record a successful transaction sync without touching balances."""
        for account in accounts:
            account.cursor = cursor
            account.last_sync_at = synced_at
            account.sync_status = SYNC_STATUS_ACTIVE
            account.error_message = None
        db.flush()

    @staticmethod
    def reconcile_accounts(
        db: Session,
        item_id: str,
        provider_accounts: list[PlaidAccount],
        primary: PlaidItem,
        cursor: str | None,
        synced_at: datetime,
    ) -> ReconciliationResult:
        """Bring the local accounts of one Item in line with what Plaid reports.

        - A lone legacy row (no ``plaid_account_id``) adopts the id of a lone
          provider account.
        - Matched rows get the new cursor, sync time, balances and metadata,
          and become active.
        - Provider accounts with no local row are created with the primary
          account's credentials.
        - Remaining legacy rows and rows Plaid no longer returns become
          inactive. Rows are never deleted.
        """
        result = ReconciliationResult()
        local_accounts = AccountService.get_accounts_for_item(db, item_id)
        legacy = [a for a in local_accounts if not a.plaid_account_id]
        migrate = len(legacy) == 1 and len(provider_accounts) == 1 and len(local_accounts) == 1
        by_plaid_id = {a.plaid_account_id: a for a in local_accounts if a.plaid_account_id}

        for plaid_account in provider_accounts:
            account = by_plaid_id.get(plaid_account.account_id)
            if account is None and migrate:
                account = legacy[0]
                result.migrated = True
                logger.info(
                    "Migrating account %s to plaid_account_id %s",
                    account.id, plaid_account.account_id,
                )

            if account is None:
                account = PlaidItem(
                    item_id=item_id,
                    access_token=primary.access_token,
                    institution_id=primary.institution_id,
                    institution_name=primary.institution_name,
                    account_type="depository",
                )
                db.add(account)
                result.created += 1
                logger.info(
                    "Creating account %s (%s) for item %s",
                    plaid_account.name, plaid_account.account_id, item_id,
                )
            else:
                result.updated += 1

            _apply_provider_account(account, plaid_account)
            account.cursor = cursor
            account.last_sync_at = synced_at
            account.sync_status = SYNC_STATUS_ACTIVE
            account.error_message = None

        if not migrate:
            for account in legacy:
                account.sync_status = SYNC_STATUS_INACTIVE
                account.error_message = MIGRATED_MESSAGE
                result.deactivated += 1

        returned_ids = {a.account_id for a in provider_accounts}
        for account in local_accounts:
            if account.plaid_account_id and account.plaid_account_id not in returned_ids:
                account.sync_status = SYNC_STATUS_INACTIVE
                account.error_message = UNAVAILABLE_MESSAGE
                result.deactivated += 1
                logger.info("Account %s no longer returned by Plaid; deactivated", account.id)

        db.flush()
        return result

    @staticmethod
    def link_item(
        db: Session,
        *,
        item_id: str,
        access_token: str,
        institution_id: str | None,
        institution_name: str | None,
        provider_accounts: list[PlaidAccount],
    ) -> list[PlaidItem]:
        """Create or refresh the local accounts of a newly linked Item.

        Existing rows for the Item are updated and reactivated; rows whose
        account Plaid no longer returns are deactivated.

        Returns:
            The accounts that Plaid returned, in provider order.
        """
        existing = AccountService.get_accounts_for_item(db, item_id)
        by_plaid_id = {a.plaid_account_id: a for a in existing if a.plaid_account_id}

        linked = []
        for plaid_account in provider_accounts:
            account = by_plaid_id.get(plaid_account.account_id)
            if account is None:
                account = PlaidItem(item_id=item_id, account_type="depository")
                db.add(account)
                logger.info("Linked account %s (%s)", plaid_account.name, plaid_account.account_id)
            account.access_token = access_token
            account.institution_id = institution_id
            account.institution_name = institution_name
            _apply_provider_account(account, plaid_account)
            account.sync_status = SYNC_STATUS_ACTIVE
            account.error_message = None
            linked.append(account)

        returned_ids = {a.account_id for a in provider_accounts}
        for account in existing:
            if account.plaid_account_id and account.plaid_account_id not in returned_ids:
                account.sync_status = SYNC_STATUS_INACTIVE
                account.error_message = UNAVAILABLE_MESSAGE

        db.flush()
        return linked
