"""Sync service - pulls transactions, investments and balances from Plaid."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from integrations.plaid_client import PlaidClient
from integrations.plaid_types import PlaidTransaction
from models import PlaidItem
from services.account_service import AccountService
from services.categorization_service import CategorizationService
from services.investment_service import InvestmentService
from services.transaction_service import TransactionService, provider_fields

logger = logging.getLogger(__name__)

NO_ACCOUNTS_MESSAGE = (
    "No Plaid accounts found. Please connect accounts using the 'Add Account' button first."
)
SYNC_UPDATES_AVAILABLE = "SYNC_UPDATES_AVAILABLE"


class ItemNotFoundError(LookupError):
    """Raised when a webhook names an Item with no local accounts."""


@dataclass
class InstitutionSyncResult:
    """Outcome of syncing one Plaid Item.

    Counts are what Plaid reported, not how many rows were written.
    """

    item_id: str
    added: int = 0
    modified: int = 0
    removed: int = 0
    cursor: Optional[str] = None
    error: Optional[str] = None


@dataclass
class FullSyncResult:
    """Aggregate outcome of a manual full resync."""

    message: str = "Sync completed"
    synced: int = 0
    added: int = 0
    modified: int = 0
    removed: int = 0
    total_in_database: int = 0


@contextmanager
def _isolated(db: Session, what: str, *args):
    """Run a block in its own savepoint, logging and discarding its failure."""
    try:
        with db.begin_nested():
            yield
    except Exception:
        logger.error("Error " + what, *args, exc_info=True)


class SyncService:
    """Service for syncing Plaid data into the local store."""

    # Class-level lock shared across all instances so only one manual sync
    # runs per process.
    _sync_lock = threading.Lock()

    def __init__(self, plaid_client: Optional[PlaidClient] = None):
        """Initialize with an optional Plaid client for dependency injection.

        Args:
            plaid_client: Client used for all Plaid calls. If None, a
                          default client is created on first use.
        """
        self._client = plaid_client

    @classmethod
    def is_sync_in_progress(cls) -> bool:
        """Check if a manual sync is currently running."""
        acquired = cls._sync_lock.acquire(blocking=False)
        if acquired:
            cls._sync_lock.release()
            return False
        return True

    @property
    def client(self) -> PlaidClient:
        """Get the Plaid client, creating a default one if not provided."""
        if self._client is None:
            self._client = PlaidClient()
        return self._client

    def trigger_full_sync(self, db: Session) -> FullSyncResult:
        """Delete every transaction and resync all active accounts from scratch.

        Institutions are synced one at a time. A failing institution has its
        partial writes rolled back and its accounts marked ``error``; the
        others continue. Everything is committed once at the end.

        Args:
            db: Database session

        Returns:
            Aggregate counts over all institutions

        Raises:
            ValueError: If a sync is already in progress
        """
        acquired = self._sync_lock.acquire(blocking=False)
        if not acquired:
            logger.warning("Sync blocked: another sync is already in progress")
            raise ValueError("Sync already in progress")

        logger.info("Sync lock acquired")
        try:
            deleted = TransactionService.delete_all_transactions(db)
            AccountService.reset_all_cursors(db)
            logger.info("Manual sync: deleted %d transactions and reset all cursors", deleted)

            accounts = AccountService.get_active_accounts(db)
            if not accounts:
                db.commit()
                logger.warning("Sync finished: no active accounts")
                return FullSyncResult(message=NO_ACCOUNTS_MESSAGE, synced=0)

            institutions: dict[str, list[PlaidItem]] = {}
            for account in accounts:
                institutions.setdefault(account.item_id, []).append(account)
            logger.info(
                "Syncing %d account(s) across %d institution(s)",
                len(accounts), len(institutions),
            )

            result = FullSyncResult(synced=len(accounts))
            for item_id, group in institutions.items():
                outcome = self.sync_institution(db, item_id, group, cursor=None)
                result.added += outcome.added
                result.modified += outcome.modified
                result.removed += outcome.removed

            result.total_in_database = TransactionService.count_transactions(db)
            db.commit()
            logger.info(
                "Sync completed: %d added, %d modified, %d removed, %d in database",
                result.added, result.modified, result.removed, result.total_in_database,
            )
            return result
        except Exception:
            db.rollback()
            raise
        finally:
            logger.info("Sync lock released")
            self._sync_lock.release()

    def sync_institution(
        self,
        db: Session,
        item_id: str,
        accounts: list[PlaidItem],
        cursor: Optional[str],
    ) -> InstitutionSyncResult:
        """Sync one Plaid Item starting from ``cursor``.

        The first account supplies the access token. Never raises: on
        failure the Item's writes are rolled back to a savepoint, every
        account in ``accounts`` is marked ``error`` and the message is
        returned in ``InstitutionSyncResult.error``. Does not commit.
        """
        primary = accounts[0]
        result = InstitutionSyncResult(item_id=item_id, cursor=cursor)
        logger.info(
            "Syncing institution %s (%s) with %d account(s)",
            item_id, primary.institution_name or "Unknown", len(accounts),
        )
        try:
            with db.begin_nested():
                self._sync_transactions(db, accounts, primary, result)
                self._sync_investments(db, item_id, accounts, primary)
                self._refresh_accounts(db, item_id, accounts, primary, result.cursor)
        except Exception as e:
            result.error = str(e) or e.__class__.__name__
            logger.error("Error syncing institution %s: %s", item_id, result.error, exc_info=True)
            AccountService.mark_error(db, accounts, result.error)
        return result

    def handle_webhook(
        self, db: Session, webhook_code: Optional[str], item_id: Optional[str]
    ) -> Optional[InstitutionSyncResult]:
        """React to a Plaid webhook.

        Only ``SYNC_UPDATES_AVAILABLE`` triggers work: an incremental sync of
        that Item from the primary account's stored cursor, committed on its
        own. Other codes return None.

        Raises:
            ItemNotFoundError: If no local account belongs to ``item_id``
        """
        if webhook_code != SYNC_UPDATES_AVAILABLE:
            logger.info("Webhook %s received but not handled", webhook_code)
            return None

        accounts = AccountService.get_accounts_for_item(db, item_id) if item_id else []
        if not accounts:
            raise ItemNotFoundError(f"Item not found: {item_id}")

        outcome = self.sync_institution(db, item_id, accounts, cursor=accounts[0].cursor)
        db.commit()
        logger.info(
            "Webhook sync for item %s: %d added, %d modified, %d removed",
            item_id, outcome.added, outcome.modified, outcome.removed,
        )
        return outcome

    def _sync_transactions(
        self,
        db: Session,
        accounts: list[PlaidItem],
        primary: PlaidItem,
        result: InstitutionSyncResult,
    ) -> None:
        """Drain /transactions/sync pages, applying each to the store."""
        has_more = True
        page_number = 0
        while has_more:
            page_number += 1
            page = self.client.sync_transactions(primary.access_token, result.cursor)
            logger.debug(
                "Page %d: %d added, %d modified, %d removed",
                page_number, len(page.added), len(page.modified), len(page.removed),
            )

            for txn in page.added:
                with _isolated(db, "inserting transaction %s", txn.transaction_id):
                    self._apply_added(db, txn, accounts, primary)
            for txn in page.modified:
                with _isolated(db, "updating transaction %s", txn.transaction_id):
                    self._apply_modified(db, txn)
            for removed in page.removed:
                with _isolated(db, "deleting transaction %s", removed.transaction_id):
                    TransactionService.delete_transaction(db, removed.transaction_id)

            result.added += len(page.added)
            result.modified += len(page.modified)
            result.removed += len(page.removed)
            result.cursor = page.next_cursor
            has_more = page.has_more

    @staticmethod
    def _apply_added(
        db: Session, txn: PlaidTransaction, accounts: list[PlaidItem], primary: PlaidItem
    ) -> None:
        categorization = CategorizationService.categorize_added(db, txn)
        # Unknown account ids fall back to the primary account
        account = next((a for a in accounts if a.plaid_account_id == txn.account_id), primary)
        values = provider_fields(txn)
        values["plaid_item_id"] = account.id
        values["category_id"] = categorization.category_id
        values["tag_id"] = categorization.tag_id
        TransactionService.upsert_transaction(db, txn.transaction_id, values)

    @staticmethod
    def _apply_modified(db: Session, txn: PlaidTransaction) -> None:
        values = provider_fields(txn)
        values["category_id"] = CategorizationService.categorize_modified(db, txn)
        TransactionService.update_transaction(db, txn.transaction_id, values)

    def _sync_investments(
        self, db: Session, item_id: str, accounts: list[PlaidItem], primary: PlaidItem
    ) -> None:
        """Store securities and investment transactions for investment accounts.

        Failures are logged and never fail the institution.
        """
        investment_accounts = [a for a in accounts if a.account_type == "investment"]
        if not investment_accounts:
            return

        try:
            data = self.client.get_investment_transactions(primary.access_token)
        except Exception:
            logger.error(
                "Error fetching investment transactions for institution %s", item_id,
                exc_info=True,
            )
            return

        for security in data.securities:
            with _isolated(db, "storing security %s", security.security_id):
                InvestmentService.upsert_security(db, security)

        stored = 0
        for inv_txn in data.investment_transactions:
            account = next(
                (a for a in investment_accounts if a.plaid_account_id == inv_txn.account_id),
                primary,
            )
            with _isolated(db, "storing investment transaction %s", inv_txn.investment_transaction_id):
                InvestmentService.upsert_investment_transaction(db, inv_txn, account.id)
                stored += 1
        logger.info(
            "Stored %d investment transactions and %d securities for institution %s",
            stored, len(data.securities), item_id,
        )

    def _refresh_accounts(
        self,
        db: Session,
        item_id: str,
        accounts: list[PlaidItem],
        primary: PlaidItem,
        cursor: Optional[str],
    ) -> None:
        """Fetch balances and Item status, then reconcile the local accounts.

        If Plaid cannot be reached for balances, the transaction sync still
        counts: every account gets the new cursor and becomes active.
        """
        try:
            provider_accounts = self.client.get_account_balances(primary.access_token)
            status = self.client.get_item(primary.access_token)
        except Exception as e:
            logger.warning(
                "Error fetching balances for institution %s: %s", item_id, e, exc_info=True
            )
            AccountService.mark_synced(db, accounts, cursor, datetime.now(timezone.utc))
            return

        synced_at = status.last_successful_update or datetime.now(timezone.utc)
        outcome = AccountService.reconcile_accounts(
            db, item_id, provider_accounts, primary, cursor, synced_at
        )
        logger.info(
            "Reconciled institution %s: %d updated, %d created, %d deactivated",
            item_id, outcome.updated, outcome.created, outcome.deactivated,
        )
