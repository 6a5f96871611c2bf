"""Tests for AccountService reconciliation and display overrides."""

from datetime import datetime, timezone
from decimal import Decimal

from models import PlaidItem
from services.account_service import (
    MIGRATED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    AccountService,
)
from tests.fixtures import create_account, create_transaction
from tests.fixtures.mocks import make_account

SYNCED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


class TestReconcileAccounts:
    def test_single_legacy_row_adopts_provider_id(self, db):
        legacy = create_account(db, plaid_account_id=None)

        result = AccountService.reconcile_accounts(
            db, "item-1", [make_account("acc-new", current="42.10")], legacy, "cursor-1", SYNCED_AT
        )

        assert result.migrated is True
        assert (result.updated, result.created, result.deactivated) == (1, 0, 0)
        assert legacy.plaid_account_id == "acc-new"
        assert legacy.current_balance == Decimal("42.10")
        assert legacy.cursor == "cursor-1"
        assert legacy.sync_status == "active"

    def test_legacy_row_retired_when_item_has_several_accounts(self, db):
        legacy = create_account(db, plaid_account_id=None)

        result = AccountService.reconcile_accounts(
            db,
            "item-1",
            [make_account("acc-1"), make_account("acc-2", name="Savings")],
            legacy,
            "cursor-1",
            SYNCED_AT,
        )

        assert result.created == 2
        assert result.deactivated == 1
        assert legacy.sync_status == "inactive"
        assert legacy.error_message == MIGRATED_MESSAGE
        assert db.query(PlaidItem).count() == 3

    def test_missing_account_deactivated_not_deleted(self, db):
        kept = create_account(db)
        closed = create_account(db, plaid_account_id="acc-closed")

        result = AccountService.reconcile_accounts(
            db, "item-1", [make_account("acc-1")], kept, "cursor-2", SYNCED_AT
        )

        assert result.deactivated == 1
        assert closed.sync_status == "inactive"
        assert closed.error_message == UNAVAILABLE_MESSAGE
        assert kept.balance_last_updated_datetime is None
        assert db.query(PlaidItem).count() == 2

    def test_missing_balance_defaults_to_zero(self, db):
        account = create_account(db)

        AccountService.reconcile_accounts(
            db, "item-1", [make_account("acc-1", current=None)], account, None, SYNCED_AT
        )

        assert account.current_balance == Decimal("0")

    def test_balance_timestamp_comes_from_provider_account(self, db):
        account = create_account(db)
        balance_time = datetime(2024, 2, 28, 23, 0, tzinfo=timezone.utc)

        AccountService.reconcile_accounts(
            db, "item-1", [make_account("acc-1", balance_last_updated=balance_time)], account, "c", SYNCED_AT
        )

        assert account.balance_last_updated_datetime == balance_time
        assert account.last_sync_at == SYNCED_AT

    def test_error_cleared_on_success(self, db):
        account = create_account(db, sync_status="error", error_message="ITEM_LOGIN_REQUIRED")

        AccountService.reconcile_accounts(db, "item-1", [make_account("acc-1")], account, "c", SYNCED_AT)

        assert account.sync_status == "active"
        assert account.error_message is None


class TestLinkItem:
    def test_relink_updates_existing_rows(self, db):
        first = AccountService.link_item(
            db,
            item_id="item-1",
            access_token="access-old",
            institution_id="ins_1",
            institution_name="First Platypus Bank",
            provider_accounts=[make_account("acc-1"), make_account("acc-2", name="Savings")],
        )
        assert len(first) == 2

        second = AccountService.link_item(
            db,
            item_id="item-1",
            access_token="access-new",
            institution_id="ins_1",
            institution_name="First Platypus Bank",
            provider_accounts=[make_account("acc-1")],
        )

        assert [a.id for a in second] == [first[0].id]
        assert first[0].access_token == "access-new"
        assert first[1].sync_status == "inactive"
        assert db.query(PlaidItem).count() == 2


class TestAccountOverrides:
    def test_update_and_clear_custom_name(self, db):
        account = create_account(db)
        db.commit()

        updated = AccountService.update_account(db, account.id, custom_name="  Joint Checking ", is_hidden=True)
        assert updated.custom_name == "Joint Checking"
        assert updated.display_name == "Joint Checking"
        assert updated.is_hidden is True

        updated = AccountService.update_account(db, account.id, custom_name="")
        assert updated.custom_name is None
        assert updated.is_hidden is True
        assert updated.display_name == "Checking"

    def test_update_missing_account(self, db):
        assert AccountService.update_account(db, "missing", custom_name="x") is None

    def test_unreviewed_counts(self, db):
        checking = create_account(db)
        savings = create_account(db, plaid_account_id="acc-2")
        create_transaction(db, checking, "t1")
        create_transaction(db, checking, "t2")
        create_transaction(db, savings, "t3", is_reviewed=True)

        assert AccountService.unreviewed_counts(db) == {checking.id: 2}

    def test_reset_all_cursors(self, db):
        create_account(db, cursor="abc")
        create_account(db, plaid_account_id="acc-2", cursor="def")

        AccountService.reset_all_cursors(db)

        assert {a.cursor for a in db.query(PlaidItem).all()} == {None}
