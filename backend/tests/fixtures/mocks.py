"""Mock implementations for external services."""

from datetime import date, datetime, timezone
from decimal import Decimal

from integrations.plaid_types import (
    InvestmentTransactionsResult,
    ItemStatus,
    PersonalFinanceCategory,
    PlaidAccount,
    PlaidTransaction,
    RemovedTransaction,
    TransactionSyncPage,
)


def make_transaction(
    transaction_id: str,
    account_id: str = "acc-1",
    amount: str = "12.50",
    txn_date: date = date(2024, 1, 15),
    name: str | None = None,
    merchant_name: str | None = None,
    detailed: str | None = None,
    primary: str | None = None,
    **kwargs,
) -> PlaidTransaction:
    """Build a PlaidTransaction with sensible defaults.

    ``amount`` uses Plaid's sign convention (positive = money out).
    """
    pfc = None
    if detailed or primary:
        pfc = PersonalFinanceCategory(
            primary=primary,
            detailed=detailed,
            confidence_level=kwargs.pop("confidence_level", None),
        )
    return PlaidTransaction(
        transaction_id=transaction_id,
        account_id=account_id,
        amount=Decimal(amount),
        date=txn_date,
        name=name or merchant_name or "Transaction",
        merchant_name=merchant_name,
        personal_finance_category=pfc,
        **kwargs,
    )


def make_account(
    account_id: str,
    name: str = "Checking",
    account_type: str = "depository",
    current: str | None = "100.00",
    **kwargs,
) -> PlaidAccount:
    """Build a PlaidAccount as returned by the balances endpoint."""
    return PlaidAccount(
        account_id=account_id,
        name=name,
        type=account_type,
        subtype=kwargs.pop("subtype", "checking"),
        current_balance=Decimal(current) if current is not None else None,
        iso_currency_code=kwargs.pop("iso_currency_code", "USD"),
        **kwargs,
    )


def make_page(
    added=None,
    modified=None,
    removed=None,
    next_cursor: str = "cursor-1",
    has_more: bool = False,
) -> TransactionSyncPage:
    """Build one /transactions/sync page; ``removed`` may be a list of ids."""
    return TransactionSyncPage(
        added=list(added or []),
        modified=list(modified or []),
        removed=[
            r if isinstance(r, RemovedTransaction) else RemovedTransaction(transaction_id=r)
            for r in removed or []
        ],
        next_cursor=next_cursor,
        has_more=has_more,
    )


def _by_token(value) -> dict:
    """Normalize a per-access-token mapping; a plain value applies to every token."""
    if isinstance(value, dict):
        return value
    return {None: value}


class MockPlaidClient:
    """Scripted stand-in for :class:`integrations.plaid_client.PlaidClient`.

    By default the balances endpoint reports a single ``acc-1`` account.
    ``pages`` and ``accounts`` may be given per access token (a dict) or
    for all tokens (a list). Pages are served in order; once a token's
    pages are exhausted an empty page is returned that echoes the cursor.
    ``failures`` maps a method name to the exception it raises, limited to
    ``failing_tokens`` when that is set.
    """

    def __init__(
        self,
        pages=None,
        accounts=None,
        investments: InvestmentTransactionsResult | None = None,
        last_successful_update: datetime | None = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc),
        configured: bool = True,
        failures: dict[str, Exception] | None = None,
        failing_tokens: set[str] | None = None,
        exchange_result: dict | None = None,
        institution_name: str = "First Platypus Bank",
    ):
        self._pages = _by_token(pages or [])
        self._accounts = _by_token(accounts if accounts is not None else [make_account("acc-1")])
        self._investments = investments or InvestmentTransactionsResult()
        self._last_successful_update = last_successful_update
        self._configured = configured
        self._failures = failures or {}
        self._failing_tokens = failing_tokens
        self._exchange_result = exchange_result or {
            "access_token": "access-sandbox-1",
            "item_id": "item-1",
        }
        self._institution_name = institution_name
        self._served: dict[str | None, int] = {}

        self.sync_calls: list[tuple[str, str | None]] = []
        self.link_token_calls: list[str | None] = []
        self.investment_calls: list[str] = []

    def _maybe_fail(self, method: str, access_token: str | None = None) -> None:
        exc = self._failures.get(method)
        if exc is None:
            return
        if self._failing_tokens is None or access_token in self._failing_tokens:
            raise exc

    def _for_token(self, mapping: dict, access_token: str):
        if access_token in mapping:
            return access_token, mapping[access_token]
        return None, mapping.get(None, [])

    def is_configured(self) -> bool:
        return self._configured

    def create_link_token(self, user_id: str = "finance-tagger-user", webhook_url: str | None = None) -> str:
        self._maybe_fail("create_link_token")
        self.link_token_calls.append(webhook_url)
        return "link-sandbox-123"

    def exchange_public_token(self, public_token: str) -> dict:
        self._maybe_fail("exchange_public_token")
        return dict(self._exchange_result)

    def get_institution(self, institution_id: str) -> dict:
        self._maybe_fail("get_institution")
        return {"institution_id": institution_id, "name": self._institution_name}

    def sync_transactions(self, access_token: str, cursor: str | None = None) -> TransactionSyncPage:
        self.sync_calls.append((access_token, cursor))
        self._maybe_fail("sync_transactions", access_token)
        key, pages = self._for_token(self._pages, access_token)
        index = self._served.get(key, 0)
        if index >= len(pages):
            return TransactionSyncPage(next_cursor=cursor)
        self._served[key] = index + 1
        return pages[index]

    def get_account_balances(self, access_token: str) -> list[PlaidAccount]:
        self._maybe_fail("get_account_balances", access_token)
        _, accounts = self._for_token(self._accounts, access_token)
        return list(accounts)

    def get_item(self, access_token: str) -> ItemStatus:
        self._maybe_fail("get_item", access_token)
        return ItemStatus(item_id="", last_successful_update=self._last_successful_update)

    def get_investment_transactions(self, access_token: str, days: int = 730) -> InvestmentTransactionsResult:
        self.investment_calls.append(access_token)
        self._maybe_fail("get_investment_transactions", access_token)
        return self._investments
