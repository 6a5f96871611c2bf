"""Plaid API client.

Thin wrapper around the plaid-python SDK covering everything the sync
engine and the Link flow need: link-token creation, public-token
exchange, institution lookup, cursor-paginated transaction sync,
balances, item status, investment transactions and holdings.

Responses are converted into the dataclasses in
:mod:`integrations.plaid_types`; SDK exceptions are converted into the
typed hierarchy in :mod:`integrations.exceptions`.
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import urllib3
from plaid import ApiException, Environment
from plaid.api.plaid_api import PlaidApi
from plaid.api_client import ApiClient
from plaid.configuration import Configuration
from plaid.model.accounts_balance_get_request import AccountsBalanceGetRequest
from plaid.model.country_code import CountryCode
from plaid.model.institutions_get_by_id_request import InstitutionsGetByIdRequest
from plaid.model.investments_holdings_get_request import InvestmentsHoldingsGetRequest
from plaid.model.investments_transactions_get_request import InvestmentsTransactionsGetRequest
from plaid.model.investments_transactions_get_request_options import InvestmentsTransactionsGetRequestOptions
from plaid.model.item_get_request import ItemGetRequest
from plaid.model.item_public_token_exchange_request import ItemPublicTokenExchangeRequest
from plaid.model.link_token_create_request import LinkTokenCreateRequest
from plaid.model.link_token_create_request_user import LinkTokenCreateRequestUser
from plaid.model.products import Products
from plaid.model.transactions_sync_request import TransactionsSyncRequest
from plaid.model.transactions_sync_request_options import TransactionsSyncRequestOptions

from config import settings
from integrations.exceptions import (
    ProviderAPIError,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderDataError,
)
from integrations.parsing_utils import parse_iso_datetime
from integrations.plaid_types import (
    HoldingsResult,
    InvestmentTransactionsResult,
    ItemStatus,
    PlaidAccount,
    PlaidHolding,
    PlaidInvestmentTransaction,
    PlaidSecurity,
    PlaidTransaction,
    RemovedTransaction,
    TransactionSyncPage,
)

logger = logging.getLogger(__name__)

# Map PLAID_ENVIRONMENT setting to SDK host URLs.
# Plaid's Development environment is deprecated; only sandbox and production
# are supported.
_ENVIRONMENT_MAP: dict[str, str] = {
    "sandbox": Environment.Sandbox,
    "production": Environment.Production,
}

# Auth is required for /accounts/balance/get, investments for brokerage accounts
LINK_PRODUCTS = ("transactions", "auth", "investments")
COUNTRY_CODES = ("US",)

# /transactions/sync page size (Plaid maximum)
SYNC_PAGE_SIZE = 500

# Trailing window for investment transactions (24 months)
INVESTMENT_HISTORY_DAYS = 730

_AUTH_ERROR_CODES = frozenset(
    {
        "INVALID_ACCESS_TOKEN",
        "ITEM_LOGIN_REQUIRED",
        "INVALID_API_KEYS",
        "ACCESS_NOT_GRANTED",
    }
)


def _to_plain(response) -> dict:
    """Return an SDK response as a plain dict."""
    if isinstance(response, dict):
        return response
    if hasattr(response, "to_dict"):
        return response.to_dict()
    raise ProviderDataError(f"Unexpected Plaid response type: {type(response).__name__}")


class PlaidClient:
    """Wrapper around the Plaid API."""

    def __init__(
        self,
        client_id: str | None = None,
        secret: str | None = None,
        environment: str | None = None,
    ):
        self._client_id = client_id or settings.PLAID_CLIENT_ID
        self._secret = secret or settings.PLAID_SECRET
        self._environment = environment or settings.PLAID_ENVIRONMENT

        # Lazily created on first use
        self._api: PlaidApi | None = None

    def _get_api(self) -> PlaidApi:
        """Return (and cache) a PlaidApi instance."""
        if self._api is None:
            env_key = self._environment.lower()
            host = _ENVIRONMENT_MAP.get(env_key)
            if host is None:
                logger.warning(
                    "Unknown PLAID_ENVIRONMENT=%r, falling back to sandbox. "
                    "Valid values: sandbox, production",
                    self._environment,
                )
                host = Environment.Sandbox
            logger.info(
                "Plaid API client: environment=%s, host=%s, client_id=<configured>",
                env_key,
                host,
            )
            configuration = Configuration(
                host=host,
                api_key={
                    "clientId": self._client_id,
                    "secret": self._secret,
                },
            )
            api_client = ApiClient(configuration)
            self._api = PlaidApi(api_client)
        return self._api

    def is_configured(self) -> bool:
        """Check if Plaid credentials are configured."""
        return bool(self._client_id) and bool(self._secret)

    def _call(self, operation: str, method_name: str, request) -> dict:
        """Invoke one Plaid endpoint and return its response as a dict.

        Raises:
            ProviderAuthError: Credentials or Item login are invalid.
            ProviderAPIError: Any other error response from Plaid.
            ProviderConnectionError: The request never reached Plaid.
        """
        api = self._get_api()
        try:
            response = getattr(api, method_name)(request)
        except ApiException as exc:
            raise self._map_plaid_error(exc, operation) from exc
        except (urllib3.exceptions.HTTPError, ConnectionError, TimeoutError) as exc:
            raise ProviderConnectionError(f"Plaid {operation} failed: {exc}") from exc
        return _to_plain(response)

    # ------------------------------------------------------------------
    # Link token & token exchange
    # ------------------------------------------------------------------

    def create_link_token(
        self,
        user_id: str = "finance-tagger-user",
        webhook_url: str | None = None,
    ) -> str:
        """Create a Plaid Link token for the browser-based auth flow.

        Args:
            user_id: Stable identifier for the end user.
            webhook_url: URL Plaid should notify when new transactions are
                available. Falls back to ``settings.PLAID_WEBHOOK_URL``.

        Returns:
            The link_token string to be passed to Plaid Link.
        """
        kwargs = {
            "user": LinkTokenCreateRequestUser(client_user_id=user_id),
            "client_name": settings.PLAID_CLIENT_NAME,
            "products": [Products(p) for p in LINK_PRODUCTS],
            "country_codes": [CountryCode(c) for c in COUNTRY_CODES],
            "language": "en",
        }
        webhook = webhook_url or settings.PLAID_WEBHOOK_URL
        if webhook:
            kwargs["webhook"] = webhook
        response = self._call("link token", "link_token_create", LinkTokenCreateRequest(**kwargs))
        return response["link_token"]

    def exchange_public_token(self, public_token: str) -> dict:
        """Exchange a Plaid Link public_token for a permanent access_token.

        Returns:
            Dict with ``access_token`` and ``item_id``.
        """
        request = ItemPublicTokenExchangeRequest(public_token=public_token)
        response = self._call("token exchange", "item_public_token_exchange", request)
        return {
            "access_token": response["access_token"],
            "item_id": response["item_id"],
        }

    def get_institution(self, institution_id: str) -> dict:
        """Look up an institution's display data.

        Returns:
            Dict with ``institution_id`` and ``name``.
        """
        request = InstitutionsGetByIdRequest(
            institution_id=institution_id,
            country_codes=[CountryCode(c) for c in COUNTRY_CODES],
        )
        response = self._call("institution lookup", "institutions_get_by_id", request)
        institution = response.get("institution") or {}
        return {
            "institution_id": institution.get("institution_id", institution_id),
            "name": institution.get("name"),
        }

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def sync_transactions(self, access_token: str, cursor: str | None = None) -> TransactionSyncPage:
        """Fetch one page of transaction deltas from /transactions/sync.

        Args:
            access_token: The Item's access token.
            cursor: Continuation token from the previous page; ``None``
                replays the Item's full history.

        Returns:
            The page's added/modified/removed transactions plus the next
            cursor and whether more pages remain.
        """
        kwargs = {
            "access_token": access_token,
            "count": SYNC_PAGE_SIZE,
            "options": TransactionsSyncRequestOptions(include_original_description=True),
        }
        if cursor:
            kwargs["cursor"] = cursor
        response = self._call("transactions sync", "transactions_sync", TransactionsSyncRequest(**kwargs))

        return TransactionSyncPage(
            added=self._parse_transactions(response.get("added")),
            modified=self._parse_transactions(response.get("modified")),
            removed=[
                RemovedTransaction(
                    transaction_id=r.get("transaction_id"),
                    account_id=r.get("account_id"),
                )
                for r in response.get("removed") or []
                if r.get("transaction_id")
            ],
            next_cursor=response.get("next_cursor"),
            has_more=bool(response.get("has_more")),
        )

    @staticmethod
    def _parse_transactions(raw_transactions) -> list[PlaidTransaction]:
        """Parse transaction dicts, skipping (and logging) unusable entries."""
        transactions: list[PlaidTransaction] = []
        for raw in raw_transactions or []:
            try:
                transactions.append(PlaidTransaction.from_dict(raw))
            except (ValueError, TypeError, AttributeError):
                logger.warning("Skipping malformed Plaid transaction: %.200r", raw)
        return transactions

    # ------------------------------------------------------------------
    # Accounts & item status
    # ------------------------------------------------------------------

    def get_account_balances(self, access_token: str) -> list[PlaidAccount]:
        """Fetch real-time balances and metadata for every account on an Item."""
        request = AccountsBalanceGetRequest(access_token=access_token)
        response = self._call("balance fetch", "accounts_balance_get", request)
        return [
            PlaidAccount.from_dict(acct)
            for acct in response.get("accounts") or []
            if acct.get("account_id")
        ]

    def get_item(self, access_token: str) -> ItemStatus:
        """Fetch Item metadata, including the last successful transactions update."""
        response = self._call("item fetch", "item_get", ItemGetRequest(access_token=access_token))
        item = response.get("item") or {}
        status = response.get("status") or {}
        transactions_status = status.get("transactions") or {}
        error = item.get("error") or {}
        return ItemStatus(
            item_id=item.get("item_id", ""),
            institution_id=item.get("institution_id"),
            last_successful_update=parse_iso_datetime(
                transactions_status.get("last_successful_update")
            ),
            error_code=error.get("error_code") if isinstance(error, dict) else None,
        )

    # ------------------------------------------------------------------
    # Investments
    # ------------------------------------------------------------------

    def get_investment_transactions(
        self,
        access_token: str,
        days: int = INVESTMENT_HISTORY_DAYS,
    ) -> InvestmentTransactionsResult:
        """Fetch investment transactions for a trailing window with pagination.

        Args:
            access_token: The Item's access token.
            days: Number of days of history (default 730 = ~24 months).

        Returns:
            The transactions and every security they reference.
        """
        end_date = datetime.now(timezone.utc).date()
        start_date = end_date - timedelta(days=days)

        request = InvestmentsTransactionsGetRequest(
            access_token=access_token,
            start_date=start_date,
            end_date=end_date,
        )

        result = InvestmentTransactionsResult()
        seen_securities: set[str] = set()
        total_transactions = None
        offset = 0

        while True:
            response = self._call(
                "investment transactions fetch", "investments_transactions_get", request
            )

            if total_transactions is None:
                total_transactions = response.get("total_investment_transactions", 0)

            for sec in response.get("securities") or []:
                sid = sec.get("security_id")
                if sid and sid not in seen_securities:
                    seen_securities.add(sid)
                    result.securities.append(PlaidSecurity.from_dict(sec))

            page = response.get("investment_transactions") or []
            for txn in page:
                try:
                    result.investment_transactions.append(PlaidInvestmentTransaction.from_dict(txn))
                except ValueError:
                    logger.warning("Skipping malformed investment transaction: %.200r", txn)

            offset += len(page)
            if not page or offset >= total_transactions:
                break

            # Request next page
            request = InvestmentsTransactionsGetRequest(
                access_token=access_token,
                start_date=start_date,
                end_date=end_date,
                options=InvestmentsTransactionsGetRequestOptions(offset=offset),
            )

        return result

    def get_holdings(self, access_token: str) -> HoldingsResult:
        """Fetch current investment positions for an Item."""
        request = InvestmentsHoldingsGetRequest(access_token=access_token)
        response = self._call("holdings fetch", "investments_holdings_get", request)
        return HoldingsResult(
            holdings=[
                PlaidHolding.from_dict(h)
                for h in response.get("holdings") or []
                if h.get("security_id")
            ],
            securities=[
                PlaidSecurity.from_dict(s)
                for s in response.get("securities") or []
                if s.get("security_id")
            ],
        )

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _map_plaid_error(exc: ApiException, operation: str = "request") -> ProviderAPIError | ProviderAuthError:
        """Map a Plaid ApiException to the typed provider exception hierarchy."""
        status = exc.status or 0
        message = f"Plaid {operation} failed: {exc.reason or exc}"

        # Try to extract error_code from the body
        error_code = ""
        try:
            body = json.loads(exc.body) if exc.body else {}
            error_code = body.get("error_code", "") or ""
            error_message = body.get("error_message", "")
            if error_message:
                message = f"Plaid error ({error_code}): {error_message}"
        except (TypeError, ValueError, AttributeError):
            pass

        if status in (401, 403) or error_code in _AUTH_ERROR_CODES:
            return ProviderAuthError(message, error_code=error_code or None)
        return ProviderAPIError(message, status_code=status or None, error_code=error_code or None)
