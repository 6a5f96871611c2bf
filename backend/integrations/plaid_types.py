"""Structured Plaid payloads.

Plaid responses arrive as loosely typed nested dicts (``location``,
``payment_meta``, ``personal_finance_category``, ``counterparties`` ...).
These dataclasses give each shape explicit optional fields. Every
``from_dict`` is defensive: a missing or malformed sub-object becomes
``None`` instead of raising, so one odd payload never aborts a sync.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from integrations.parsing_utils import parse_date, parse_iso_datetime, to_decimal


def _as_dict(value) -> dict | None:
    """Return ``value`` if it is a dict, else None."""
    return value if isinstance(value, dict) else None


def _as_str(value) -> str | None:
    """Return a non-empty string or None."""
    if value is None:
        return None
    value = str(value)
    return value or None


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop None values so stored JSON only carries what Plaid sent."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class PersonalFinanceCategory:
    """Plaid's personal finance category (PFC) classification."""

    primary: str | None = None  # e.g. "FOOD_AND_DRINK"
    detailed: str | None = None  # e.g. "FOOD_AND_DRINK_RESTAURANTS"
    confidence_level: str | None = None  # VERY_HIGH, HIGH, MEDIUM, LOW, UNKNOWN
    version: str | None = None

    @classmethod
    def from_dict(cls, data) -> "PersonalFinanceCategory | None":
        data = _as_dict(data)
        if not data:
            return None
        return cls(
            primary=_as_str(data.get("primary")),
            detailed=_as_str(data.get("detailed")),
            confidence_level=_as_str(data.get("confidence_level")),
            version=_as_str(data.get("version")),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass
class Location:
    """Where a transaction happened, when Plaid knows."""

    address: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    lat: float | None = None
    lon: float | None = None
    store_number: str | None = None

    @classmethod
    def from_dict(cls, data) -> "Location | None":
        data = _as_dict(data)
        if not data:
            return None
        location = cls(
            address=_as_str(data.get("address")),
            city=_as_str(data.get("city")),
            region=_as_str(data.get("region")),
            postal_code=_as_str(data.get("postal_code")),
            country=_as_str(data.get("country")),
            lat=_to_float(data.get("lat")),
            lon=_to_float(data.get("lon")),
            store_number=_as_str(data.get("store_number")),
        )
        # Plaid sends a location object with every field null for online purchases
        if not location.to_dict():
            return None
        return location

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass
class PaymentMeta:
    """Transfer metadata (ACH/wire references, payer and payee)."""

    reference_number: str | None = None
    ppd_id: str | None = None
    payee: str | None = None
    by_order_of: str | None = None
    payer: str | None = None
    payment_method: str | None = None
    payment_processor: str | None = None
    reason: str | None = None

    @classmethod
    def from_dict(cls, data) -> "PaymentMeta | None":
        data = _as_dict(data)
        if not data:
            return None
        meta = cls(**{name: _as_str(data.get(name)) for name in cls.__dataclass_fields__})
        if not meta.to_dict():
            return None
        return meta

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass
class Counterparty:
    """A party on the other side of a transaction (merchant, processor, ...)."""

    name: str | None = None
    type: str | None = None  # merchant, financial_institution, payment_app, ...
    entity_id: str | None = None
    website: str | None = None
    logo_url: str | None = None
    confidence_level: str | None = None
    phone_number: str | None = None

    @classmethod
    def from_dict(cls, data) -> "Counterparty | None":
        data = _as_dict(data)
        if not data:
            return None
        return cls(**{name: _as_str(data.get(name)) for name in cls.__dataclass_fields__})

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


def _to_float(value) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class PlaidTransaction:
    """One entry of ``added`` or ``modified`` from /transactions/sync.

    ``amount`` keeps Plaid's sign (positive = money out).
    """

    transaction_id: str
    account_id: str
    amount: Decimal
    date: date
    name: str | None = None
    merchant_name: str | None = None
    pending: bool = False
    merchant_entity_id: str | None = None
    logo_url: str | None = None
    website: str | None = None
    payment_channel: str | None = None
    transaction_code: str | None = None
    iso_currency_code: str | None = None
    unofficial_currency_code: str | None = None
    authorized_date: date | None = None
    authorized_datetime: datetime | None = None
    transaction_datetime: datetime | None = None
    check_number: str | None = None
    account_owner: str | None = None
    pending_transaction_id: str | None = None
    original_description: str | None = None
    personal_finance_category: PersonalFinanceCategory | None = None
    personal_finance_category_icon_url: str | None = None
    location: Location | None = None
    payment_meta: PaymentMeta | None = None
    counterparties: list[Counterparty] = field(default_factory=list)

    @property
    def detailed_category(self) -> str | None:
        """The PFC detailed code, if Plaid supplied one."""
        if self.personal_finance_category is None:
            return None
        return self.personal_finance_category.detailed

    @classmethod
    def from_dict(cls, data: dict) -> "PlaidTransaction":
        """Build from a Plaid transaction dict.

        Raises:
            ValueError: If the transaction id, amount or date is unusable.
        """
        transaction_id = _as_str(data.get("transaction_id"))
        amount = to_decimal(data.get("amount"))
        txn_date = parse_date(data.get("date"))
        if not transaction_id or amount is None or txn_date is None:
            raise ValueError(f"Incomplete Plaid transaction: {transaction_id!r}")

        counterparties = []
        raw_counterparties = data.get("counterparties")
        if isinstance(raw_counterparties, list):
            for raw in raw_counterparties:
                party = Counterparty.from_dict(raw)
                if party is not None:
                    counterparties.append(party)

        return cls(
            transaction_id=transaction_id,
            account_id=_as_str(data.get("account_id")) or "",
            amount=amount,
            date=txn_date,
            name=_as_str(data.get("name")),
            merchant_name=_as_str(data.get("merchant_name")),
            pending=bool(data.get("pending")),
            merchant_entity_id=_as_str(data.get("merchant_entity_id")),
            logo_url=_as_str(data.get("logo_url")),
            website=_as_str(data.get("website")),
            payment_channel=_as_str(data.get("payment_channel")),
            transaction_code=_as_str(data.get("transaction_code")),
            iso_currency_code=_as_str(data.get("iso_currency_code")),
            unofficial_currency_code=_as_str(data.get("unofficial_currency_code")),
            authorized_date=parse_date(data.get("authorized_date")),
            authorized_datetime=parse_iso_datetime(data.get("authorized_datetime")),
            transaction_datetime=parse_iso_datetime(data.get("datetime")),
            check_number=_as_str(data.get("check_number")),
            account_owner=_as_str(data.get("account_owner")),
            pending_transaction_id=_as_str(data.get("pending_transaction_id")),
            original_description=_as_str(data.get("original_description")),
            personal_finance_category=PersonalFinanceCategory.from_dict(
                data.get("personal_finance_category")
            ),
            personal_finance_category_icon_url=_as_str(
                data.get("personal_finance_category_icon_url")
            ),
            location=Location.from_dict(data.get("location")),
            payment_meta=PaymentMeta.from_dict(data.get("payment_meta")),
            counterparties=counterparties,
        )


@dataclass
class RemovedTransaction:
    """One entry of ``removed`` from /transactions/sync."""

    transaction_id: str
    account_id: str | None = None


@dataclass
class TransactionSyncPage:
    """One page of /transactions/sync deltas."""

    added: list[PlaidTransaction] = field(default_factory=list)
    modified: list[PlaidTransaction] = field(default_factory=list)
    removed: list[RemovedTransaction] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


@dataclass
class PlaidAccount:
    """An account as reported by /accounts/balance/get."""

    account_id: str
    name: str | None = None
    official_name: str | None = None
    mask: str | None = None
    type: str | None = None  # depository, credit, loan, investment, other
    subtype: str | None = None
    current_balance: Decimal | None = None
    available_balance: Decimal | None = None
    limit: Decimal | None = None
    iso_currency_code: str | None = None
    unofficial_currency_code: str | None = None
    balance_last_updated: datetime | None = None
    verification_status: str | None = None
    verification_name: str | None = None
    verification_insights: dict | None = None
    persistent_account_id: str | None = None
    holder_category: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlaidAccount":
        balances = _as_dict(data.get("balances")) or {}
        return cls(
            account_id=_as_str(data.get("account_id")) or "",
            name=_as_str(data.get("name")),
            official_name=_as_str(data.get("official_name")),
            mask=_as_str(data.get("mask")),
            type=_as_str(data.get("type")),
            subtype=_as_str(data.get("subtype")),
            current_balance=to_decimal(balances.get("current")),
            available_balance=to_decimal(balances.get("available")),
            limit=to_decimal(balances.get("limit")),
            iso_currency_code=_as_str(balances.get("iso_currency_code")),
            unofficial_currency_code=_as_str(balances.get("unofficial_currency_code")),
            balance_last_updated=parse_iso_datetime(balances.get("last_updated_datetime")),
            verification_status=_as_str(data.get("verification_status")),
            verification_name=_as_str(data.get("verification_name")),
            verification_insights=_as_dict(data.get("verification_insights")),
            persistent_account_id=_as_str(data.get("persistent_account_id")),
            holder_category=_as_str(data.get("holder_category")),
        )


@dataclass
class ItemStatus:
    """Item metadata from /item/get."""

    item_id: str
    institution_id: str | None = None
    last_successful_update: datetime | None = None
    error_code: str | None = None


@dataclass
class PlaidSecurity:
    """A security from /investments/transactions/get or /investments/holdings/get."""

    security_id: str
    name: str | None = None
    ticker_symbol: str | None = None
    isin: str | None = None
    cusip: str | None = None
    sedol: str | None = None
    close_price: Decimal | None = None
    close_price_as_of: date | None = None
    type: str | None = None
    iso_currency_code: str | None = None
    unofficial_currency_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlaidSecurity":
        return cls(
            security_id=_as_str(data.get("security_id")) or "",
            name=_as_str(data.get("name")),
            ticker_symbol=_as_str(data.get("ticker_symbol")),
            isin=_as_str(data.get("isin")),
            cusip=_as_str(data.get("cusip")),
            sedol=_as_str(data.get("sedol")),
            close_price=to_decimal(data.get("close_price")),
            close_price_as_of=parse_date(data.get("close_price_as_of")),
            type=_as_str(data.get("type")),
            iso_currency_code=_as_str(data.get("iso_currency_code")),
            unofficial_currency_code=_as_str(data.get("unofficial_currency_code")),
        )


@dataclass
class PlaidInvestmentTransaction:
    """A brokerage transaction. ``amount`` keeps Plaid's sign."""

    investment_transaction_id: str
    account_id: str
    date: date
    security_id: str | None = None
    name: str | None = None
    amount: Decimal | None = None
    quantity: Decimal | None = None
    price: Decimal | None = None
    fees: Decimal | None = None
    type: str | None = None
    subtype: str | None = None
    iso_currency_code: str | None = None
    unofficial_currency_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlaidInvestmentTransaction":
        txn_id = _as_str(data.get("investment_transaction_id"))
        txn_date = parse_date(data.get("date"))
        if not txn_id or txn_date is None:
            raise ValueError(f"Incomplete Plaid investment transaction: {txn_id!r}")
        return cls(
            investment_transaction_id=txn_id,
            account_id=_as_str(data.get("account_id")) or "",
            date=txn_date,
            security_id=_as_str(data.get("security_id")),
            name=_as_str(data.get("name")),
            amount=to_decimal(data.get("amount")),
            quantity=to_decimal(data.get("quantity")),
            price=to_decimal(data.get("price")),
            fees=to_decimal(data.get("fees")),
            type=_as_str(data.get("type")),
            subtype=_as_str(data.get("subtype")),
            iso_currency_code=_as_str(data.get("iso_currency_code")),
            unofficial_currency_code=_as_str(data.get("unofficial_currency_code")),
        )


@dataclass
class InvestmentTransactionsResult:
    """All investment transactions in a date window, with their securities."""

    investment_transactions: list[PlaidInvestmentTransaction] = field(default_factory=list)
    securities: list[PlaidSecurity] = field(default_factory=list)


@dataclass
class PlaidHolding:
    """A position from /investments/holdings/get."""

    account_id: str
    security_id: str
    quantity: Decimal | None = None
    institution_price: Decimal | None = None
    institution_value: Decimal | None = None
    cost_basis: Decimal | None = None
    iso_currency_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlaidHolding":
        return cls(
            account_id=_as_str(data.get("account_id")) or "",
            security_id=_as_str(data.get("security_id")) or "",
            quantity=to_decimal(data.get("quantity")),
            institution_price=to_decimal(data.get("institution_price")),
            institution_value=to_decimal(data.get("institution_value")),
            cost_basis=to_decimal(data.get("cost_basis")),
            iso_currency_code=_as_str(data.get("iso_currency_code")),
        )


@dataclass
class HoldingsResult:
    """Current positions for one Item, with their securities."""

    holdings: list[PlaidHolding] = field(default_factory=list)
    securities: list[PlaidSecurity] = field(default_factory=list)
