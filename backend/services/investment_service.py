"""Investment service - securities, investment transactions and derived holdings."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload

from integrations.plaid_types import PlaidInvestmentTransaction, PlaidSecurity
from models import InvestmentTransaction, PlaidItem, Security

logger = logging.getLogger(__name__)

HOLDINGS_TRANSACTION_LIMIT = 10000


@dataclass
class HoldingPosition:
    """A position derived by replaying investment transactions."""

    plaid_item_id: str
    account_id: str | None
    security_id: str
    security_name: str | None
    security_ticker: str | None
    institution_name: str | None
    currency_code: str
    quantity: Decimal
    cost_basis: Decimal
    current_price: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    gain_loss: Decimal = Decimal("0")
    gain_loss_percent: Decimal = Decimal("0")


class InvestmentService:
    """Store and query Plaid investment data.

    Writes ``flush()``; the caller commits.
    """

    @staticmethod
    def upsert_security(db: Session, security: PlaidSecurity) -> Security:
        """Insert or overwrite a security keyed by Plaid's security_id."""
        values = {
            "name": security.name or "Unknown Security",
            "ticker_symbol": security.ticker_symbol,
            "isin": security.isin,
            "cusip": security.cusip,
            "sedol": security.sedol,
            "close_price": security.close_price,
            "close_price_as_of": security.close_price_as_of,
            "type": security.type,
            "iso_currency_code": security.iso_currency_code,
            "unofficial_currency_code": security.unofficial_currency_code,
        }
        row = (
            db.query(Security)
            .filter(Security.plaid_security_id == security.security_id)
            .first()
        )
        if row is None:
            row = Security(plaid_security_id=security.security_id, **values)
            db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
        db.flush()
        return row

    @staticmethod
    def upsert_investment_transaction(
        db: Session, txn: PlaidInvestmentTransaction, plaid_item_id: str
    ) -> InvestmentTransaction:
        """Insert or overwrite an investment transaction.

        The amount is stored with Plaid's sign. The owning account is only
        set on insert.
        """
        values = {
            "account_id": txn.account_id,
            "security_id": txn.security_id,
            "date": txn.date,
            "name": txn.name,
            "amount": txn.amount,
            "quantity": txn.quantity,
            "price": txn.price,
            "fees": txn.fees,
            "type": txn.type,
            "subtype": txn.subtype,
            "iso_currency_code": txn.iso_currency_code,
            "unofficial_currency_code": txn.unofficial_currency_code,
        }
        row = (
            db.query(InvestmentTransaction)
            .filter(
                InvestmentTransaction.plaid_investment_transaction_id
                == txn.investment_transaction_id
            )
            .first()
        )
        if row is None:
            row = InvestmentTransaction(
                plaid_investment_transaction_id=txn.investment_transaction_id,
                plaid_item_id=plaid_item_id,
                **values,
            )
            db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
        db.flush()
        return row

    @staticmethod
    def list_investment_transactions(db: Session, limit: int = 1000) -> list[InvestmentTransaction]:
        """Investment transactions newest first, with security and account loaded."""
        return (
            db.query(InvestmentTransaction)
            .options(
                joinedload(InvestmentTransaction.security),
                joinedload(InvestmentTransaction.account),
            )
            .order_by(InvestmentTransaction.date.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def calculate_holdings(db: Session) -> list[HoldingPosition]:
        """Derive current positions by replaying investment transactions.

        Transactions are replayed oldest first per (account, security):
        buys and cash add quantity and ``price * quantity + fees`` of cost,
        sells reduce cost proportionally to the quantity sold, and fee
        transactions with a quantity add their fees to cost. Positions that
        end at zero or below are dropped. Values use the security's close
        price.
        """
        rows = (
            db.query(InvestmentTransaction, Security, PlaidItem.institution_name)
            .outerjoin(Security, InvestmentTransaction.security_id == Security.plaid_security_id)
            .outerjoin(PlaidItem, InvestmentTransaction.plaid_item_id == PlaidItem.id)
            .filter(InvestmentTransaction.security_id.isnot(None))
            .order_by(InvestmentTransaction.date.asc(), InvestmentTransaction.created_at.asc())
            .limit(HOLDINGS_TRANSACTION_LIMIT)
            .all()
        )

        positions: dict[tuple[str, str], HoldingPosition] = {}
        prices: dict[str, Decimal] = {}
        for txn, security, institution_name in rows:
            key = (txn.plaid_item_id, txn.security_id)
            position = positions.get(key)
            if position is None:
                position = HoldingPosition(
                    plaid_item_id=txn.plaid_item_id,
                    account_id=txn.account_id,
                    security_id=txn.security_id,
                    security_name=security.name if security else None,
                    security_ticker=security.ticker_symbol if security else None,
                    institution_name=institution_name,
                    currency_code=txn.iso_currency_code or "USD",
                    quantity=Decimal("0"),
                    cost_basis=Decimal("0"),
                )
                positions[key] = position
            if security is not None and security.close_price is not None:
                prices[txn.security_id] = Decimal(security.close_price)

            quantity = Decimal(txn.quantity or 0)
            price = Decimal(txn.price or 0)
            fees = Decimal(txn.fees or 0)

            if txn.type in ("buy", "cash"):
                position.quantity += quantity
                position.cost_basis += price * quantity + fees
            elif txn.type == "sell":
                if position.quantity > 0:
                    cost_per_share = position.cost_basis / position.quantity
                    position.quantity -= quantity
                    position.cost_basis -= cost_per_share * quantity
            elif txn.type == "fee" and quantity:
                position.cost_basis += abs(fees)

        holdings = []
        for position in positions.values():
            if position.quantity <= 0:
                continue
            position.current_price = prices.get(position.security_id, Decimal("0"))
            position.current_value = position.quantity * position.current_price
            position.gain_loss = position.current_value - position.cost_basis
            if position.cost_basis > 0:
                position.gain_loss_percent = position.gain_loss / position.cost_basis * 100
            holdings.append(position)

        logger.debug("Calculated %d holdings from %d transactions", len(holdings), len(rows))
        return holdings
