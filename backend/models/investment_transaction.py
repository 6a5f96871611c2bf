"""InvestmentTransaction model - brokerage trades and cash movements from Plaid."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class InvestmentTransaction(Base):
    """An investment transaction keyed by Plaid's investment_transaction_id.

    ``security_id`` holds Plaid's security_id, so the referenced
    :class:`Security` must be stored first. ``amount`` keeps Plaid's sign.
    """

    __tablename__ = "investment_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    plaid_investment_transaction_id = Column(String, unique=True, index=True, nullable=False)
    plaid_item_id = Column(
        String(36), ForeignKey("plaid_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    account_id = Column(String, nullable=True)  # Plaid account_id
    security_id = Column(
        String, ForeignKey("securities.plaid_security_id"), nullable=True, index=True
    )
    date = Column(Date, nullable=False)
    name = Column(String, nullable=True)
    amount = Column(Numeric(18, 4), nullable=True)
    quantity = Column(Numeric(18, 8), nullable=True)
    price = Column(Numeric(18, 4), nullable=True)
    fees = Column(Numeric(18, 4), nullable=True)
    type = Column(String, nullable=True)  # buy, sell, cash, fee, transfer, cancel
    subtype = Column(String, nullable=True)
    iso_currency_code = Column(String, nullable=True)
    unofficial_currency_code = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    account = relationship("PlaidItem")
    security = relationship("Security")
