"""Transaction model - a bank/card transaction synced from Plaid."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Transaction(Base):
    """A single financial transaction keyed by Plaid's transaction_id.

    Amounts use the local sign convention: expenses are negative (Plaid
    reports them positive). ``merchant_name`` is user editable while
    ``plaid_merchant_name`` keeps the first name Plaid reported.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    plaid_transaction_id = Column(String, unique=True, index=True, nullable=False)
    plaid_item_id = Column(
        String(36), ForeignKey("plaid_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    account_id = Column(String, nullable=True)  # Plaid account_id
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(18, 4), nullable=False)
    name = Column(String, nullable=False, default="")
    merchant_name = Column(String, nullable=True, index=True)
    plaid_merchant_name = Column(String, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="SET NULL"), nullable=True)
    pending = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    is_reviewed = Column(Boolean, default=False, nullable=False)

    # Plaid metadata
    payment_channel = Column(String, nullable=True)
    transaction_code = Column(String, nullable=True)
    iso_currency_code = Column(String, nullable=True)
    unofficial_currency_code = Column(String, nullable=True)
    authorized_date = Column(Date, nullable=True)
    authorized_datetime = Column(DateTime, nullable=True)
    transaction_datetime = Column("datetime", DateTime, nullable=True)
    check_number = Column(String, nullable=True)
    merchant_entity_id = Column(String, nullable=True, index=True)
    logo_url = Column(String, nullable=True)
    website = Column(String, nullable=True)
    account_owner = Column(String, nullable=True)
    pending_transaction_id = Column(String, nullable=True)
    original_description = Column(String, nullable=True)
    personal_finance_category_icon_url = Column(String, nullable=True)
    personal_finance_category_version = Column(String, nullable=True)

    # JSON-serialized Plaid objects
    location = Column(Text, nullable=True)
    payment_meta = Column(Text, nullable=True)
    personal_finance_category_detailed = Column(Text, nullable=True)
    counterparties = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    account = relationship("PlaidItem", back_populates="transactions")
    category = relationship("Category")
    tag = relationship("Tag")
