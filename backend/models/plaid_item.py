"""PlaidItem model - one row per account linked through Plaid."""

from sqlalchemy import Boolean, Column, DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now

SYNC_STATUS_ACTIVE = "active"
SYNC_STATUS_ERROR = "error"
SYNC_STATUS_INACTIVE = "inactive"


class PlaidItem(Base):
    """A bank or brokerage account reached through a Plaid Item.

    Every account at one institution shares the same ``item_id`` and
    ``access_token``; ``plaid_account_id`` identifies the account within
    the Item. Rows created before per-account tracking have a null
    ``plaid_account_id`` until the next sync adopts the provider's id.
    Accounts are never deleted by sync, only moved to ``inactive``.
    """

    __tablename__ = "plaid_items"
    __table_args__ = (
        Index("ix_plaid_items_item_account", "item_id", "plaid_account_id"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    item_id = Column(String, index=True, nullable=False)
    access_token = Column(String, nullable=False)
    institution_id = Column(String, nullable=True)
    institution_name = Column(String, nullable=True)

    plaid_account_id = Column(String, nullable=True, index=True)
    persistent_account_id = Column(String, nullable=True)
    account_name = Column(String, nullable=True)
    official_name = Column(String, nullable=True)
    mask = Column(String, nullable=True)
    account_type = Column(String, nullable=True, default="depository")
    account_subtype = Column(String, nullable=True)
    holder_category = Column(String, nullable=True)

    # User overrides
    custom_name = Column(String, nullable=True)
    is_hidden = Column(Boolean, default=False, nullable=False)

    current_balance = Column(Numeric(18, 4), nullable=True)
    available_balance = Column(Numeric(18, 4), nullable=True)
    balance_limit = Column(Numeric(18, 4), nullable=True)
    balance_currency_code = Column(String, nullable=True, default="USD")
    unofficial_currency_code = Column(String, nullable=True)
    balance_last_updated_datetime = Column(DateTime, nullable=True)

    verification_status = Column(String, nullable=True)
    verification_name = Column(String, nullable=True)
    verification_insights = Column(Text, nullable=True)  # JSON-serialized

    cursor = Column(Text, nullable=True)  # Plaid /transactions/sync cursor
    last_sync_at = Column(DateTime, nullable=True)
    sync_status = Column(String, nullable=False, default=SYNC_STATUS_ACTIVE, index=True)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    transactions = relationship("Transaction", back_populates="account")

    @property
    def display_name(self) -> str:
        """Name shown in the UI: custom name, then Plaid name, then institution."""
        return self.custom_name or self.account_name or self.institution_name or "Account"
