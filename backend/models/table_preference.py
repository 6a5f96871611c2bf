"""TablePreference model - saved column layout for a data table."""

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint

from database import Base
from models.utils import generate_uuid, utc_now

CONTEXT_TYPES = ("account", "category", "all", "merchants", "merchant_categories")


class TablePreference(Base):
    """Column visibility, order, sizing and sorting for one table context.

    A context is a table type plus an optional id (e.g. the transactions
    table filtered to one account).
    """

    __tablename__ = "table_preferences"
    __table_args__ = (
        UniqueConstraint("context_type", "context_id", name="uix_table_preference_context"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    context_type = Column(String, nullable=False)
    context_id = Column(String, nullable=True)
    column_visibility = Column(Text, nullable=False, default="{}")  # JSON-serialized
    column_order = Column(Text, nullable=False, default="[]")
    column_sizing = Column(Text, nullable=False, default="{}")
    sorting = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
