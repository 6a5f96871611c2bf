"""Merchant model - normalized merchants carrying categorization defaults."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Merchant(Base):
    """A merchant keyed by name, with defaults applied to its future transactions.

    ``merchant_entity_id`` is Plaid's stable merchant identifier and takes
    precedence over the name when matching incoming transactions.
    """

    __tablename__ = "merchants"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, index=True, nullable=False)
    merchant_entity_id = Column(String, nullable=True, index=True)
    default_category_id = Column(
        String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    default_tag_id = Column(String(36), ForeignKey("tags.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    merged_into_merchant_id = Column(
        String(36), ForeignKey("merchants.id", ondelete="SET NULL"), nullable=True
    )
    logo_url = Column(String, nullable=True)
    confidence_level = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    default_category = relationship("Category")
    default_tag = relationship("Tag")
