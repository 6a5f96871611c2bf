"""Category model - hierarchical spending categories."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Category(Base):
    """A spending category, optionally nested under a parent category.

    Categories auto-created from Plaid's personal finance taxonomy carry
    the detailed code they were created for. At most one category may
    claim a given detailed code.
    """

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    parent_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    is_parent_category = Column(Boolean, default=False, nullable=False)
    plaid_detailed_category_id = Column(String, unique=True, nullable=True)
    plaid_primary_category = Column(String, nullable=True)
    plaid_description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    parent = relationship("Category", remote_side=[id])
