"""Tag model - flat user-defined labels."""

from sqlalchemy import Column, DateTime, String

from database import Base
from models.utils import generate_uuid, utc_now


class Tag(Base):
    """A colored label applied to transactions and merchants, orthogonal to category."""

    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
