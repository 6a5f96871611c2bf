"""Security model - securities referenced by Plaid investment transactions."""

from sqlalchemy import Column, Date, DateTime, Numeric, String

from database import Base
from models.utils import generate_uuid, utc_now


class Security(Base):
    """A security (stock, fund, cash equivalent) keyed by Plaid's security_id."""

    __tablename__ = "securities"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    plaid_security_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="Unknown Security")
    ticker_symbol = Column(String, nullable=True)
    isin = Column(String, nullable=True)
    cusip = Column(String, nullable=True)
    sedol = Column(String, nullable=True)
    close_price = Column(Numeric(18, 4), nullable=True)
    close_price_as_of = Column(Date, nullable=True)
    type = Column(String, nullable=True)
    iso_currency_code = Column(String, nullable=True)
    unofficial_currency_code = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
