"""SQLAlchemy ORM models."""

from .category import Category
from .investment_transaction import InvestmentTransaction
from .merchant import Merchant
from .plaid_item import PlaidItem
from .security import Security
from .table_preference import TablePreference
from .tag import Tag
from .transaction import Transaction
from .utils import generate_uuid, utc_now

__all__ = ["Category", "InvestmentTransaction", "Merchant", "PlaidItem", "Security", "TablePreference", "Tag", "Transaction", "generate_uuid", "utc_now"]
