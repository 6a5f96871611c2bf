"""API route handlers."""
from . import accounts, categories, investments, merchants, plaid, sync, table_preferences, transactions, webhooks

__all__ = [
    "accounts",
    "categories",
    "investments",
    "merchants",
    "plaid",
    "sync",
    "table_preferences",
    "transactions",
    "webhooks",
]
