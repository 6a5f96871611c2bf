"""Pydantic schemas for API request/response validation."""

from .account import AccountListResponse, AccountResponse, AccountSyncStatus, AccountUpdate, UnreviewedCountsResponse
from .category import (
    CategoryBulkUpdate, CategoryCreate, CategoryResponse, CategoryUpdate,
    TagCreate, TagResponse, TagUpdate,
)
from .investment import (
    HoldingListResponse, HoldingResponse,
    InvestmentTransactionListResponse, InvestmentTransactionResponse,
)
from .merchant import (
    MerchantBulkUpdate, MerchantBulkUpdateResponse, MerchantCreate, MerchantMerge,
    MerchantNamesResponse, MerchantResponse, MerchantSyncResponse, MerchantUpdate, MerchantWithStats,
)
from .plaid import ExchangeTokenRequest, ExchangeTokenResponse, LinkTokenRequest, LinkTokenResponse
from .sync import PlaidWebhook, SyncResponse, SyncStatusResponse
from .table_preference import TablePreferenceEnvelope, TablePreferenceResponse, TablePreferenceSet
from .transaction import (
    BulkUpdateResponse, TransactionBulkUpdate, TransactionListResponse,
    TransactionResponse, TransactionUpdate,
)
