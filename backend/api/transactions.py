"""Transactions API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.helpers import transaction_response_dict
from database import get_db
from schemas import (
    BulkUpdateResponse, TransactionBulkUpdate, TransactionListResponse,
    TransactionResponse, TransactionUpdate,
)
from services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    limit: int = Query(1000, ge=1, le=10000),
    account_id: Optional[str] = None,
    category_id: Optional[str] = None,
    merchant_name: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List transactions newest first with category, tag and account names."""
    transactions = TransactionService.list_transactions(
        db,
        limit=limit,
        plaid_item_id=account_id,
        category_id=category_id,
        merchant_name=merchant_name,
    )
    return TransactionListResponse(
        transactions=[transaction_response_dict(t) for t in transactions],
        count=len(transactions),
    )


@router.post("/bulk-update", response_model=BulkUpdateResponse)
def bulk_update_transactions(body: TransactionBulkUpdate, db: Session = Depends(get_db)):
    """Apply the same edit to many transactions."""
    fields = body.updates.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No updates provided")

    updated = TransactionService.bulk_update_transactions(db, body.transaction_ids, fields)
    db.commit()
    logger.info("Bulk updated %d of %d transactions", updated, len(body.transaction_ids))
    return BulkUpdateResponse(updated_count=updated)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(transaction_id: str, body: TransactionUpdate, db: Session = Depends(get_db)):
    """Edit a transaction's category, tag, notes, merchant name or review flags."""
    txn = TransactionService.update_transaction_by_id(
        db, transaction_id, body.model_dump(exclude_unset=True)
    )
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    db.commit()
    db.refresh(txn)
    return transaction_response_dict(txn)
