"""Accounts API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from schemas import AccountListResponse, AccountResponse, AccountUpdate, UnreviewedCountsResponse
from services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResponse)
def list_accounts(db: Session = Depends(get_db)):
    """List all linked accounts, including inactive ones."""
    accounts = AccountService.list_accounts(db)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        count=len(accounts),
    )


@router.get("/unreviewed-counts", response_model=UnreviewedCountsResponse)
def unreviewed_counts(db: Session = Depends(get_db)):
    """Number of unreviewed transactions per account."""
    return UnreviewedCountsResponse(counts=AccountService.unreviewed_counts(db))


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(account_id: str, body: AccountUpdate, db: Session = Depends(get_db)):
    """Update an account's custom name or hidden flag."""
    account = AccountService.update_account(
        db,
        account_id,
        custom_name=body.custom_name,
        is_hidden=body.is_hidden,
    )
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account
