"""Merchants API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import get_or_404, transaction_response_dict
from database import get_db
from models import Merchant
from schemas import (
    MerchantBulkUpdate, MerchantBulkUpdateResponse, MerchantCreate, MerchantMerge,
    MerchantNamesResponse, MerchantResponse, MerchantSyncResponse, MerchantUpdate,
    MerchantWithStats, TransactionListResponse,
)
from services.merchant_service import DuplicateMerchantError, MerchantService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/merchants", tags=["merchants"])


def _merchant_with_stats(merchant: Merchant, stats: dict) -> dict:
    """Build a response dict for a Merchant with default names and statistics."""
    data = MerchantResponse.model_validate(merchant).model_dump()
    data["default_category_name"] = merchant.default_category.name if merchant.default_category else None
    data["default_tag_name"] = merchant.default_tag.name if merchant.default_tag else None
    data.update(stats.get(merchant.name, {}))
    return data


@router.get("", response_model=list[MerchantWithStats])
def list_merchants(db: Session = Depends(get_db)):
    """List merchants that have not been merged away, with transaction statistics."""
    stats = MerchantService.get_stats(db)
    return [_merchant_with_stats(m, stats) for m in MerchantService.list_merchants(db)]


@router.post("", response_model=MerchantResponse, status_code=201)
def create_merchant(body: MerchantCreate, db: Session = Depends(get_db)):
    """Create a merchant. Names are unique."""
    try:
        merchant = MerchantService.create_merchant(
            db,
            body.name,
            default_category_id=body.default_category_id,
            default_tag_id=body.default_tag_id,
            notes=body.notes,
        )
    except DuplicateMerchantError as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    db.refresh(merchant)
    return merchant


@router.post("/sync", response_model=MerchantSyncResponse)
def sync_merchants(db: Session = Depends(get_db)):
    """Create or back-fill merchants from the merchant names on stored transactions."""
    result = MerchantService.sync_from_transactions(db)
    db.commit()
    return MerchantSyncResponse(**result)


@router.get("/unique-names", response_model=MerchantNamesResponse)
def unique_merchant_names(db: Session = Depends(get_db)):
    """Every known merchant name, from transactions and the merchants table."""
    return MerchantNamesResponse(names=MerchantService.unique_names(db))


@router.get("/{merchant_id}", response_model=MerchantWithStats)
def get_merchant(merchant_id: str, db: Session = Depends(get_db)):
    merchant = get_or_404(db, Merchant, merchant_id, "Merchant not found")
    return _merchant_with_stats(merchant, MerchantService.get_stats(db))


@router.patch("/{merchant_id}", response_model=MerchantResponse)
def update_merchant(merchant_id: str, body: MerchantUpdate, db: Session = Depends(get_db)):
    """Update a merchant's name, defaults or metadata."""
    merchant = get_or_404(db, Merchant, merchant_id, "Merchant not found")
    try:
        MerchantService.update_merchant(db, merchant, body.model_dump(exclude_unset=True))
    except DuplicateMerchantError as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    db.refresh(merchant)
    return merchant


@router.delete("/{merchant_id}")
def delete_merchant(merchant_id: str, db: Session = Depends(get_db)):
    merchant = get_or_404(db, Merchant, merchant_id, "Merchant not found")
    MerchantService.delete_merchant(db, merchant)
    db.commit()
    return {"success": True}


@router.post("/{merchant_id}/bulk-update", response_model=MerchantBulkUpdateResponse)
def bulk_update_merchant(merchant_id: str, body: MerchantBulkUpdate, db: Session = Depends(get_db)):
    """Set a merchant's default category/tag, optionally re-tagging its transactions.

    The merchant is looked up (or created) by ``merchant_name``; the path id
    is informational. ``entity_id`` stands in for ``tag_id`` when only the
    former is sent.
    """
    if not body.merchant_name:
        raise HTTPException(status_code=400, detail="Merchant name is required")

    sent = body.model_dump(exclude_unset=True)
    updates = {}
    if "category_id" in sent:
        updates["category_id"] = sent["category_id"]
    if "tag_id" in sent:
        updates["tag_id"] = sent["tag_id"]
    elif "entity_id" in sent:
        updates["tag_id"] = sent["entity_id"]

    merchant, updated_count = MerchantService.bulk_update(
        db, body.merchant_name, updates, body.update_existing
    )
    db.commit()
    db.refresh(merchant)
    logger.info(
        "Bulk updated merchant %s (%d transactions changed)", merchant.name, updated_count
    )
    return MerchantBulkUpdateResponse(
        merchant=MerchantResponse.model_validate(merchant),
        transactions_updated=updated_count,
    )


@router.post("/{merchant_id}/confirm", response_model=MerchantResponse)
def confirm_merchant(merchant_id: str, db: Session = Depends(get_db)):
    """Mark a merchant as confirmed so its default category wins on modified transactions."""
    merchant = get_or_404(db, Merchant, merchant_id, "Merchant not found")
    MerchantService.confirm_merchant(db, merchant)
    db.commit()
    db.refresh(merchant)
    return merchant


@router.post("/{merchant_id}/merge")
def merge_merchant(merchant_id: str, body: MerchantMerge, db: Session = Depends(get_db)):
    """Merge a merchant into another, renaming its transactions."""
    if not body.target_merchant_id:
        raise HTTPException(status_code=400, detail="Target merchant ID is required")

    source = db.query(Merchant).filter(Merchant.id == merchant_id).first()
    target = db.query(Merchant).filter(Merchant.id == body.target_merchant_id).first()
    if source is None or target is None:
        raise HTTPException(status_code=404, detail="Source or target merchant not found")

    try:
        renamed = MerchantService.merge_merchants(db, source, target)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return {
        "success": True,
        "message": f'Merged "{source.name}" into "{target.name}"',
        "transactions_updated": renamed,
    }


@router.get("/{merchant_id}/transactions", response_model=TransactionListResponse)
def merchant_transactions(merchant_id: str, db: Session = Depends(get_db)):
    """Transactions whose merchant name matches this merchant."""
    merchant = get_or_404(db, Merchant, merchant_id, "Merchant not found")
    transactions = MerchantService.get_transactions(db, merchant)
    return TransactionListResponse(
        transactions=[transaction_response_dict(t) for t in transactions],
        count=len(transactions),
    )
