"""Sync API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_db
from schemas import AccountSyncStatus, SyncResponse, SyncStatusResponse
from services.account_service import AccountService
from services.sync_service import SyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync", tags=["sync"])


def get_sync_service() -> SyncService:
    """Dependency for injecting the sync service (overridable in tests)."""
    return SyncService()


@router.post("", response_model=SyncResponse)
def trigger_sync(
    db: Session = Depends(get_db),
    sync_service: SyncService = Depends(get_sync_service),
):
    """Delete all transactions and resync every active account from scratch.

    Institution failures are recorded on their accounts and do not fail the
    request.

    Raises:
        HTTPException:
            - 409 Conflict: Sync is already in progress
    """
    if sync_service.is_sync_in_progress():
        raise HTTPException(
            status_code=409,
            detail="Sync already in progress. Please wait for the current sync to complete.",
        )

    try:
        result = sync_service.trigger_full_sync(db)
    except ValueError as e:
        # Sync lock contention
        if "already in progress" in str(e).lower():
            raise HTTPException(
                status_code=409,
                detail="Sync already in progress. Please wait for the current sync to complete.",
            )
        raise
    except Exception as e:
        logger.error("Unexpected error during sync", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return SyncResponse(
        message=result.message,
        synced=result.synced,
        added=result.added,
        modified=result.modified,
        removed=result.removed,
        total_in_database=result.total_in_database,
    )


@router.get("", response_model=SyncStatusResponse)
def sync_status(db: Session = Depends(get_db)):
    """List every account with its cursor and sync status."""
    accounts = AccountService.list_accounts(db)
    return SyncStatusResponse(
        items=[AccountSyncStatus.model_validate(a) for a in accounts],
    )
