"""Plaid webhook receiver."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.sync import get_sync_service
from database import get_db
from schemas import PlaidWebhook
from services.sync_service import ItemNotFoundError, SyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/plaid")
def plaid_webhook(
    webhook: PlaidWebhook,
    db: Session = Depends(get_db),
    sync_service: SyncService = Depends(get_sync_service),
):
    """Handle a Plaid webhook.

    ``SYNC_UPDATES_AVAILABLE`` runs an incremental sync of the named Item;
    every other code is acknowledged without action.
    """
    logger.info("Received Plaid webhook: %s %s", webhook.webhook_type, webhook.webhook_code)

    try:
        outcome = sync_service.handle_webhook(db, webhook.webhook_code, webhook.item_id)
    except ItemNotFoundError:
        logger.warning("Webhook for unknown item %s", webhook.item_id)
        return JSONResponse(status_code=404, content={"success": False, "error": "Item not found"})

    if outcome is None:
        return {"success": True, "message": "Webhook received"}

    if outcome.error:
        return JSONResponse(status_code=500, content={"success": False, "error": outcome.error})

    return {
        "success": True,
        "message": "Sync completed",
        "item_id": outcome.item_id,
        "added": outcome.added,
        "modified": outcome.modified,
        "removed": outcome.removed,
    }
