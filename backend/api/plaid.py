"""Plaid Link API endpoints.

Server side of the Plaid Link flow: creating link tokens and exchanging
the public token for an access token plus one local row per account.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from integrations.exceptions import ProviderError
from integrations.plaid_client import PlaidClient
from schemas import ExchangeTokenRequest, ExchangeTokenResponse, LinkTokenRequest, LinkTokenResponse
from services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plaid", tags=["plaid"])

_INVALID_KEYS_HINT = (
    "Plaid rejected the credentials. Check that PLAID_ENVIRONMENT "
    "matches your keys (sandbox or production). "
    "Each environment has different secrets."
)


def _get_plaid_client() -> PlaidClient:
    """Dependency for injecting the Plaid client (overridable in tests)."""
    return PlaidClient()


@router.post("/create-link-token", response_model=LinkTokenResponse)
def create_link_token(
    body: LinkTokenRequest | None = None,
    client: PlaidClient = Depends(_get_plaid_client),
):
    """Create a Plaid Link token for the frontend, optionally registering a webhook."""
    if not client.is_configured():
        raise HTTPException(status_code=400, detail="Plaid is not configured")

    webhook = body.webhook if body else None
    try:
        link_token = client.create_link_token(webhook_url=webhook)
        return LinkTokenResponse(link_token=link_token)
    except ProviderError as e:
        if "INVALID_API_KEYS" in str(e):
            logger.error("Plaid INVALID_API_KEYS: %s", _INVALID_KEYS_HINT)
            raise HTTPException(status_code=400, detail=_INVALID_KEYS_HINT)
        logger.error("Failed to create Plaid link token: %s", e)
        raise HTTPException(status_code=500, detail="Failed to create link token")


@router.post("/exchange-token", response_model=ExchangeTokenResponse)
def exchange_token(
    body: ExchangeTokenRequest,
    db: Session = Depends(get_db),
    client: PlaidClient = Depends(_get_plaid_client),
):
    """Exchange a public_token and create or refresh a local row per account."""
    if not body.public_token:
        raise HTTPException(status_code=400, detail="Missing public_token")
    if not client.is_configured():
        raise HTTPException(status_code=400, detail="Plaid is not configured")

    try:
        result = client.exchange_public_token(body.public_token)
    except ProviderError as e:
        logger.error("Failed to exchange Plaid token: %s", e)
        raise HTTPException(status_code=500, detail="Failed to exchange token")

    item_id = result["item_id"]
    access_token = result["access_token"]

    institution_name = None
    if body.institution_id:
        try:
            institution_name = client.get_institution(body.institution_id)["name"]
        except ProviderError as e:
            logger.warning("Could not look up institution %s: %s", body.institution_id, e)

    try:
        provider_accounts = client.get_account_balances(access_token)
    except ProviderError as e:
        logger.error("Failed to fetch accounts for item %s: %s", item_id, e)
        raise HTTPException(status_code=500, detail="Failed to fetch accounts")

    accounts = AccountService.link_item(
        db,
        item_id=item_id,
        access_token=access_token,
        institution_id=body.institution_id,
        institution_name=institution_name,
        provider_accounts=provider_accounts,
    )
    db.commit()
    logger.info(
        "Linked item %s (%s) with %d account(s)",
        item_id, institution_name or body.institution_id, len(accounts),
    )

    return ExchangeTokenResponse(
        item_id=item_id,
        accounts_created=len(accounts),
        accounts=[a.id for a in accounts],
    )
