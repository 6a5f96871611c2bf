"""Investment transactions and holdings API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import investment_transaction_response_dict
from database import get_db
from schemas import HoldingListResponse, HoldingResponse, InvestmentTransactionListResponse
from services.investment_service import InvestmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["investments"])


@router.get("/investment-transactions", response_model=InvestmentTransactionListResponse)
def list_investment_transactions(
    limit: int = Query(1000, ge=1, le=10000),
    db: Session = Depends(get_db),
):
    """List investment transactions newest first."""
    rows = InvestmentService.list_investment_transactions(db, limit=limit)
    transactions = [investment_transaction_response_dict(txn) for txn in rows]
    return InvestmentTransactionListResponse(transactions=transactions, count=len(transactions))


@router.get("/holdings", response_model=HoldingListResponse)
def list_holdings(db: Session = Depends(get_db)):
    """Positions derived from investment transactions, valued at last close."""
    holdings = InvestmentService.calculate_holdings(db)
    return HoldingListResponse(
        holdings=[HoldingResponse.model_validate(h) for h in holdings],
        count=len(holdings),
    )
