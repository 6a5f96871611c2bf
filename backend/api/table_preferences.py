"""Table preferences API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from models.table_preference import CONTEXT_TYPES
from schemas import TablePreferenceEnvelope, TablePreferenceSet
from services.table_preference_service import TablePreferenceService, preference_to_dict

router = APIRouter(prefix="/api/table-preferences", tags=["table-preferences"])


def _validate_context_type(context_type: str) -> None:
    """Raise 400 for an unknown table context."""
    if context_type not in CONTEXT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"contextType must be one of: {', '.join(CONTEXT_TYPES)}",
        )


@router.get("", response_model=TablePreferenceEnvelope)
def get_table_preferences(
    context_type: str = Query(..., alias="contextType"),
    context_id: Optional[str] = Query(None, alias="contextId"),
    db: Session = Depends(get_db),
):
    """Get the saved layout for a table context (``preferences`` is null if none)."""
    _validate_context_type(context_type)
    pref = TablePreferenceService.get(db, context_type, context_id or None)
    return TablePreferenceEnvelope(preferences=preference_to_dict(pref) if pref else None)


@router.post("", response_model=TablePreferenceEnvelope)
def save_table_preferences(body: TablePreferenceSet, db: Session = Depends(get_db)):
    """Create or replace the saved layout for a table context."""
    pref = TablePreferenceService.upsert(
        db,
        body.context_type,
        body.context_id or None,
        column_visibility=body.column_visibility,
        column_order=body.column_order,
        column_sizing=body.column_sizing,
        sorting=body.sorting,
    )
    return TablePreferenceEnvelope(preferences=preference_to_dict(pref))


@router.delete("")
def delete_table_preferences(
    context_type: str = Query(..., alias="contextType"),
    context_id: Optional[str] = Query(None, alias="contextId"),
    db: Session = Depends(get_db),
):
    """Delete the saved layout for a table context."""
    _validate_context_type(context_type)
    deleted = TablePreferenceService.delete(db, context_type, context_id or None)
    if not deleted:
        raise HTTPException(status_code=404, detail="Table preferences not found")
    db.commit()
    return {"success": True}
