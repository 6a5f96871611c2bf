"""Table preference service - saved column layouts per table context."""

import json
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from integrations.parsing_utils import load_json_list, load_json_object
from models.table_preference import TablePreference

logger = logging.getLogger(__name__)


def preference_to_dict(pref: TablePreference) -> dict[str, Any]:
    """Decode a stored preference; malformed JSON falls back to an empty value."""
    return {
        "id": pref.id,
        "context_type": pref.context_type,
        "context_id": pref.context_id,
        "column_visibility": load_json_object(pref.column_visibility) or {},
        "column_order": load_json_list(pref.column_order) or [],
        "column_sizing": load_json_object(pref.column_sizing) or {},
        "sorting": load_json_list(pref.sorting) or [],
        "created_at": pref.created_at,
        "updated_at": pref.updated_at,
    }


class TablePreferenceService:
    """Service for per-table display preferences keyed by (context_type, context_id)."""

    @staticmethod
    def get(db: Session, context_type: str, context_id: str | None) -> TablePreference | None:
        """Get the preference for a context, or None if not saved."""
        query = db.query(TablePreference).filter(TablePreference.context_type == context_type)
        if context_id is None:
            query = query.filter(TablePreference.context_id.is_(None))
        else:
            query = query.filter(TablePreference.context_id == context_id)
        return query.first()

    @staticmethod
    def upsert(
        db: Session,
        context_type: str,
        context_id: str | None,
        *,
        column_visibility: dict,
        column_order: list,
        column_sizing: dict,
        sorting: list,
    ) -> TablePreference:
        """Create or replace the preference for a context. Commits."""
        values = {
            "column_visibility": json.dumps(column_visibility),
            "column_order": json.dumps(column_order),
            "column_sizing": json.dumps(column_sizing),
            "sorting": json.dumps(sorting),
        }
        pref = TablePreferenceService.get(db, context_type, context_id)

        if pref is None:
            pref = TablePreference(context_type=context_type, context_id=context_id, **values)
            db.add(pref)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                pref = TablePreferenceService.get(db, context_type, context_id)
                for key, value in values.items():
                    setattr(pref, key, value)
                db.commit()
                logger.info("Updated table preference (concurrent insert): %s/%s", context_type, context_id)
            else:
                logger.info("Created table preference: %s/%s", context_type, context_id)
        else:
            for key, value in values.items():
                setattr(pref, key, value)
            db.commit()
            logger.info("Updated table preference: %s/%s", context_type, context_id)

        db.refresh(pref)
        return pref

    @staticmethod
    def delete(db: Session, context_type: str, context_id: str | None) -> bool:
        """Delete a context's preference. Returns False if none was saved."""
        pref = TablePreferenceService.get(db, context_type, context_id)
        if pref is None:
            return False
        db.delete(pref)
        db.flush()
        logger.info("Deleted table preference: %s/%s", context_type, context_id)
        return True
