"""Tests for TablePreferenceService."""

from models.table_preference import TablePreference
from services.table_preference_service import TablePreferenceService, preference_to_dict

LAYOUT = {
    "column_visibility": {"notes": False},
    "column_order": ["date", "merchant_name", "amount"],
    "column_sizing": {"merchant_name": 240},
    "sorting": [{"id": "date", "desc": True}],
}


class TestTablePreferenceService:
    def test_upsert_creates_then_replaces(self, db):
        created = TablePreferenceService.upsert(db, "account", "acc-1", **LAYOUT)

        replaced = TablePreferenceService.upsert(
            db,
            "account",
            "acc-1",
            column_visibility={},
            column_order=["amount"],
            column_sizing={},
            sorting=[],
        )

        assert replaced.id == created.id
        assert preference_to_dict(replaced)["column_order"] == ["amount"]
        assert db.query(TablePreference).count() == 1

    def test_null_context_id_is_its_own_context(self, db):
        TablePreferenceService.upsert(db, "all", None, **LAYOUT)
        TablePreferenceService.upsert(db, "all", "x", **LAYOUT)

        assert TablePreferenceService.get(db, "all", None).context_id is None
        assert TablePreferenceService.get(db, "all", "x").context_id == "x"
        assert TablePreferenceService.get(db, "merchants", None) is None

    def test_round_trips_layout(self, db):
        pref = TablePreferenceService.upsert(db, "merchants", None, **LAYOUT)

        data = preference_to_dict(pref)

        assert {key: data[key] for key in LAYOUT} == LAYOUT

    def test_malformed_json_falls_back_to_empty(self, db):
        pref = TablePreference(
            context_type="category",
            context_id="cat-1",
            column_visibility="not json",
            column_order='{"a": 1}',
            column_sizing="[]",
            sorting="",
        )
        db.add(pref)
        db.flush()

        data = preference_to_dict(pref)

        assert data["column_visibility"] == {}
        assert data["column_order"] == []
        assert data["column_sizing"] == {}
        assert data["sorting"] == []

    def test_delete(self, db):
        TablePreferenceService.upsert(db, "account", "acc-1", **LAYOUT)

        assert TablePreferenceService.delete(db, "account", "acc-1") is True
        assert TablePreferenceService.delete(db, "account", "acc-1") is False
