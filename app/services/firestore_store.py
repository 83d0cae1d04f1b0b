from __future__ import annotations

from typing import Any, Dict, List, Optional

from firebase_admin import firestore

from app.services.document_store import (
    CheckboxFilter,
    CreatedTimeSort,
    DocumentStore,
    Fields,
    FieldValue,
    Record,
    UniqueId,
)

CREATED_FIELD = "_created_time"


# -------------------------
# Helpers
# -------------------------
def _quote(name: str) -> str:
    # property names like "In stock" are not simple Firestore field names
    return f"`{name}`"


def _to_firestore(value: FieldValue) -> Any:
    if isinstance(value.value, UniqueId):
        return {"prefix": value.value.prefix, "number": value.value.number}
    return value.plain()


def _from_snapshot(doc) -> Record:
    data = doc.to_dict() or {}
    created = data.pop(CREATED_FIELD, None)
    return Record(id=doc.reference.path, fields=data, created_time=created)


# -------------------------
# Store
# -------------------------
class FirestoreStore(DocumentStore):
    """One Firestore collection per database id; record ids are document paths."""

    def __init__(self, db):
        self._db = db

    def query(
        self,
        database_id: str,
        filter: Optional[CheckboxFilter] = None,
        sort: Optional[CreatedTimeSort] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        q = self._db.collection(database_id)
        if filter is not None:
            q = q.where(_quote(filter.name), "==", filter.equals)
        if sort is not None:
            direction = firestore.Query.DESCENDING if sort.descending else firestore.Query.ASCENDING
            q = q.order_by(CREATED_FIELD, direction=direction)
        if limit is not None:
            q = q.limit(limit)

        return [_from_snapshot(d) for d in q.stream()]

    def create_record(self, database_id: str, fields: Fields) -> Record:
        payload: Dict[str, Any] = {name: _to_firestore(v) for name, v in fields.items()}
        payload[CREATED_FIELD] = firestore.SERVER_TIMESTAMP

        ref = self._db.collection(database_id).document()
        ref.set(payload)
        return Record(id=ref.path, fields={k: v for k, v in payload.items() if k != CREATED_FIELD})

    def update_record(self, record_id: str, fields: Fields) -> None:
        self._db.document(record_id).update(
            {_quote(name): _to_firestore(v) for name, v in fields.items()}
        )
