import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from app.services.document_store import (
    CheckboxFilter,
    CreatedTimeSort,
    DocumentStore,
    Fields,
    Record,
)


class MemoryStore(DocumentStore):
    """
    Process-local document store for local development and tests.

    Creation times are strictly increasing even when records are written in the
    same microsecond, so "latest" is always well defined.
    """

    def __init__(self):
        self._databases: Dict[str, List[Record]] = {}
        self._index: Dict[str, Tuple[str, int]] = {}
        self._seq = itertools.count()
        self._epoch = datetime.now(timezone.utc)

    def _next_created_time(self) -> datetime:
        return self._epoch + timedelta(microseconds=next(self._seq))

    def records(self, database_id: str) -> List[Record]:
        return list(self._databases.get(database_id, []))

    def get(self, record_id: str) -> Record:
        database_id, pos = self._index[record_id]
        return self._databases[database_id][pos]

    def query(
        self,
        database_id: str,
        filter: Optional[CheckboxFilter] = None,
        sort: Optional[CreatedTimeSort] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        out = self.records(database_id)
        if filter is not None:
            out = [r for r in out if r.checkbox(filter.name) is filter.equals]
        if sort is not None:
            out.sort(key=lambda r: r.created_time, reverse=sort.descending)
        return out if limit is None else out[:limit]

    def create_record(self, database_id: str, fields: Fields) -> Record:
        record = Record(
            id=str(uuid.uuid4()),
            fields={name: v.value for name, v in fields.items()},
            created_time=self._next_created_time(),
        )
        rows = self._databases.setdefault(database_id, [])
        self._index[record.id] = (database_id, len(rows))
        rows.append(record)
        return record

    def update_record(self, record_id: str, fields: Fields) -> None:
        record = self.get(record_id)
        record.fields.update({name: v.value for name, v in fields.items()})
