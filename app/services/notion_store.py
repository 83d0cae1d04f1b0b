import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from app.services.document_store import (
    CheckboxFilter,
    CreatedTimeSort,
    DocumentStore,
    Fields,
    FieldValue,
    Record,
    UniqueId,
)

log = logging.getLogger("dinner." + __name__)

NOTION_API_URL = "https://api.notion.com/v1"
# Notion refuses page sizes above 100
MAX_PAGE_SIZE = 100


def _plain_text(segments: Optional[list]) -> str:
    return "".join(s.get("plain_text", "") for s in segments or [])


def decode_property(prop: Dict[str, Any]) -> Any:
    """Flatten one Notion property into a plain Python value."""
    kind = prop.get("type")

    if kind in ("title", "rich_text"):
        return _plain_text(prop.get(kind))
    if kind == "select":
        sel = prop.get("select") or {}
        return sel.get("name")
    if kind == "checkbox":
        return bool(prop.get("checkbox"))
    if kind == "date":
        d = prop.get("date") or {}
        return d.get("start")
    if kind == "unique_id":
        uid = prop.get("unique_id") or {}
        if uid.get("prefix") and uid.get("number"):
            return UniqueId(uid["prefix"], int(uid["number"]))
        return None
    return None


def encode_property(value: FieldValue) -> Dict[str, Any]:
    if value.kind in ("title", "rich_text"):
        return {value.kind: [{"text": {"content": value.value}}]}
    if value.kind == "select":
        return {"select": {"name": value.value}}
    if value.kind == "checkbox":
        return {"checkbox": value.value}
    if value.kind == "date":
        return {"date": {"start": value.plain()}}
    raise ValueError(f"Notion property kind '{value.kind}' is read-only")


def _parse_created_time(ts: Optional[str]) -> Optional[datetime]:
    if not ts:
        return None
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


def page_to_record(page: Dict[str, Any]) -> Record:
    props = page.get("properties") or {}
    return Record(
        id=page["id"],
        fields={name: decode_property(p) for name, p in props.items()},
        created_time=_parse_created_time(page.get("created_time")),
    )


class NotionStore(DocumentStore):
    def __init__(self, api_key: str, notion_version: str = "2022-06-28", timeout: float = 60):
        self._api_key = api_key
        self._notion_version = notion_version
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Notion-Version": self._notion_version,
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        r = requests.request(
            method,
            f"{NOTION_API_URL}{path}",
            headers=self._headers(),
            json=payload,
            timeout=self._timeout,
        )
        if not r.ok:
            log.error("Notion %s %s failed: %s %s", method, path, r.status_code, r.text)
            r.raise_for_status()
        return r.json()

    def query(
        self,
        database_id: str,
        filter: Optional[CheckboxFilter] = None,
        sort: Optional[CreatedTimeSort] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        body: Dict[str, Any] = {}
        if filter is not None:
            body["filter"] = {"property": filter.name, "checkbox": {"equals": filter.equals}}
        if sort is not None:
            direction = "descending" if sort.descending else "ascending"
            body["sorts"] = [{"timestamp": "created_time", "direction": direction}]

        out: List[Record] = []
        cursor = None
        while True:
            remaining = MAX_PAGE_SIZE if limit is None else limit - len(out)
            payload = dict(body, page_size=min(MAX_PAGE_SIZE, remaining))
            if cursor:
                payload["start_cursor"] = cursor

            data = self._request("POST", f"/databases/{database_id}/query", payload)
            out.extend(page_to_record(p) for p in data.get("results", []))

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
            if limit is not None and len(out) >= limit:
                break

        return out if limit is None else out[:limit]

    def create_record(self, database_id: str, fields: Fields) -> Record:
        page = self._request(
            "POST",
            "/pages",
            {
                "parent": {"database_id": database_id},
                "properties": {name: encode_property(v) for name, v in fields.items()},
            },
        )
        return page_to_record(page)

    def update_record(self, record_id: str, fields: Fields) -> None:
        self._request(
            "PATCH",
            f"/pages/{record_id}",
            {"properties": {name: encode_property(v) for name, v in fields.items()}},
        )
