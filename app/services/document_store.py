"""
Generic document store interface used by both pipelines.

Records coming back from a backend are exposed through `Record`, a typed
projection with named accessors. Writes go through `FieldValue` so every
backend knows the kind of each property it has to encode.
"""
from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional


FieldKind = Literal["title", "rich_text", "select", "checkbox", "date", "unique_id"]


@dataclass(frozen=True)
class UniqueId:
    prefix: str
    number: int

    def __str__(self) -> str:
        return f"{self.prefix}{self.number}"


@dataclass(frozen=True)
class FieldValue:
    kind: FieldKind
    value: Any

    def plain(self) -> Any:
        """Backend neutral value (dates as ISO strings)."""
        if isinstance(self.value, (date, datetime)):
            return self.value.isoformat()
        return self.value


def title(text: str) -> FieldValue:
    return FieldValue("title", text)


def rich_text(text: str) -> FieldValue:
    return FieldValue("rich_text", text)


def select(name: str) -> FieldValue:
    return FieldValue("select", name)


def checkbox(checked: bool) -> FieldValue:
    return FieldValue("checkbox", bool(checked))


def date_value(day: date) -> FieldValue:
    return FieldValue("date", day)


def unique_id(prefix: str, number: int) -> FieldValue:
    return FieldValue("unique_id", UniqueId(prefix, number))


Fields = Dict[str, FieldValue]


@dataclass
class Record:
    id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    created_time: Optional[datetime] = None

    def text(self, name: str) -> Optional[str]:
        value = self.fields.get(name)
        return value if isinstance(value, str) else None

    def select(self, name: str) -> Optional[str]:
        return self.text(name)

    def checkbox(self, name: str) -> Optional[bool]:
        value = self.fields.get(name)
        return value if isinstance(value, bool) else None

    def date(self, name: str) -> Optional[date]:
        value = self.fields.get(name)
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value:
            try:
                return date.fromisoformat(value[:10])
            except ValueError:
                return None
        return None

    def unique_id(self, name: str) -> Optional[UniqueId]:
        value = self.fields.get(name)
        if isinstance(value, UniqueId):
            return value
        if isinstance(value, dict):
            prefix, number = value.get("prefix"), value.get("number")
            # both parts are required to form an external id like I-7
            if prefix and number:
                return UniqueId(str(prefix), int(number))
        return None


@dataclass(frozen=True)
class CheckboxFilter:
    name: str
    equals: bool = True


@dataclass(frozen=True)
class CreatedTimeSort:
    descending: bool = True


class DocumentStore(metaclass=ABCMeta):
    @abstractmethod
    def query(
        self,
        database_id: str,
        filter: Optional[CheckboxFilter] = None,
        sort: Optional[CreatedTimeSort] = None,
        limit: Optional[int] = None,
    ) -> List[Record]: ...

    @abstractmethod
    def create_record(self, database_id: str, fields: Fields) -> Record: ...

    @abstractmethod
    def update_record(self, record_id: str, fields: Fields) -> None: ...
