from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services import document_store as ds
from app.services.document_store import Record


RunStatus = Literal["OK", "ERROR"]
MealId = Literal["M1", "M2", "M3"]

MEAL_IDS = ("M1", "M2", "M3")

# Property names in the run log database
RUN = "Run"
STATUS = "Status"
DATE_LINE = "Date line"
MEAL_1 = "Meal 1"
MEAL_2 = "Meal 2"
MEAL_3 = "Meal 3"
ENCOURAGEMENT = "Encouragement"
RAW_JSON = "Raw JSON"


class Meal(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    title: Optional[str] = ""
    items: List[str] = Field(default_factory=list)

    @field_validator("id", "title", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [str(i) for i in v]
        return v


class ParsedMealPlan(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Entries stay raw: one malformed sibling must not hide a good meal
    meals: List[Any]

    def meal_ids(self) -> List[str]:
        return [str(m.get("id")) for m in self.meals if isinstance(m, dict)]

    def find(self, meal_id: str) -> Optional[dict]:
        for entry in self.meals:
            if isinstance(entry, dict) and entry.get("id") == meal_id:
                return entry
        return None


class Run(BaseModel):
    """One immutable outcome of a dinner plan generation."""

    title: str
    status: RunStatus
    date_line: str = ""
    meal1: str = ""
    meal2: str = ""
    meal3: str = ""
    encouragement: str = ""
    raw_json: str = ""
    created_time: Optional[datetime] = None

    def to_fields(self) -> ds.Fields:
        fields = {
            RUN: ds.title(self.title),
            STATUS: ds.select(self.status),
            ENCOURAGEMENT: ds.rich_text(self.encouragement),
        }
        # ERROR runs only carry the title, status and the wrapped message
        if self.status == "OK":
            fields.update(
                {
                    DATE_LINE: ds.rich_text(self.date_line),
                    MEAL_1: ds.rich_text(self.meal1),
                    MEAL_2: ds.rich_text(self.meal2),
                    MEAL_3: ds.rich_text(self.meal3),
                    RAW_JSON: ds.rich_text(self.raw_json),
                }
            )
        return fields

    @classmethod
    def from_record(cls, record: Record) -> "Run":
        return cls(
            title=record.text(RUN) or "",
            status="OK" if record.select(STATUS) == "OK" else "ERROR",
            date_line=record.text(DATE_LINE) or "",
            meal1=record.text(MEAL_1) or "",
            meal2=record.text(MEAL_2) or "",
            meal3=record.text(MEAL_3) or "",
            encouragement=record.text(ENCOURAGEMENT) or "",
            raw_json=record.text(RAW_JSON) or "",
            created_time=record.created_time,
        )
