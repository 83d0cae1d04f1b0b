"""Pydantic model for stocked inventory items."""
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.services.document_store import Record


Category = Literal["Limited shelf life", "Fridge", "Freezer", "Pantry"]

# Display order of the formatted inventory block
CATEGORY_ORDER = ("Limited shelf life", "Fridge", "Freezer", "Pantry")

# Property names in the inventory database
ITEM = "Item"
CATEGORY = "Category"
NOTE = "Note"
ID = "ID"
IN_STOCK = "In stock"
LAST_USED = "Last used"


class InventoryItem(BaseModel):
    id: str = Field(..., min_length=1, description="External id, e.g. I-7")
    title: str = Field(..., min_length=1)
    # Kept as free text: an unknown category lands in no bucket
    category: str = "Pantry"
    note: Optional[str] = None
    in_stock: bool = True
    last_used: Optional[date] = None

    # Store handle used for updates
    record_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Record) -> Optional["InventoryItem"]:
        """Project a store record; items without a title or id are skipped."""
        title = record.text(ITEM) or ""
        uid = record.unique_id(ID)
        if not title or uid is None:
            return None

        return cls(
            id=str(uid),
            title=title,
            category=record.select(CATEGORY) or "Pantry",
            note=record.text(NOTE) or None,
            in_stock=bool(record.checkbox(IN_STOCK)),
            last_used=record.date(LAST_USED),
            record_id=record.id,
        )
