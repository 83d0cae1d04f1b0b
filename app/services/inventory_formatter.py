from typing import Dict, Iterable, List

from app.models.inventory import CATEGORY_ORDER, InventoryItem


def format_entry(item: InventoryItem) -> str:
    if item.note:
        return f"[{item.id}] {item.title} ({item.note})"
    return f"[{item.id}] {item.title}"


def format_inventory(items: Iterable[InventoryItem]) -> str:
    """
    Render in-stock items as one line per category, always in the order
    Limited shelf life, Fridge, Freezer, Pantry.

    Within a category the input order is kept. Items with an unknown
    category are left out, as are items missing a title or id.
    """
    grouped: Dict[str, List[str]] = {cat: [] for cat in CATEGORY_ORDER}

    for item in items:
        if not item.title or not item.id:
            continue
        bucket = grouped.get(item.category)
        if bucket is not None:
            bucket.append(format_entry(item))

    return "\n".join(f"{cat}: {', '.join(grouped[cat])}" for cat in CATEGORY_ORDER)
