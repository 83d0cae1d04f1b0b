import logging
from datetime import date
from typing import Iterable, List

from app.models.inventory import IN_STOCK, LAST_USED, InventoryItem
from app.services import document_store as ds
from app.services.document_store import CheckboxFilter, DocumentStore

log = logging.getLogger("dinner." + __name__)


def load_in_stock(store: DocumentStore, database_id: str) -> List[InventoryItem]:
    records = store.query(database_id, filter=CheckboxFilter(IN_STOCK, True))
    items = [InventoryItem.from_record(r) for r in records]
    return [i for i in items if i is not None]


def mark_consumed(
    store: DocumentStore,
    in_stock: Iterable[InventoryItem],
    item_ids: Iterable[str],
    today: date,
) -> int:
    """
    Flip every in-stock item listed in item_ids to out of stock. Ids without a
    matching in-stock item are skipped. Updates are independent: a failure
    midway leaves the earlier ones applied.
    """
    wanted = set(item_ids)
    updated = 0
    for item in in_stock:
        if item.id not in wanted or not item.record_id:
            continue
        store.update_record(
            item.record_id,
            {IN_STOCK: ds.checkbox(False), LAST_USED: ds.date_value(today)},
        )
        updated += 1
        log.info("Marked %s (%s) as used", item.id, item.title)
    return updated
