"""Seed a Firestore inventory collection with a few in-stock items."""
from app.core.config import get_settings
from app.core.firebase import init_firebase
from app.models.inventory import CATEGORY, ID, IN_STOCK, ITEM, NOTE
from app.services import document_store as ds
from app.services.document_store import CheckboxFilter
from app.services.firestore_store import FirestoreStore

items = [
    {"title": "chicken", "category": "Limited shelf life", "note": "open"},
    {"title": "salad bag", "category": "Limited shelf life", "note": ""},
    {"title": "milk", "category": "Fridge", "note": ""},
    {"title": "peas", "category": "Freezer", "note": ""},
    {"title": "rice", "category": "Pantry", "note": ""},
    {"title": "pasta", "category": "Pantry", "note": ""},
]


def seed():
    settings = get_settings()
    store = FirestoreStore(init_firebase(settings.FIREBASE_CREDENTIALS))
    collection = settings.NOTION_DATABASE_INVENTORY_ID or "inventory"

    existing = {r.text(ITEM) for r in store.query(collection, filter=CheckboxFilter(IN_STOCK, True))}
    for number, it in enumerate(items, start=1):
        # Check if exists to avoid dupes
        if it["title"] in existing:
            print(f"Skipped {it['title']} (Exists)")
            continue
        store.create_record(collection, {
            ITEM: ds.title(it["title"]),
            CATEGORY: ds.select(it["category"]),
            NOTE: ds.rich_text(it["note"]),
            ID: ds.unique_id("I-", number),
            IN_STOCK: ds.checkbox(True),
        })
        print(f"Added {it['title']}")


if __name__ == "__main__":
    seed()
