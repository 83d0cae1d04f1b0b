from app.core.config import Settings
from app.services.completion_client import CompletionClient, OpenAICompletionClient
from app.services.document_store import DocumentStore


def build_document_store(settings: Settings) -> DocumentStore:
    """
    Creates the store selected by STORE_BACKEND.
    Call this once on app startup.
    """
    if settings.STORE_BACKEND == "firestore":
        from app.core.firebase import init_firebase
        from app.services.firestore_store import FirestoreStore

        return FirestoreStore(init_firebase(settings.FIREBASE_CREDENTIALS))

    if settings.STORE_BACKEND == "memory":
        from app.services.memory_store import MemoryStore

        return MemoryStore()

    from app.services.notion_store import NotionStore

    return NotionStore(
        api_key=settings.NOTION_API_KEY,
        notion_version=settings.NOTION_VERSION,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def build_completion_client(settings: Settings) -> CompletionClient:
    return OpenAICompletionClient(
        api_url=settings.API_URL,
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
