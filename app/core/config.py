# app/core/config.py
from __future__ import annotations

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


StoreBackend = Literal["notion", "firestore", "memory"]
Scope = Literal["generate", "cook"]


class Settings(BaseSettings):
    # Notion (document store)
    NOTION_API_KEY: str = ""
    NOTION_VERSION: str = "2022-06-28"
    NOTION_DATABASE_INVENTORY_ID: str = ""
    NOTION_DATABASE_AIDATA_ID: str = ""

    # Which document store backs the two databases
    STORE_BACKEND: StoreBackend = "notion"
    FIREBASE_CREDENTIALS: str = "app/core/firebase_key.json"

    # Completion backend (OpenAI compatible chat completions)
    API_URL: str = "https://api.openai.com/v1/chat/completions"
    MODEL: str = "gpt-4o-mini"
    OPENAI_API_KEY: str = ""
    LLM_TEMPERATURE: float = 0.4
    LLM_MAX_TOKENS: int = 900
    HTTP_TIMEOUT_SECONDS: float = 60

    PROMPT_TEMPLATE: str = ""

    # Calendar used for "Last used"
    TIMEZONE: str = "UTC"

    AI_DEBUG_MODE: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def required_fields(self, scope: Scope = "generate") -> List[str]:
        fields = ["NOTION_DATABASE_INVENTORY_ID", "NOTION_DATABASE_AIDATA_ID"]
        if self.STORE_BACKEND == "notion":
            fields.append("NOTION_API_KEY")
        elif self.STORE_BACKEND == "firestore":
            fields.append("FIREBASE_CREDENTIALS")

        # Cooking a meal never talks to the completion backend
        if scope == "generate":
            fields += ["API_URL", "MODEL", "OPENAI_API_KEY", "PROMPT_TEMPLATE"]
        return fields

    def missing_required(self, scope: Scope = "generate") -> List[str]:
        """Names of required settings that are empty for the selected backend."""
        return [name for name in self.required_fields(scope) if not getattr(self, name)]


def get_settings() -> Settings:
    return Settings()
