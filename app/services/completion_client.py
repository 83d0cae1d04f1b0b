import logging
from abc import ABCMeta, abstractmethod
from typing import Any, Dict, List

import requests

log = logging.getLogger("dinner." + __name__)


class CompletionClient(metaclass=ABCMeta):
    @abstractmethod
    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Dict[str, Any]: ...


def extract_content(resp_json: Dict[str, Any]) -> str:
    # Chat Completions structure: choices[0].message.content
    choices = resp_json.get("choices") or []
    if choices and isinstance(choices, list):
        message = choices[0].get("message") or {}
        return message.get("content") or ""
    return ""


class OpenAICompletionClient(CompletionClient):
    def __init__(self, api_url: str, api_key: str, timeout: float = 60):
        self._api_url = api_url
        self._api_key = api_key
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Dict[str, Any]:
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        r = requests.post(self._api_url, headers=self._headers(), json=payload, timeout=self._timeout)
        if not r.ok:
            log.error("Completion backend returned %s: %s", r.status_code, r.text)
            r.raise_for_status()
        return r.json()
