"""
The two request pipelines.

PlanGenerator: in-stock inventory -> prompt -> completion -> parse -> run log.
MealConsumer: latest run -> meal items -> inventory marked as used.

They share nothing but the store; the run log is the only source of
"latest run".
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from app.core.config import Settings
from app.core.errors import ConfigError, DinnerPlannerError, NoItemsInStock, UnexpectedFailure
from app.services.completion_client import CompletionClient, extract_content
from app.services.document_store import DocumentStore
from app.services.inventory_formatter import format_inventory
from app.services.inventory_updater import load_in_stock, mark_consumed
from app.services.logger import log_debug
from app.services.meal_resolver import load_latest_raw_json, resolve_meal, validate_meal_id
from app.services.prompt_builder import build_messages, build_prompt
from app.services.response_parser import ParsedResponse, parse_response
from app.services.run_persister import RunPersister
from app.services.time_utils import get_today_date, utc_now

log = logging.getLogger("dinner." + __name__)


def _require(settings: Settings, scope: str):
    missing = settings.missing_required(scope)
    if missing:
        raise ConfigError(missing)


class PlanGenerator:
    def __init__(
        self,
        settings: Settings,
        store: DocumentStore,
        completion: CompletionClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        _require(settings, "generate")
        self._settings = settings
        self._store = store
        self._completion = completion
        self._persister = RunPersister(store, settings.NOTION_DATABASE_AIDATA_ID, clock)

    def _complete(self, prompt: str) -> str:
        resp = self._completion.complete(
            model=self._settings.MODEL,
            messages=build_messages(prompt),
            temperature=self._settings.LLM_TEMPERATURE,
            max_tokens=self._settings.LLM_MAX_TOKENS,
        )
        return extract_content(resp)

    def _run(self) -> ParsedResponse:
        items = load_in_stock(self._store, self._settings.NOTION_DATABASE_INVENTORY_ID)
        if not items:
            raise NoItemsInStock()
        log.info("Planning dinner from %d in-stock items", len(items))

        inventory_text = format_inventory(items)
        prompt = build_prompt(self._settings.PROMPT_TEMPLATE, inventory_text)
        log_debug("prompt_built", {"chars": len(prompt), "inventory": inventory_text})

        ai_text = self._complete(prompt)
        log_debug("completion_received", {"chars": len(ai_text)})

        result = parse_response(ai_text)
        self._persister.record_success(result)
        return result

    def generate(self) -> ParsedResponse:
        """
        Run the whole chain once. Empty inventory is raised as is and leaves
        no trace; every other failure leaves an ERROR run behind and is
        re-raised as a DinnerPlannerError.
        """
        try:
            return self._run()
        except NoItemsInStock:
            raise
        except DinnerPlannerError as e:
            log.warning("Dinner plan failed: %s", e.message)
            self._persister.record_failure(e)
            raise
        except Exception as e:
            log.exception("Dinner plan failed unexpectedly")
            failure = UnexpectedFailure(str(e) or e.__class__.__name__)
            self._persister.record_failure(failure)
            raise failure from e


@dataclass
class CookResult:
    meal_id: str
    meal_title: str
    requested: List[str]
    updated: int

    @property
    def message(self) -> str:
        return f"Marked {self.updated} of {len(self.requested)} item(s) as used for {self.meal_title or self.meal_id}."


class MealConsumer:
    def __init__(
        self,
        settings: Settings,
        store: DocumentStore,
        today: Optional[Callable[[], date]] = None,
    ):
        _require(settings, "cook")
        self._settings = settings
        self._store = store
        self._today = today or (lambda: get_today_date(settings.TIMEZONE))

    def cook(self, meal_id: str) -> CookResult:
        # Validated before the store is touched
        meal_id = validate_meal_id(meal_id)

        try:
            raw_json = load_latest_raw_json(self._store, self._settings.NOTION_DATABASE_AIDATA_ID)
            meal = resolve_meal(meal_id, raw_json)

            in_stock = load_in_stock(self._store, self._settings.NOTION_DATABASE_INVENTORY_ID)
            updated = mark_consumed(self._store, in_stock, meal.items, self._today())
        except DinnerPlannerError:
            raise
        except Exception as e:
            log.exception("Cooking %s failed unexpectedly", meal_id)
            raise UnexpectedFailure(str(e) or e.__class__.__name__) from e

        if updated < len(meal.items):
            log.info("%s: %d of %d items were in stock", meal_id, updated, len(meal.items))

        return CookResult(meal_id=meal_id, meal_title=meal.title, requested=meal.items, updated=updated)
