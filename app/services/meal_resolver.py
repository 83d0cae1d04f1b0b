import json
from dataclasses import dataclass
from typing import List

from pydantic import ValidationError

from app.core.errors import InvalidJson, InvalidMealId, MealNotFound, NoItemsForMeal, NoRunFound
from app.models.meal_plan import MEAL_IDS, Meal, ParsedMealPlan, Run
from app.services.document_store import CreatedTimeSort, DocumentStore


@dataclass
class ResolvedMeal:
    meal_id: str
    title: str
    items: List[str]


def validate_meal_id(meal_id) -> str:
    if meal_id not in MEAL_IDS:
        raise InvalidMealId()
    return meal_id


def load_latest_raw_json(store: DocumentStore, database_id: str) -> str:
    """rawJson of the most recently created run, "{}" when the run has none."""
    records = store.query(database_id, sort=CreatedTimeSort(descending=True), limit=1)
    if not records:
        raise NoRunFound()
    return Run.from_record(records[0]).raw_json or "{}"


def resolve_meal(meal_id: str, raw_json: str) -> ResolvedMeal:
    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise InvalidJson("AI JSON invalid") from e

    try:
        plan = ParsedMealPlan.model_validate(data)
    except ValidationError as e:
        raise MealNotFound() from e

    entry = plan.find(meal_id)
    if entry is None:
        raise MealNotFound()
    items = entry.get("items")
    if not isinstance(items, list) or not items:
        raise NoItemsForMeal()

    meal = Meal.model_validate(entry)

    return ResolvedMeal(meal_id=meal_id, title=meal.title or "", items=list(meal.items))
