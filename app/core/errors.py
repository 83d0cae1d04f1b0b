"""
Error kinds raised by the dinner planning pipelines.

Every error carries a human readable message and the HTTP status the route
layer maps it to. Routes decide the final status; the pipelines only raise.
"""
from typing import List, Optional


class DinnerPlannerError(Exception):
    status_code = 500
    default_message = "Unexpected failure"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigError(DinnerPlannerError):
    default_message = "Missing configuration"

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing configuration: {', '.join(self.missing)}")


class PreconditionFailed(DinnerPlannerError):
    status_code = 400


class NoItemsInStock(PreconditionFailed):
    default_message = "No items in stock"
    hint = "Add items to INVENTORY and set In stock = true."


class NoRunFound(PreconditionFailed):
    default_message = "No run found. Generate a dinner plan first."


class MissingJsonBlock(DinnerPlannerError):
    default_message = "AI output missing JSON block at the end."


class InvalidJson(DinnerPlannerError):
    status_code = 400
    default_message = "Invalid JSON: AI output could not be parsed."


class InvalidShape(DinnerPlannerError):
    default_message = "AI output JSON missing meals array."


class MealNotFound(DinnerPlannerError):
    status_code = 400
    default_message = "Meal not found in latest run."


class NoItemsForMeal(DinnerPlannerError):
    status_code = 400
    default_message = "No items for this meal."


class InvalidMealId(DinnerPlannerError):
    status_code = 400
    default_message = "meal_id must be one of M1, M2, M3."


class UnexpectedFailure(DinnerPlannerError):
    pass
