from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.deps import get_meal_consumer, get_plan_generator
from app.core.errors import DinnerPlannerError, NoItemsInStock
from app.models.schemas import CookMealResponse, ErrorResponse, GenerateDinnerResponse
from app.services.dinner_pipeline import MealConsumer, PlanGenerator

router = APIRouter(tags=["dinner"])

OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/generate-dinner",
    response_model=GenerateDinnerResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_dinner(generator: PlanGenerator = Depends(get_plan_generator)):
    try:
        result = generator.generate()
    except NoItemsInStock as e:
        return _error(400, e.message, NoItemsInStock.hint)
    except DinnerPlannerError as e:
        # The ERROR run has already been written (best effort)
        return _error(500, e.message)

    return GenerateDinnerResponse(
        dateLine=result.date_line,
        meals=result.meals,
        encouragement=result.encouragement,
    )


@router.post(
    "/cook-meal",
    response_model=CookMealResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def cook_meal(
    meal_id: Optional[str] = Query(None, description="M1, M2 or M3"),
    consumer: MealConsumer = Depends(get_meal_consumer),
):
    try:
        result = consumer.cook(meal_id)
    except DinnerPlannerError as e:
        # validation errors are 400, store faults 500
        return _error(e.status_code, e.message)

    return CookMealResponse(
        message=result.message,
        meal=result.meal_title,
        used=result.requested,
        updated=result.updated,
    )


@router.api_route("/generate-dinner", methods=OTHER_METHODS, include_in_schema=False)
@router.api_route("/cook-meal", methods=OTHER_METHODS, include_in_schema=False)
def post_only():
    return _error(405, "POST only")
