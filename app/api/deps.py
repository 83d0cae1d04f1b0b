"""
API dependencies.

Pipelines are built per request from the collaborators stored on
`app.state` at startup, so tests can inject their own store and
completion client.
"""

from fastapi import Request

from app.services.dinner_pipeline import MealConsumer, PlanGenerator


def get_plan_generator(request: Request) -> PlanGenerator:
    state = request.app.state
    return PlanGenerator(
        settings=state.settings,
        store=state.document_store,
        completion=state.completion_client,
        clock=state.clock,
    )


def get_meal_consumer(request: Request) -> MealConsumer:
    state = request.app.state
    return MealConsumer(
        settings=state.settings,
        store=state.document_store,
        today=state.today,
    )
