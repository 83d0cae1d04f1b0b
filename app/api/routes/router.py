from fastapi import APIRouter

from app.api.routes.dinner_routes import router as dinner_router

api_router = APIRouter()

api_router.include_router(dinner_router)
