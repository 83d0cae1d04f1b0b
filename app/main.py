import logging
from datetime import date, datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes.router import api_router
from app.core.config import Settings, get_settings
from app.core.errors import ConfigError
from app.services import build_completion_client, build_document_store
from app.services.completion_client import CompletionClient
from app.services.document_store import DocumentStore
from app.services.logger import configure_logging
from app.services.time_utils import get_today_date, utc_now

log = logging.getLogger("dinner." + __name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    completion: Optional[CompletionClient] = None,
    clock: Callable[[], datetime] = utc_now,
    today: Optional[Callable[[], date]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(debug=settings.AI_DEBUG_MODE)

    app = FastAPI(title="Dinner Planner Backend")
    app.state.settings = settings
    app.state.document_store = store
    app.state.completion_client = completion
    app.state.clock = clock
    app.state.today = today or (lambda: get_today_date(settings.TIMEZONE))

    @app.on_event("startup")
    def startup():
        """Build the store and completion client unless they were injected."""
        if app.state.document_store is None:
            app.state.document_store = build_document_store(settings)
        if app.state.completion_client is None:
            app.state.completion_client = build_completion_client(settings)
        log.info("Dinner planner ready (store backend: %s)", settings.STORE_BACKEND)

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError):
        log.error(exc.message)
        return JSONResponse(status_code=500, content={"success": False, "error": exc.message})

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
