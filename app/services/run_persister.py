import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from app.models.meal_plan import Run
from app.services.document_store import DocumentStore
from app.services.response_parser import ParsedResponse
from app.services.time_utils import format_run_title, utc_now

log = logging.getLogger("dinner." + __name__)


@dataclass
class WriteOutcome:
    ok: bool
    record_id: Optional[str] = None
    error: Optional[Exception] = None


class RunPersister:
    """
    Appends runs to the run log. Runs are only ever created: an ERROR run is
    a new record next to the previous OK one, never a replacement.
    """

    def __init__(
        self,
        store: DocumentStore,
        database_id: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._database_id = database_id
        self._clock = clock

    def _write(self, run: Run) -> str:
        record = self._store.create_record(self._database_id, run.to_fields())
        log.info("Run written: %s (%s, %s)", record.id, run.status, run.title)
        return record.id

    def record_success(self, result: ParsedResponse) -> str:
        run = Run(
            title=format_run_title(self._clock()),
            status="OK",
            date_line=result.date_line,
            meal1=result.meal1,
            meal2=result.meal2,
            meal3=result.meal3,
            encouragement=result.encouragement,
            raw_json=result.raw_json,
        )
        return self._write(run)

    def record_failure(self, error: Exception) -> WriteOutcome:
        """
        Best-effort ERROR run. A failing write is logged and returned, never
        raised, so the caller always reports the original error.
        """
        message = getattr(error, "message", None) or str(error)
        run = Run(
            title=format_run_title(self._clock(), error=True),
            status="ERROR",
            encouragement=f"Oops — {message}",
        )
        try:
            return WriteOutcome(ok=True, record_id=self._write(run))
        except Exception as write_error:
            log.warning("Could not write ERROR run", exc_info=True)
            return WriteOutcome(ok=False, error=write_error)
