import json
import logging
from datetime import datetime

DEBUG_MODE = False

log = logging.getLogger("dinner.debug")


def configure_logging(debug: bool = False, level: int = logging.INFO):
    """Set up root logging once and toggle structured debug entries."""
    global DEBUG_MODE
    DEBUG_MODE = debug
    # basicConfig is a no-op once the root logger is configured (uvicorn)
    log.setLevel(logging.DEBUG if debug else logging.NOTSET)

    logging.basicConfig(
        level=logging.DEBUG if debug else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_debug(event: str, data: dict):
    """
    Logs structured debug info if enabled.
    """
    if not DEBUG_MODE:
        return

    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": data,
    }
    log.debug(json.dumps(entry, indent=2, default=str))
