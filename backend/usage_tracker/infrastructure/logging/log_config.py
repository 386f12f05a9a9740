"""Logging setup: root level, a stderr handler and quieter driver/server loggers."""

import logging
import sys

from usage_tracker.config import Settings

# Settings field → loggers whose level it controls
_LEVEL_FIELDS: dict[str, tuple[str, ...]] = {
    "log_level_mongo": ("pymongo", "pymongo.command", "pymongo.connection", "pymongo.serverSelection"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
}


def setup_logging(settings: Settings) -> None:
    """Apply the configured log levels. Called once from the app lifespan."""
    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))

    # Under uvicorn the root may have no handler; tests and the CLI need one too
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s — %(message)s"))
        root.addHandler(handler)

    for field_name, logger_names in _LEVEL_FIELDS.items():
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)


def _parse_level(raw: str) -> int:
    """Map a level name to its logging constant; unknown names fall back to INFO."""
    numeric = getattr(logging, raw.upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO
