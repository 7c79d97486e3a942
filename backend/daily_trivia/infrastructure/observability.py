"""Structured Logging — one JSON object per log line.

Invariants:
    - Each line carries timestamp (UTC, ISO 8601), level, logger and message
    - Known domain extras (question_id, attempt, outcome, similarity, error_code,
      token counts, path) are copied when set; unknown extras are ignored
    - setup_logging is idempotent: calling it twice does not duplicate output

Design Decisions:
    - Plain stdlib logging with a custom Formatter: modules keep using
      logging.getLogger(__name__) and pass context through `extra`
    - "text" format for local runs, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

LOG_EXTRAS: tuple[str, ...] = (
    "question_id", "attempt", "outcome", "similarity", "error_code",
    "input_tokens", "output_tokens", "path",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_HANDLER_NAME = "daily_trivia"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in LOG_EXTRAS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
