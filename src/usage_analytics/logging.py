"""Logging configuration."""

import json
import logging
from datetime import UTC, datetime

# Context attributes attached with `extra=` by the aggregation and dashboard
# loggers. They are copied into JSON log lines when present.
CONTEXT_FIELDS = ("period_days", "records_seen", "skipped", "source")


class JSONFormatter(logging.Formatter):
    """One JSON object per log line, with aggregation context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["error"] = {
                "type": type(exc).__name__,
                "message": str(exc),
                "stacktrace": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    *,
    log_format: str = "text",
    debug: bool = False,
    default_level: int = logging.INFO,
) -> None:
    """Send every record to stderr as text or JSON lines, dropping other handlers.

    `debug` lowers the threshold to DEBUG, otherwise `default_level` applies.
    """
    level = logging.DEBUG if debug else default_level
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    logging.getLogger("usage_analytics").setLevel(level)
