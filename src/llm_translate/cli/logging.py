"""
Logging - Structured logging setup for the CLI.

Two output formats:
- text: Human-readable lines (optionally colored) for terminals
- json: One JSON object per line for log aggregation

Usage:
    setup_logging(level=logging.DEBUG, log_format="json", log_file="translate.log")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


# Attributes present on every LogRecord; anything else is user context
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ("anthropic", "httpx", "httpcore", "watchdog")


def _extract_context(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        static_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.static_fields = static_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}

        if self.include_timestamp:
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
            millis = ts.microsecond // 1000
            entry["timestamp"] = ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"
        if self.include_level:
            entry["level"] = record.levelname
        if self.include_logger:
            entry["logger"] = record.name

        entry["message"] = record.getMessage()
        entry.update(self.static_fields)

        if self.include_location:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        context = _extract_context(record)
        if context:
            entry["context"] = context

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable formatter with optional ANSI colors."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1m\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_context: bool = False):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        output = super().format(record)

        if self.include_context:
            context = _extract_context(record)
            if context:
                output += " " + " ".join(f"{k}={v}" for k, v in context.items())

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            if color:
                output = f"{color}{output}{self.RESET}"
        return output


def setup_logging(
    level: int = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
    use_colors: bool | None = None,
) -> None:
    """
    Configure the root logger.

    Existing root handlers are replaced by one stderr handler, plus a
    file handler when ``log_file`` is given.

    Args:
        level: Root log level.
        log_format: "text" or "json".
        log_file: Optional path that also receives every record.
        static_fields: Fields added to every JSON record.
        use_colors: Color text output (defaults to stderr being a TTY).
    """
    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter(static_fields=static_fields)
    else:
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        formatter = TextFormatter(use_colors=use_colors)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        if log_format == "json":
            file_handler.setFormatter(JSONFormatter(static_fields=static_fields))
        else:
            file_handler.setFormatter(TextFormatter(use_colors=False))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
