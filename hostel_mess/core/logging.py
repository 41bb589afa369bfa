"""
Logging for the mess ledger.

Application code logs through ``get_logger()``, a thin adapter over the
standard library that merges bound context into ``extra``. Records are
rendered as JSON by python-json-logger, or as plain text when
``LOG_FORMAT`` is ``text``. HTTP access lines go through a structlog
logger (``get_access_logger()``) so they can be rendered as key/value
events.

The current request id and caller id live in context variables and are
stamped onto every record.
"""

import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from hostel_mess.config.settings import settings

request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

SERVICE_NAME = "hostel-mess"
REDACTED_KEYS = ("password", "token", "secret", "authorization", "cookie")

_configured = False


def _redact(event: Dict[str, Any]) -> None:
    for key, value in event.items():
        if any(marker in key.lower() for marker in REDACTED_KEYS):
            event[key] = "[REDACTED]"
        elif isinstance(value, dict):
            _redact(value)


# ---------------------------------------------------------------------------
# structlog processors
# ---------------------------------------------------------------------------

def add_request_context(logger, method_name, event_dict):
    if request_id.get():
        event_dict["request_id"] = request_id.get()
    if user_id.get():
        event_dict["user_id"] = user_id.get()
    event_dict["service"] = SERVICE_NAME
    event_dict["environment"] = settings.ENVIRONMENT
    return event_dict


def redact_secrets(logger, method_name, event_dict):
    _redact(event_dict)
    return event_dict


# ---------------------------------------------------------------------------
# stdlib handlers
# ---------------------------------------------------------------------------

class ContextFilter(logging.Filter):
    """Copy the request and caller ids onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id.get()
        if getattr(record, "user_id", None) is None:
            record.user_id = user_id.get()
        return True


class LedgerJsonFormatter(jsonlogger.JsonFormatter):

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        for key in ("request_id", "user_id"):
            if not log_record.get(key):
                log_record.pop(key, None)
        if record.exc_info and record.exc_info[0] is not None:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }


def _formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return LedgerJsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    return logging.Formatter(
        "%(asctime)s %(levelname)-8s %(name)s [%(request_id)s] %(message)s"
    )


def _handlers(level: int):
    console = logging.StreamHandler(sys.stdout)
    handlers = [console]
    if settings.LOG_FILE:
        path = Path(settings.LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf8"
            )
        )
    formatter = _formatter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())
    return handlers


def _configure_structlog() -> None:
    # Events end up on the stdlib handlers above; in json mode their keys
    # become record attributes picked up by LedgerJsonFormatter.
    renderer = (
        structlog.stdlib.render_to_log_kwargs
        if settings.LOG_FORMAT == "json"
        else structlog.processors.KeyValueRenderer(key_order=["event", "request_id"])
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def setup_logging(force: bool = False) -> None:
    """Configure root handlers and structlog once per process."""
    global _configured
    if _configured and not force:
        return

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in _handlers(level):
        root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )

    _configure_structlog()
    _configured = True

    get_logger(__name__).info(
        "Logging configured",
        extra={"log_level": settings.LOG_LEVEL, "log_format": settings.LOG_FORMAT},
    )


# ---------------------------------------------------------------------------
# Loggers
# ---------------------------------------------------------------------------

class LoggerAdapter:
    """Wraps a stdlib logger; context bound with ``bind`` goes into ``extra``."""

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        self.logger = logger
        self._context = dict(context or {})

    def bind(self, **kwargs) -> "LoggerAdapter":
        return LoggerAdapter(self.logger, {**self._context, **kwargs})

    def _log(self, level: int, message: str, *args, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        kwargs["extra"] = {**self._context, **(kwargs.get("extra") or {})}
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name or "hostel_mess"))


def get_access_logger():
    """structlog logger for one line per HTTP request."""
    return structlog.get_logger("hostel_mess.access")


__all__ = [
    "get_logger",
    "get_access_logger",
    "setup_logging",
    "LoggerAdapter",
    "request_id",
    "user_id",
]
