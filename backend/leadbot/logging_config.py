"""
Structured JSON logging for the chat backend.

Each line is one JSON object. Request-scoped context (request id, chat
session, detected message language) is attached automatically so one
conversation can be followed across requests:
    jq 'select(.session_id == "abc" and .language == "hi")' app.log
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
language_var: ContextVar[Optional[str]] = ContextVar("language", default=None)

_CONTEXT_VARS = (
    ("request_id", request_id_var),
    ("session_id", session_id_var),
    ("language", language_var),
)

# Noisy client libraries only log warnings and above
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


def current_context() -> Dict[str, str]:
    """Context values set for the current request (unset ones omitted)."""
    return {key: var.get() for key, var in _CONTEXT_VARS if var.get()}


def clear_context() -> None:
    for _, var in _CONTEXT_VARS:
        var.set(None)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with request context and action fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(current_context())

        action = getattr(record, "action", None)
        if action:
            entry["action"] = action
        entry.update(getattr(record, "extra_data", None) or {})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Indic text stays readable in the log line
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """
    Route all logging through a single stdout JSON handler.

    Args:
        level: Root log level name; unknown names fall back to INFO
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_action(logger: logging.Logger, level: str, action: str, message: str, **fields) -> None:
    """
    Emit a record tagged with an action name and extra JSON fields.

    Example:
        log_action(logger, "info", "chat_reply_sent", "Reply generated",
                   results=3, is_ending=False)
    """
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        message,
        extra={"action": action, "extra_data": fields},
    )
