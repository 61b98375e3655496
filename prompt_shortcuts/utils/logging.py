# prompt_shortcuts/utils/logging.py
"""Structured logging with JSON format and acting-user context.

Provides:
- JSON-formatted log output for structured logging
- Acting user id via ContextVar, attached to every record logged while set
- Centralized logger configuration
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

# Id of the user whose request is being handled
actor_var: ContextVar[str] = ContextVar("actor", default="")


def get_actor() -> str:
    """Get the acting user id for the current context.

    Returns:
        Current actor id, or empty string if not set.
    """
    return actor_var.get()


@contextmanager
def actor(user_id: str) -> Iterator[None]:
    """Attach a user id to log records emitted inside the block."""
    token = actor_var.set(user_id)
    try:
        yield
    finally:
        actor_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON with timestamp, level, logger name,
    message, and the acting user when one is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        user_id = get_actor()
        if user_id:
            log_data["actor"] = user_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_structured_logging(
    level: int | str = logging.INFO, json_output: bool = True
) -> logging.Handler:
    """Configure logging for the application.

    Adds a StreamHandler to the root logger, formatted as JSON or as plain
    text.

    Args:
        level: Logging level (default: logging.INFO).
        json_output: Use StructuredFormatter when True.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
    return handler
