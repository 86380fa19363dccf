"""
Structured JSON logging configuration.

Records emitted while a dialer works for an agent carry that agent's id
(see agent_context), so interleaved output from several agents stays readable.
"""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from powerdialer.config import get_settings

# Context variable for the agent currently being served
agent_id_var: ContextVar[str | None] = ContextVar("agent_id", default=None)


class StructuredFormatter(logging.Formatter):
    """JSON-like structured log formatter."""

    _RESERVED = {
        # standard LogRecord attributes
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "message", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        agent_id = agent_id_var.get()
        if agent_id:
            log_data["agent_id"] = agent_id

        # Standard logging extra=... fields: include any non-reserved attributes
        for k, v in record.__dict__.items():
            if k in self._RESERVED:
                continue
            if k in log_data:
                log_data[f"extra_{k}"] = v
            else:
                log_data[k] = v

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


_HANDLER_NAME = "powerdialer.stdout"


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    handler.set_name(_HANDLER_NAME)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    A stdout handler is only installed while the root logger has none, so
    records are not written twice once setup_logging() has run.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers and not logging.getLogger().handlers:
        logger.addHandler(_json_handler())

    logger.setLevel(get_settings().log_level)

    return logger


def setup_logging() -> None:
    """Configure structured JSON logging on the root logger."""
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.handlers = [_json_handler()]

    # Loggers obtained earlier hand their records to the root handler from now on
    for logger in list(logging.root.manager.loggerDict.values()):
        if isinstance(logger, logging.Logger):
            for handler in list(logger.handlers):
                if handler.get_name() == _HANDLER_NAME:
                    logger.removeHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)


@contextmanager
def agent_context(agent_id: str) -> Iterator[None]:
    """Tag every record emitted inside the block with agent_id."""
    token = agent_id_var.set(agent_id)
    try:
        yield
    finally:
        agent_id_var.reset(token)
