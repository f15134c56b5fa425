"""Structured logging helpers with correlation and fan-out task metadata.

Log files go to the first writable directory of: ``RELAY_LOG_DIR`` when set,
``logs/`` beside a source checkout, ``DATA_DIR/logs`` (the mounted volume a
containerised CLI run writes to, since an installed package directory is often
read-only), and finally ``logs/`` inside the package itself. The chain lets
``intent-relay ask`` run unchanged from a checkout as well as from an installed wheel.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from intent_relay.core.config import settings

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_task_index: ContextVar[Optional[int]] = ContextVar("task_index", default=None)

LEVEL_NAME = str(getattr(settings, "RELAY_LOG_LEVEL", "info")).upper()
LOG_LEVEL = getattr(logging, LEVEL_NAME, logging.INFO)

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent


def _resolve_logs_dir() -> Path:
    """Select a writable logs directory honoring configuration overrides."""

    configured_dir = getattr(settings, "RELAY_LOG_DIR", None)
    candidates = []
    if configured_dir:
        candidates.append(Path(configured_dir))

    data_dir = Path(getattr(settings, "DATA_DIR", Path("/data")))
    # Precedence: explicit override → repo root logs → DATA_DIR/logs → package-local logs
    candidates.append(ROOT_DIR / "logs")
    candidates.append(data_dir / "logs")
    candidates.append(BASE_DIR / "logs")

    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return candidate

    raise PermissionError("Unable to create a writable logs directory")


LOGS_DIR = _resolve_logs_dir()
LOG_SCHEMA_VERSION = str(getattr(settings, "RELAY_LOG_SCHEMA_VERSION", "1.0.0"))
LOG_FILE_PATH = LOGS_DIR / "intent_relay.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Attach correlation id and fan-out task index to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        task_index = get_task_index()
        record.task_index = "-" if task_index is None else task_index
        return True


def bind_correlation_id(value: Optional[str]) -> Token[Optional[str]]:
    """Bind ``value`` to the correlation id context variable."""

    return _correlation_id.set(value)


def reset_correlation_id(token: Token[Optional[str]]) -> None:
    """Reset the correlation id context variable to a previous state."""

    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    """Return the current correlation id if bound."""

    return _correlation_id.get()


def bind_task_index(value: Optional[int]) -> Token[Optional[int]]:
    """Bind the index of the fan-out sub-task running in this context."""

    return _task_index.set(value)


def reset_task_index(token: Token[Optional[int]]) -> None:
    """Reset the fan-out task index context variable."""

    _task_index.reset(token)


def get_task_index() -> Optional[int]:
    """Return the fan-out task index if bound."""

    return _task_index.get()


@contextmanager
def correlation_id_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds a correlation id."""

    token = bind_correlation_id(value)
    try:
        yield
    finally:
        reset_correlation_id(token)


@contextmanager
def task_index_context(value: Optional[int]) -> Iterator[None]:
    """Context manager that temporarily binds a fan-out task index."""

    token = bind_task_index(value)
    try:
        yield
    finally:
        reset_task_index(token)


def _ensure_handlers(logger: logging.Logger) -> None:
    if logger.handlers:
        return

    formatter = VersionedJsonFormatter(
        " ".join(
            [
                "%(asctime)s",
                "%(levelname)s",
                "%(name)s",
                "%(message)s",
                "%(correlation_id)s",
                "%(task_index)s",
            ]
        ),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "correlation_id": "cid",
            "task_index": "task",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )
    correlation_filter = CorrelationIdFilter()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(correlation_filter)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    file_handler = RotatingFileHandler(
        LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.addFilter(correlation_filter)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger with correlation id filtering."""

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    _ensure_handlers(logger)
    return logger


__all__ = [
    "CorrelationIdFilter",
    "bind_correlation_id",
    "bind_task_index",
    "reset_correlation_id",
    "reset_task_index",
    "get_correlation_id",
    "get_task_index",
    "correlation_id_context",
    "task_index_context",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
]
