"""
Application logging.

Everything logs under the "evolutia" logger tree, which writes to a rotating
file in LOG_DIR and to stdout. Records carry the id of the HTTP request being
served and, inside a progress operation, the id of the user it acts on.
"""

from __future__ import annotations

import logging
import os
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

from api.config import get_settings

APP_LOGGER = "evolutia"
LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "request_id=%(request_id)s user_id=%(user_id)s src=%(filename)s:%(lineno)d %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")
_user_id: ContextVar[str] = ContextVar("user_id", default="-")


class ContextFilter(logging.Filter):
    """Stamps the current request and user ids onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        record.user_id = _user_id.get()
        return True


class ConsoleFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    _LEVEL_COLORS = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def __init__(self, color: bool):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if not self.color:
            return text
        code = self._LEVEL_COLORS.get(record.levelno, "37")
        return text.replace(record.levelname, f"\x1b[{code}m{record.levelname}\x1b[0m", 1)


def _console_supports_color() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(log_dir: str | Path | None = None, level: str | None = None) -> logging.Logger:
    """Attach the file and console handlers once; later calls return the configured logger."""
    logger = logging.getLogger(APP_LOGGER)
    if logger.handlers:
        return logger

    settings = get_settings()
    log_dir = Path(log_dir or settings.log_dir)
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(numeric_level)
    logger.propagate = False

    context = ContextFilter()

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "backend.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ConsoleFormatter(color=_console_supports_color()))

    for handler in (file_handler, console_handler):
        handler.setLevel(numeric_level)
        handler.addFilter(context)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{APP_LOGGER}.{name}")


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or uuid.uuid4().hex
    _request_id.set(rid)
    return rid


def clear_log_context() -> None:
    _request_id.set("-")
    _user_id.set("-")


@contextmanager
def log_operation(logger: logging.Logger, name: str, *, user_id: Optional[int] = None) -> Iterator[None]:
    """
    Time one unit of work and log how it ended:

        with log_operation(logger, "record_answer", user_id=42):
            ...

    Records logged inside the block carry user_id. Exceptions are re-raised.
    """
    token = _user_id.set(str(user_id)) if user_id is not None else None
    started = time.perf_counter()
    try:
        yield
    except Exception as exc:
        logger.warning("%s failed duration_ms=%s error=%s", name, _elapsed_ms(started), type(exc).__name__)
        raise
    else:
        logger.info("%s ok duration_ms=%s", name, _elapsed_ms(started))
    finally:
        if token is not None:
            _user_id.reset(token)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
