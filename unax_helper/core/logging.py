from __future__ import annotations

import logging
import os
import re
import zlib
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from unax_helper.core.config import Settings

ROOT_LOGGER = "unax_helper"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": logging.INFO + 5,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": logging.CRITICAL + 5,
    "emergency": logging.CRITICAL + 10,
}
logging.addLevelName(LOG_LEVELS["notice"], "NOTICE")
logging.addLevelName(LOG_LEVELS["alert"], "ALERT")
logging.addLevelName(LOG_LEVELS["emergency"], "EMERGENCY")


class SafeFormDataFormatter(logging.Formatter):
    _patterns = [
        re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.I),
        re.compile(r"\+?\d[\d ]{7,}\d"),
    ]

    @classmethod
    def redact(cls, message: str) -> str:
        for pattern in cls._patterns:
            message = pattern.sub("[REDACTED]", message)
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            message = f"{message} [exception={exc_type}]"
            record.exc_info = None
            record.exc_text = None
        record.msg = self.redact(message)
        record.args = ()
        return super().format(record)


class FormDataRedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = SafeFormDataFormatter.redact(record.getMessage())
        record.args = ()
        # Keep tracebacks out of default logs; diagnostics can be collected separately.
        if record.exc_info:
            record.exc_info = None
            record.exc_text = None
        return True


def _root_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.addFilter(FormDataRedactionFilter())
    handler.setFormatter(SafeFormDataFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    root = _root_logger()
    if name == ROOT_LOGGER:
        return root
    # Module loggers hand their records to the configured package logger.
    return logging.getLogger(name if name.startswith(f"{ROOT_LOGGER}.") else f"{ROOT_LOGGER}.{name}")


def log_file_path(settings: Settings, today: date | None = None) -> Path:
    stamp = (today or date.today()).isoformat()
    checksum = format(zlib.crc32(stamp.encode("utf-8")), "08x")
    return settings.logs_dir / f"{settings.log_prefix}-{stamp}-{checksum}.log"


def configure_file_logging(settings: Settings, today: date | None = None) -> logging.Logger:
    logger = _root_logger()
    logs_dir = settings.logs_dir
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f'Create logs dir "{logs_dir}" failed.') from exc

    path = log_file_path(settings, today)
    level = LOG_LEVELS[settings.log_threshold]
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            handler.setLevel(level)
            return logger

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.addFilter(FormDataRedactionFilter())
    handler.setFormatter(SafeFormDataFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def format_log(message: str = "", file: str = "", line: int | str = 0) -> str:
    if not file and not line:
        return message
    return f"{os.path.basename(file)}:{int(line or 0)} {message}"


def log_event(
    logger: logging.Logger,
    context: str = "",
    message: str = "",
    params: Mapping[str, Any] | None = None,
    file: str = "",
    line: int | str = 0,
    level: str = "error",
) -> None:
    text = context
    if message:
        text = f"{text}: {message}"
    if params:
        text += " (" + ", ".join(f"{key} #{value}" for key, value in params.items()) + ")"
    logger.log(LOG_LEVELS.get(level, logging.ERROR), format_log(text, file, line))
