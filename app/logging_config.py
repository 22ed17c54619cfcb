"""
Logging setup for the StudioFlow service.

Three sinks are attached to the root logger:
- console, plain text, INFO and above
- ``studioflow.log``, one JSON object per line, rotated at 10 MB
- ``errors.log``, same format, ERROR and above only

Handlers add context through ``extra=`` (tenant, entity, request timing);
any of ``EXTRA_FIELDS`` found on a record ends up in the JSON payload.
"""

import logging
import logging.handlers
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from app.config import settings


EXTRA_FIELDS = (
    "tenant_id",
    "user_id",
    "entity_id",
    "client_id",
    "method",
    "path",
    "status",
    "duration",
)

# Third-party loggers and the level they are held at
NOISY_LOGGERS = {
    "aiogram": logging.WARNING,
    "aiohttp.access": logging.WARNING,
    "aiohttp.server": logging.WARNING,
    "asyncio": logging.WARNING,
    "sqlalchemy": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "apscheduler": logging.INFO,
}

MAX_LOG_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(
            {name: getattr(record, name) for name in EXTRA_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _json_file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None):
    """
    Configure the root logger.

    Args:
        level: Root level name, defaults to ``settings.log_level``
        log_dir: Directory for the rotating files, defaults to ``settings.log_dir``
    """
    level_name = (level or settings.log_level).upper()
    directory = Path(log_dir or settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name))

    # Drop handlers left by an earlier call
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_json_file_handler(directory / "studioflow.log", logging.DEBUG))
    root_logger.addHandler(_json_file_handler(directory / "errors.log", logging.ERROR))

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, dir=%s", level_name, directory.absolute()
    )
