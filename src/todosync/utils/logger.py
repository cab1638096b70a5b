"""Application logging.

Everything goes to one rotating file under ``user_log_dir("todosync")``.
Components log through child loggers (``todosync.controller``,
``todosync.gateway.rest`` ...) so rollbacks and gateway failures can be
told apart in the file. ``TODOSYNC_LOG_LEVEL`` overrides the file level.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "todosync"
_LOG_FILE = "todosync.log"
_LEVEL_ENV = "TODOSYNC_LOG_LEVEL"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def _level_from_env() -> int:
    name = os.environ.get(_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.DEBUG
    return level if isinstance(level, int) else logging.DEBUG


def _root_logger() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger

    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_level_from_env())
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return _logger


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the application logger, or a child logger for ``component``.

    The file handler is attached on first call.
    """
    root = _root_logger()
    return root.getChild(component) if component else root
