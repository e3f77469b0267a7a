from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGER = __name__.rsplit(".common", 1)[0]

# Administrator-facing channel (missing schedules, storage failures).
OPERATIONAL_LOGGER = f"{PACKAGE_LOGGER}.operational"


def configure_logging(settings: Any) -> logging.Logger:
    """Configure the package root logger from a settings module.

    Console output is always on; a size-rotated file is added when
    ``LOG_FILE`` is set.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(getattr(settings, "LOG_LEVEL", "INFO"))

    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)

        log_file = getattr(settings, "LOG_FILE", None)
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_file,
                maxBytes=int(getattr(settings, "LOG_MAX_BYTES", 20 * 1024 * 1024)),
                backupCount=int(getattr(settings, "LOG_BACKUP_COUNT", 5)),
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)

    return root


def operational_logger() -> logging.Logger:
    return logging.getLogger(OPERATIONAL_LOGGER)
