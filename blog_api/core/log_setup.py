"""Process-wide logging: one stream on stdout, one append-only file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HANDLER_TAG = "_blog_api_handler"


def configure_logging(settings: Settings) -> None:
    """Attach stdout and file handlers to the root logger.

    Safe to call more than once: handlers installed by a previous call are
    closed and replaced, so the log file follows the latest settings.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    log_path = Path(settings.log_file)
    if log_path.parent and not log_path.parent.exists():
        log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_path, mode="a", encoding="utf-8"),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    root.setLevel(getattr(logging, settings.log_level, logging.INFO))
