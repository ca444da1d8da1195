"""Centralised logging configuration for SMO-SVM.

Console output at **INFO+** (coloured); when the ``SMO_SVM_LOG_DIR``
environment variable points to a directory, **DEBUG+** records (including
per-sweep SMO progress) also go to a rotating ``smo_svm.log`` there.

Usage::

    from smo_svm.utils.logger import get_logger
    log = get_logger(__name__)
    log.info("Training started")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR_ENV = "SMO_SVM_LOG_DIR"
_LOG_FILENAME = "smo_svm.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_ROOT_NAME = "smo_svm"
_INITIALISED: bool = False


class _ColourFormatter(logging.Formatter):
    """Formatter that emits ANSI colour codes for the console."""

    _COLOURS: dict[int, str] = {
        logging.DEBUG: "\033[90m",      # grey
        logging.INFO: "\033[32m",       # green
        logging.WARNING: "\033[33m",    # yellow
        logging.ERROR: "\033[31m",      # red
        logging.CRITICAL: "\033[1;31m", # bold red
    }
    _RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D102
        colour = self._COLOURS.get(record.levelno, "")
        message = super().format(record)
        return f"{colour}{message}{self._RESET}"


def _setup_package_logger() -> None:
    """Configure the ``smo_svm`` logger once (idempotent)."""
    global _INITIALISED  # noqa: PLW0603
    if _INITIALISED:
        return
    _INITIALISED = True

    pkg = logging.getLogger(_ROOT_NAME)
    pkg.setLevel(logging.DEBUG)
    pkg.propagate = False

    # ── Console handler (INFO) ──────────────────────────────────
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(
        _ColourFormatter("%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
                         datefmt="%H:%M:%S")
    )
    pkg.addHandler(console)

    # ── File handler (DEBUG, rotating, opt-in) ──────────────────
    log_dir = os.environ.get(LOG_DIR_ENV)
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / _LOG_FILENAME,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(funcName)s:%(lineno)d │ %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        pkg.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, initialising the package logger on first call.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A ``logging.Logger`` instance.
    """
    _setup_package_logger()
    return logging.getLogger(name)
