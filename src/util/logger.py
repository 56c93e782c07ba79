"""Logging setup shared by every function."""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER = "journal"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        # Records must not also reach the basicConfig handler from main.py
        root.propagate = False
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the shared ``journal`` hierarchy.

    Module names are re-rooted, so ``src.services.tag_service`` logs as
    ``journal.services.tag_service`` through the one stdout handler.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured logger instance
    """
    root = _root_logger()
    if not name:
        return root
    if name.startswith("src."):
        name = name[len("src."):]
    return root.getChild(name)
