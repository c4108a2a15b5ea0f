"""
Logging setup shared by the engine, aggregator, and simulator.
"""

from __future__ import annotations

import logging
import os

ROOT_LOGGER = "dualnav"
_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        level = os.environ.get("DUALNAV_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level, logging.INFO))
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the ``dualnav`` hierarchy."""
    root = _configure_root()
    if not name or name == ROOT_LOGGER:
        return root
    return root.getChild(name)


__all__ = ["get_logger", "ROOT_LOGGER"]
