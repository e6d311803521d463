"""Logging setup for the ``tron_fee`` namespace.

Logs always go to stderr so that stdout carries only the JSON report.
"""

from __future__ import annotations

import logging
import sys

APP_NAMESPACE = "tron_fee"

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s - %(message)s"


def _level_from_str(value: str | None) -> int:
    level = logging.getLevelName((value or "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def _canonical_name(name: str) -> str:
    """Map module logger names into the 'tron_fee.*' namespace."""
    if name == APP_NAMESPACE or name.startswith(APP_NAMESPACE + "."):
        return name
    return f"{APP_NAMESPACE}.{name}"


def init_logging(level: str | None = None) -> None:
    """Install a single stderr handler on the app logger.

    Calling it again only updates the level.
    """
    app = logging.getLogger(APP_NAMESPACE)
    app.setLevel(_level_from_str(level))
    if not any(getattr(h, "_tron_fee_handler", False) for h in app.handlers):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler._tron_fee_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(_FORMAT))
        app.addHandler(handler)

    # Tame noisy libs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the canonical 'tron_fee.*' namespace."""
    return logging.getLogger(_canonical_name(name or APP_NAMESPACE))
