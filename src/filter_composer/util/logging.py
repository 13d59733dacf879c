"""Logger factory used across the package."""

from __future__ import annotations

import logging

ROOT_LOGGER = "filter_composer"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package root."""
    if name.startswith(ROOT_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the package root logger (idempotent)."""
    from filter_composer.config import settings

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if not any(getattr(h, "_filter_composer", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._filter_composer = True  # type: ignore[attr-defined]
        root.addHandler(handler)
