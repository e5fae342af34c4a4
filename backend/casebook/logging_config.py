"""Logging setup for processes embedding the repository layer."""

from __future__ import annotations

import logging

from casebook.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once; repository modules use getLogger(__name__)."""
    numeric = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("casebook").setLevel(numeric)
