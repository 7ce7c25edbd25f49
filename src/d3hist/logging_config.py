"""
Opt-in logging setup for scripts and notebooks.

The library itself only creates module loggers; nothing is configured on
import. ``D3HIST_LOG_LEVEL`` is read on each call so it can be changed at
runtime.
"""

import logging
import os

LOG_LEVEL_ENV = "D3HIST_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level(value) -> int:
    if isinstance(value, str):
        return getattr(logging, value.upper(), logging.INFO)
    if isinstance(value, int):
        return value
    return logging.INFO


def configure_logging(level=None) -> int:
    """Configure root logging for scripts and notebooks; returns the resolved level."""
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    resolved = _resolve_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("d3hist").setLevel(resolved)
    return resolved
