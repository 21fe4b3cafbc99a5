"""
utils/logging_setup.py
----------------------

Central logging configuration for Grammar Lens.

Goals:
- Provide a single place to configure logging format and level.
- Make it easy to get a logger in any module:
      import structlog
      logger = structlog.get_logger()
- Honour the shared settings:
      LOG_LEVEL    (e.g. DEBUG, INFO, WARNING, ERROR)
      LOG_FORMAT   ("json" for machine-readable output, "console" otherwise)

Usage
=====

In your module:

    import structlog

    logger = structlog.get_logger()

    logger.info("lexicon_loaded_success", lang="en", count=120)

In your CLI script or app factory:

    from utils.logging_setup import init_logging

    if __name__ == "__main__":
        init_logging()  # ensures consistent global config

Implementation notes
====================

- structlog does the formatting; the standard `logging` module is routed
  to the same stream so third-party libraries (uvicorn, fastapi) line up.
- Logs go to stderr so CLI output on stdout stays clean.
- `init_logging` is idempotent; calling it multiple times is safe.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from app.shared.config import LogFormat, settings

# Internal flag to avoid re-configuring logging multiple times
_INITIALIZED = False


def _resolve_level(level_name: Optional[str]) -> int:
    """Map a level name to a logging level; defaults to INFO if invalid."""
    name = (level_name or settings.LOG_LEVEL or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def init_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    *,
    force: bool = False,
) -> None:
    """
    Configure structlog and the standard logging library.

    Args:
        level:
            Level name (e.g. "DEBUG"). If None, `settings.LOG_LEVEL` is used.
        log_format:
            "json" or "console". If None, `settings.LOG_FORMAT` is used.
        force:
            If True, reconfigure logging even if it was already initialized.
    """
    global _INITIALIZED

    if _INITIALIZED and not force:
        return

    numeric_level = _resolve_level(level)
    fmt = log_format or settings.LOG_FORMAT.value

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if fmt == LogFormat.JSON.value:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )

    _INITIALIZED = True


__all__ = ["init_logging"]
