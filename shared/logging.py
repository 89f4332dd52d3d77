"""
Structured logging setup for the retail automation service.

All runtime logging goes through structlog. Both the tool API and the CLI
call `configure_logging()` once at startup; library modules only ever call
`get_logger(__name__)`.

Conventions:
- Event names are snake_case (e.g. `profile_switched`, `navigation_failed`).
- Context is passed as keyword arguments, never interpolated into the event.
- Per-operation context (profile, operation, domain) is bound through
  `bind_request_context()` so every line of one operation carries it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog


def _build_shared_processors() -> list[structlog.types.Processor]:
    """Processor chain: contextvars, level, UTC timestamp, JSON output."""

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
        structlog.processors.EventRenamer("message"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_stdout: bool = True,
) -> None:
    """
    Configure structlog and the standard logging module.

    - When log_stdout is True (default), logs go to stdout.
    - When log_file is set, logs are also appended to that file (parent
      directory created if needed).
    - If neither is enabled, stdout is used so the process never has zero
      handlers.
    """

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if log_stdout:
        root.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_make_handler(logging.FileHandler(log_file, encoding="utf-8"), level))

    if not root.handlers:
        root.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))

    structlog.configure(
        processors=_build_shared_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Obtain a structured logger.

    Usage:
        from shared.logging import get_logger

        logger = get_logger(__name__)
        logger.info("cart_extracted", items=3)
    """

    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(
    *,
    profile: Optional[str] = None,
    operation: Optional[str] = None,
    domain: Optional[str] = None,
    **extra: Any,
) -> Mapping[str, Any]:
    """
    Bind per-operation context fields into the logging context.

    None values are dropped to keep log lines concise.
    """

    context: dict[str, Any] = {
        "profile": profile,
        "operation": operation,
        "domain": domain,
        **extra,
    }
    filtered_context = {k: v for k, v in context.items() if v is not None}

    structlog.contextvars.bind_contextvars(**filtered_context)
    return filtered_context


def clear_request_context() -> None:
    """Drop all bound per-operation context."""
    structlog.contextvars.clear_contextvars()
