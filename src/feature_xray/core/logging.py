"""Structured logging for extraction and comparison.

Events are snake_case names with keyword context:
- `features_extracted` (debug): kind, model_id, sample, constituents
- `dataset_features` (debug): columns, rows
- `query_started` / `query_finished` (debug): sql, rows, columns
- `card_roles_unresolved` (info): card_id, columns
- `features_compared` (info): left, right, grouped, significant, contributors
- `invalid_cost_level` (warning): dimension, value

Events logged while a comparison extracts its two sides carry a
`comparison` key such as `"table:12/segment:3"`, set with `log_context`.
The CLI reconfigures logging from its `-v` flags and the `log_format` setting.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.typing import FilteringBoundLogger

# Scoped key/values added to every event, see log_context
_run_context: ContextVar[dict[str, Any] | None] = ContextVar("run_context", default=None)


def _add_run_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor merging the scoped `log_context` values into the event."""
    context = _run_context.get()
    if context:
        event_dict.update(context)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    show_timestamps: bool = True,
    color: bool = True,
) -> None:
    """Configure structlog and stdlib logging, both writing to stderr.

    Called with defaults at import; the CLI calls it again per command.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ("console" for development, "json" for production)
        show_timestamps: Whether to show timestamps
        color: Whether to use colors in console mode
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_run_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # duckdb and other libraries log through stdlib logging
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Structured logger named after the calling module."""
    return cast(FilteringBoundLogger, structlog.get_logger(name))


class LogContext:
    """Adds key/values to every event logged inside the block.

    Nested contexts merge, the inner value winning on a shared key.
    """

    def __init__(self, **context: Any):
        self.context = context
        self.token: Any = None

    def __enter__(self) -> LogContext:
        current = _run_context.get() or {}
        self.token = _run_context.set({**current, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token is not None:
            _run_context.reset(self.token)


def log_context(**context: Any) -> LogContext:
    """Scope logging context to a block.

    Usage:
        with log_context(comparison="table:12/table:13"):
            extractor.extract(options, model)  # features_extracted carries comparison
    """
    return LogContext(**context)


# Library default until the CLI or the caller reconfigures
configure_logging()
