"""Structured logging for resolution queries.

structlog renders through stdlib logging handlers, one handler per configured
output, each with its own level and renderer (console or JSON).

Every event carries the correlation id of the query that emitted it, if one is
active.  Ids live in a context variable, so queries running on concurrent
worker threads never see each other's id::

    with query_scope() as qid:
        engine.find_tagged_methods(cls, test_tag)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from declscope.config.models import LoggingConfig, LogOutputConfig

_query_id: ContextVar[str | None] = ContextVar("query_id", default=None)

# First file destination of the active configuration
_log_file_path: Path | None = None

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


# =============================================================================
# Query correlation
# =============================================================================


def get_query_id() -> str | None:
    return _query_id.get()


def set_query_id(query_id: str | None = None) -> str:
    """Set the correlation id of the current context, generating one if omitted."""
    qid = query_id or uuid4().hex[:12]
    _query_id.set(qid)
    return qid


def clear_query_id() -> None:
    _query_id.set(None)


@contextmanager
def query_scope(query_id: str | None = None) -> Iterator[str]:
    """Run a block under a correlation id, restoring the previous one afterwards."""
    token = _query_id.set(query_id or uuid4().hex[:12])
    try:
        yield _query_id.get()  # type: ignore[misc]
    finally:
        _query_id.reset(token)


def _add_query_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if qid := get_query_id():
        event_dict["query_id"] = qid
    return event_dict


# =============================================================================
# Configuration
# =============================================================================


def get_log_file_path() -> Path | None:
    """First file output of the current configuration, if any."""
    return _log_file_path


def _level(name: str | None, fallback: int) -> int:
    if name is None:
        return fallback
    return _LEVELS.get(name.upper(), fallback)


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        config: Full logging configuration. Wins over the simple params.
        json_format: Render JSON on stderr when no config is given.
        level: Root level when no config is given.
    """
    global _log_file_path
    from declscope.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.INFO)
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_query_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must take effect on loggers created earlier
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)

    _log_file_path = None
    for output in config.outputs:
        if output.destination not in _CONSOLE_DESTINATIONS and _log_file_path is None:
            _log_file_path = Path(output.destination)
        handler = _handler_for(output)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(_formatter_for(output, shared))
        root.addHandler(handler)


def _console_stream(destination: str) -> Any:
    # Looked up per call so that replaced sys streams are honored
    return getattr(sys, destination) if destination in _CONSOLE_DESTINATIONS else None


def _handler_for(output: LogOutputConfig) -> logging.Handler:
    stream = _console_stream(output.destination)
    if stream is not None:
        return logging.StreamHandler(stream)
    path = Path(output.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def _formatter_for(
    output: LogOutputConfig, shared: list[structlog.types.Processor]
) -> logging.Formatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = _console_stream(output.destination)
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
