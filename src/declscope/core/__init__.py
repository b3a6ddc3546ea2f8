"""Core module exports."""

from declscope.core.errors import (
    ConfigError,
    CycleDetectedError,
    DeclarationLoadError,
    DeclScopeError,
    ErrorCode,
    InternalError,
    PreconditionViolationError,
)
from declscope.core.logging import (
    clear_query_id,
    configure_logging,
    get_logger,
    get_query_id,
    query_scope,
    set_query_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CycleDetectedError",
    "DeclarationLoadError",
    "DeclScopeError",
    "ErrorCode",
    "InternalError",
    "PreconditionViolationError",
    # Logging
    "clear_query_id",
    "configure_logging",
    "get_logger",
    "get_query_id",
    "query_scope",
    "set_query_id",
]
