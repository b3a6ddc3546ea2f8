"""DeclScope error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Resolution
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Resolution (3xxx)
    CYCLE_DETECTED = 3001
    PRECONDITION_VIOLATED = 3002
    DECLARATION_LOAD_FAILED = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DeclScopeError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CYCLE_DETECTED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs and callers that report errors."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DeclScopeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CycleDetectedError(DeclScopeError):
    """A nested class extends one of its own enclosing classes."""

    @classmethod
    def between(cls, class_name: str, superclass_name: str) -> "CycleDetectedError":
        return cls(
            code=ErrorCode.CYCLE_DETECTED,
            message=(
                f"Detected cycle in inner class hierarchy between {class_name} "
                f"and {superclass_name}"
            ),
            details={"class": class_name, "superclass": superclass_name},
        )


class PreconditionViolationError(DeclScopeError):
    """An operation was invoked with arguments it cannot accept."""

    @classmethod
    def because(cls, reason: str, **details: Any) -> "PreconditionViolationError":
        return cls(
            code=ErrorCode.PRECONDITION_VIOLATED,
            message=reason,
            details=details,
        )


class DeclarationLoadError(DeclScopeError):
    """Structural metadata of a declaration references a type that cannot be resolved."""

    @classmethod
    def unresolved(cls, owner: str, type_name: str) -> "DeclarationLoadError":
        return cls(
            code=ErrorCode.DECLARATION_LOAD_FAILED,
            message=f"Failed to resolve type {type_name} referenced by {owner}",
            details={"owner": owner, "type": type_name},
        )


class InternalError(DeclScopeError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
