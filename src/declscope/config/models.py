"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DECLSCOPE__SECTION__KEY)
3. Project YAML (.declscope/config.yaml)
4. Global YAML (~/.config/declscope/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DECLSCOPE__<SECTION>__<KEY>=<VALUE>

Examples:
    DECLSCOPE__LOGGING__LEVEL=DEBUG
    DECLSCOPE__ENGINE__CYCLE_POLICY=ABORT_BRANCH
    DECLSCOPE__ENGINE__INTERFACE_METHOD_CACHE_SIZE=1024
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from declscope.config.constants import (
    DEFAULT_INTERFACE_METHOD_CACHE_SIZE,
    DEFAULT_RESERVED_TAG_NAMESPACE,
    DEFAULT_ROOT_TYPE_NAME,
    DEFAULT_TAG_MARKER_TYPE_NAME,
    INTERFACE_METHOD_CACHE_SIZE_MAX,
)
from declscope.core.modes import CyclePolicy, TraversalDirection

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DECLSCOPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every recovered load failure.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class EngineConfig(BaseModel):
    """Resolution engine configuration.

    Env vars:
        DECLSCOPE__ENGINE__DEFAULT_DIRECTION: TOP_DOWN or BOTTOM_UP
        DECLSCOPE__ENGINE__CYCLE_POLICY: FAIL or ABORT_BRANCH
        DECLSCOPE__ENGINE__INTERFACE_METHOD_CACHE_SIZE: LRU capacity
        DECLSCOPE__ENGINE__LEGACY_SEARCH_SEMANTICS: Shadow by name/signature only
    """

    default_direction: TraversalDirection = Field(
        default=TraversalDirection.TOP_DOWN,
        description="Traversal direction used when a caller does not pass one.",
    )
    cycle_policy: CyclePolicy = Field(
        default=CyclePolicy.FAIL,
        description="Handling of enclosing-class cycles when a caller does not pass a policy.",
    )
    interface_method_cache_size: int = Field(
        default=DEFAULT_INTERFACE_METHOD_CACHE_SIZE,
        description="Capacity of the equivalent-interface-method cache.",
    )
    legacy_search_semantics: bool = Field(
        default=False,
        description="Treat any same-name field or signature-compatible method as shadowing, "
        "ignoring private/static/final and package-scope rules.",
    )
    root_type_name: str = Field(
        default=DEFAULT_ROOT_TYPE_NAME,
        description="Name of the universal root supertype.",
    )
    tag_marker_type_name: str = Field(
        default=DEFAULT_TAG_MARKER_TYPE_NAME,
        description="Name of the marker supertype implemented by every tag type.",
    )
    reserved_tag_namespace: str = Field(
        default=DEFAULT_RESERVED_TAG_NAMESPACE,
        description="Namespace of platform meta-tags excluded from meta-tag search.",
    )

    @field_validator("interface_method_cache_size")
    @classmethod
    def validate_cache_size(cls, v: int) -> int:
        if not (1 <= v <= INTERFACE_METHOD_CACHE_SIZE_MAX):
            raise ValueError(
                f"Cache size must be 1-{INTERFACE_METHOD_CACHE_SIZE_MAX}, got {v}"
            )
        return v

    @field_validator("root_type_name", "tag_marker_type_name", "reserved_tag_namespace")
    @classmethod
    def validate_type_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Type names must not be blank")
        return v.strip()


class DeclScopeConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
