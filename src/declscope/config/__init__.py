"""Config module exports."""

from declscope.config.loader import DeclScopeSettings, load_config
from declscope.config.models import (
    DeclScopeConfig,
    EngineConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "DeclScopeConfig",
    "DeclScopeSettings",
    "EngineConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
