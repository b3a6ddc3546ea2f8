"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- EngineConfig model
- DeclScopeConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from declscope.config.constants import (
    DEFAULT_INTERFACE_METHOD_CACHE_SIZE,
    DEFAULT_RESERVED_TAG_NAMESPACE,
    DEFAULT_ROOT_TYPE_NAME,
    DEFAULT_TAG_MARKER_TYPE_NAME,
    INTERFACE_METHOD_CACHE_SIZE_MAX,
)
from declscope.config.models import DeclScopeConfig, EngineConfig, LoggingConfig, LogOutputConfig
from declscope.core.modes import CyclePolicy, TraversalDirection


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        """Absolute path is valid destination."""
        config = LogOutputConfig(destination="/var/log/declscope.log")
        assert config.destination == "/var/log/declscope.log"

    def test_relative_path_fails(self) -> None:
        """Relative path is rejected."""
        with pytest.raises(ValidationError, match="absolute"):
            LogOutputConfig(destination="logs/declscope.log")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1

    def test_invalid_level_fails(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")  # type: ignore[arg-type]


class TestEngineConfig:
    """Tests for EngineConfig model."""

    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.default_direction is TraversalDirection.TOP_DOWN
        assert config.cycle_policy is CyclePolicy.FAIL
        assert config.interface_method_cache_size == DEFAULT_INTERFACE_METHOD_CACHE_SIZE
        assert config.legacy_search_semantics is False
        assert config.root_type_name == DEFAULT_ROOT_TYPE_NAME
        assert config.tag_marker_type_name == DEFAULT_TAG_MARKER_TYPE_NAME
        assert config.reserved_tag_namespace == DEFAULT_RESERVED_TAG_NAMESPACE

    def test_enum_values_from_strings(self) -> None:
        """Switches parse from their names, as they appear in YAML and env vars."""
        config = EngineConfig(default_direction="BOTTOM_UP", cycle_policy="ABORT_BRANCH")  # type: ignore[arg-type]
        assert config.default_direction is TraversalDirection.BOTTOM_UP
        assert config.cycle_policy is CyclePolicy.ABORT_BRANCH

    @pytest.mark.parametrize("size", [0, -1, INTERFACE_METHOD_CACHE_SIZE_MAX + 1])
    def test_cache_size_out_of_range_fails(self, size: int) -> None:
        with pytest.raises(ValidationError, match="Cache size"):
            EngineConfig(interface_method_cache_size=size)

    @pytest.mark.parametrize("size", [1, INTERFACE_METHOD_CACHE_SIZE_MAX])
    def test_cache_size_bounds_accepted(self, size: int) -> None:
        assert EngineConfig(interface_method_cache_size=size).interface_method_cache_size == size

    def test_type_names_are_stripped(self) -> None:
        config = EngineConfig(root_type_name="  lang.Any  ")
        assert config.root_type_name == "lang.Any"

    def test_blank_namespace_fails(self) -> None:
        with pytest.raises(ValidationError, match="blank"):
            EngineConfig(reserved_tag_namespace="   ")


class TestDeclScopeConfig:
    """Tests for the root model."""

    def test_defaults_have_all_sections(self) -> None:
        config = DeclScopeConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.engine, EngineConfig)

    def test_nested_dict_input(self) -> None:
        config = DeclScopeConfig.model_validate(
            {"engine": {"legacy_search_semantics": True}, "logging": {"level": "DEBUG"}}
        )
        assert config.engine.legacy_search_semantics is True
        assert config.logging.level == "DEBUG"
