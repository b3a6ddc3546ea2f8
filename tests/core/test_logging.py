"""Tests for structured logging."""

import json
import logging
import threading
from pathlib import Path

import pytest
import structlog

from declscope.config.models import LoggingConfig, LogOutputConfig
from declscope.core.logging import (
    clear_query_id,
    configure_logging,
    get_log_file_path,
    get_logger,
    get_query_id,
    query_scope,
    set_query_id,
)


class TestQueryIdCorrelation:
    """Query ID context variable tests."""

    def setup_method(self) -> None:
        """Clear query ID before each test."""
        clear_query_id()

    def test_set_and_get_query_id(self) -> None:
        """Query ID can be set and retrieved."""
        # Given
        query_id = "test-123"

        # When
        result = set_query_id(query_id)

        # Then
        assert result == query_id
        assert get_query_id() == query_id

    def test_set_query_id_generates_id(self) -> None:
        """Set generates UUID-based ID when none provided."""
        # When
        qid = set_query_id()

        # Then
        assert qid is not None
        assert len(qid) == 12  # uuid4().hex[:12]

    def test_clear_query_id(self) -> None:
        """Clear removes the current query ID."""
        # Given
        set_query_id("to-clear")

        # When
        clear_query_id()

        # Then
        assert get_query_id() is None

    def test_query_id_is_thread_local(self) -> None:
        """Query IDs are per thread context, so worker threads do not leak into each other."""
        # Given
        set_query_id("main")
        seen: list[str | None] = []

        def worker() -> None:
            seen.append(get_query_id())
            set_query_id("worker")

        # When
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        # Then
        assert seen == [None]
        assert get_query_id() == "main"


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_query_id()

    def test_json_format_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        if lines:
            data = json.loads(lines[-1])
            assert data["event"] == "test message"
            assert data["key"] == "value"
            assert "timestamp" in data
            assert data["level"] == "info"

    def test_config_object_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When - config's DEBUG should override the level="ERROR" param
        configure_logging(config=config, json_format=False, level="ERROR")
        logger = get_logger()
        logger.debug("debug msg")

        # Then
        content = log_file.read_text()
        assert "debug msg" in content
        assert get_log_file_path() == log_file

    def test_query_id_added_to_events(self, tmp_path: Path) -> None:
        """Every event logged inside a query carries its correlation ID."""
        # Given
        log_file = tmp_path / "query.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_query_id("q-42")

        # When
        get_logger("resolver").info("tags.lookup")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "tags.lookup"
        assert data["query_id"] == "q-42"

    def test_multiple_outputs(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then - info_file should have INFO only (not DEBUG)
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        # Then - debug_file should have both (inherits DEBUG from config level)
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content


class TestQueryScope:
    """query_scope() context manager tests."""

    def setup_method(self) -> None:
        clear_query_id()

    def test_scope_sets_and_restores_id(self) -> None:
        # Given
        set_query_id("outer")

        # When
        with query_scope("inner") as qid:
            inside = get_query_id()

        # Then
        assert qid == inside == "inner"
        assert get_query_id() == "outer"

    def test_scope_generates_id(self) -> None:
        with query_scope() as qid:
            assert len(qid) == 12
            assert get_query_id() == qid

        assert get_query_id() is None

    def test_scope_restores_id_on_error(self) -> None:
        with pytest.raises(RuntimeError), query_scope("failing"):
            raise RuntimeError("boom")

        assert get_query_id() is None
