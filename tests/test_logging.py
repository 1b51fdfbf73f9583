"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from github_commit_mirror.logging import (
    LogContext,
    bind_commit,
    bind_repo,
    get_logger,
    is_configured,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def captured() -> Generator[list[str], None, None]:
    """Capture formatted records (extra + message) after setup."""
    messages: list[str] = []
    setup_logging(level="DEBUG")
    handler_id = logger.add(
        lambda msg: messages.append(str(msg)),
        format="{extra} | {message}",
    )
    yield messages
    logger.remove(handler_id)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default_level(self) -> None:
        """Test default INFO level setup."""
        setup_logging(level="INFO")
        assert is_configured()

    def test_setup_logging_verbose_overrides_level(self) -> None:
        """Test that verbose flag sets DEBUG level."""
        messages: list[str] = []
        setup_logging(level="WARNING", verbose=True)

        handler_id = logger.add(lambda msg: messages.append(str(msg)))
        try:
            logger.bind(name="test").debug("debug message")
            assert any("debug message" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_setup_logging_verbose_takes_precedence(self) -> None:
        """Test verbose takes precedence over quiet when both set."""
        setup_logging(level="INFO", verbose=True, quiet=True)

        # Verbose wins, so SQLAlchemy echo is let through at INFO
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    def test_setup_logging_quiet_silences_libraries(self) -> None:
        """Quiet mode keeps library loggers at WARNING."""
        setup_logging(level="DEBUG", quiet=True)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Test file logging setup."""
        log_file = tmp_path / "test.log"
        setup_logging(level="INFO", log_file=log_file)

        bind_repo("octo-org/octo-repo").info("Test file message")
        logger.complete()

        assert log_file.exists()
        content = log_file.read_text()
        assert "Test file message" in content
        assert "octo-org/octo-repo" in content

    def test_setup_logging_sets_configured_flag(self) -> None:
        """Test that setup_logging sets the configured flag."""
        assert not is_configured()
        setup_logging(level="INFO")
        assert is_configured()


class TestConsoleFormat:
    """Tests for the console line format."""

    def test_console_line_includes_repo_and_sha(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Bound repo and sha context is rendered on console lines."""
        setup_logging(level="DEBUG")

        bind_commit("octo-org/octo-repo", "6dcb09b5b57875f334f61aebed695e2e4193db5e").info(
            "Staged"
        )

        err = capsys.readouterr().err
        assert "[octo-org/octo-repo]" in err
        assert "[6dcb09b5b578]" in err
        assert "Staged" in err

    def test_console_line_without_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Records without bound context still render."""
        setup_logging(level="DEBUG")

        get_logger("plain").info("No context here")

        err = capsys.readouterr().err
        assert "plain" in err
        assert "No context here" in err


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_intercept_stdlib_logging(self, captured: list[str]) -> None:
        """Test that stdlib logging is routed to loguru."""
        stdlib_logger = logging.getLogger("test_stdlib_intercept")
        stdlib_logger.warning("Hello from stdlib")

        # Should be captured by loguru
        assert any("Hello from stdlib" in msg for msg in captured)

    def test_sqlalchemy_logging_controlled(self) -> None:
        """Test SQLAlchemy logger level is controlled."""
        setup_logging(level="INFO")

        sa_logger = logging.getLogger("sqlalchemy.engine")
        # At INFO level, SA engine should be WARNING or higher
        assert sa_logger.level >= logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self, captured: list[str]) -> None:
        """Test that get_logger binds the module name."""
        get_logger("my_test_module").info("Test message")

        assert any("my_test_module" in msg for msg in captured)


class TestContextBinding:
    """Tests for context binding helpers."""

    def test_bind_repo(self, captured: list[str]) -> None:
        """Test bind_repo adds repo context."""
        bind_repo("octo-org/octo-repo").info("Test repo message")

        assert any("octo-org/octo-repo" in msg for msg in captured)

    def test_bind_commit_shortens_sha(self, captured: list[str]) -> None:
        """bind_commit adds repo and a 12-character sha."""
        bind_commit("octo-org/octo-repo", "6dcb09b5b57875f334f61aebed695e2e4193db5e").info(
            "Test commit message"
        )

        output = "".join(captured)
        assert "octo-org/octo-repo" in output
        assert "'sha': '6dcb09b5b578'" in output

    def test_log_context_manager(self, captured: list[str]) -> None:
        """Test LogContext context manager."""
        with LogContext(custom_key="custom_value"):
            logger.info("Inside context")
        logger.info("Outside context")

        assert "custom_value" in captured[0]
        assert "custom_value" not in captured[1]


class TestLogLevels:
    """Tests for log level handling."""

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_log_level_accepted(self, level: str) -> None:
        """Test that various log levels are accepted."""
        # Should not raise
        setup_logging(level=level)  # type: ignore[arg-type]
        assert is_configured()


class TestResetLogging:
    """Tests for reset_logging function."""

    def test_reset_logging_clears_configured(self) -> None:
        """Test that reset_logging clears the configured flag."""
        setup_logging(level="INFO")
        assert is_configured()

        reset_logging()
        assert not is_configured()
