"""Tests for error handling across components."""

import logging

import pytest

from node_tainter.exceptions import (
    ConfigurationError,
    KubernetesError,
    NodeNotFoundError,
    NodeTainterError,
    NodeWriteConflictError,
    NotificationError,
    ScriptError,
    ScriptExecutionError,
    ScriptNotFoundError,
    ScriptTimeoutError,
    UnknownClusterStateError,
)
from node_tainter.logging_config import get_logger, parse_level, setup_logging


def test_custom_exception_with_details():
    """Test that custom exceptions support message and details."""
    error = KubernetesError("Failed to load kubeconfig", "Pass --kubeconfig")

    assert error.message == "Failed to load kubeconfig"
    assert error.details == "Pass --kubeconfig"
    assert "Failed to load kubeconfig" in str(error)
    assert "Pass --kubeconfig" in str(error)
    assert "Details:" in error.format_message()


def test_custom_exception_without_details():
    """Test that custom exceptions work without details."""
    error = ConfigurationError("Invalid policy")

    assert error.message == "Invalid policy"
    assert error.details is None
    assert str(error) == "Invalid policy"


def test_exception_hierarchy():
    """Test that all custom exceptions inherit from NodeTainterError."""
    assert issubclass(ConfigurationError, NodeTainterError)
    assert issubclass(ScriptTimeoutError, ScriptError)
    assert issubclass(ScriptExecutionError, ScriptError)
    assert issubclass(ScriptNotFoundError, ScriptError)
    assert issubclass(ScriptNotFoundError, ConfigurationError)
    assert issubclass(UnknownClusterStateError, KubernetesError)
    assert issubclass(NodeNotFoundError, UnknownClusterStateError)
    assert issubclass(NodeWriteConflictError, KubernetesError)
    assert issubclass(NotificationError, NodeTainterError)


def test_script_execution_error_carries_output():
    """Test that a failed script keeps its exit code and output."""
    error = ScriptExecutionError(
        "Script failed with exit code 2: /opt/check.sh",
        "disk full",
        script_path="/opt/check.sh",
        returncode=2,
        output="disk full\n",
    )

    assert error.script_path == "/opt/check.sh"
    assert error.returncode == 2
    assert error.output == "disk full\n"
    assert "disk full" in str(error)


def test_logging_setup():
    """Test that logging can be configured."""
    setup_logging(level="INFO", verbose=False)

    logger = get_logger("test")
    assert logger is not None
    assert logger.name == "test"


def test_logging_with_log_file(tmp_path):
    """Test that a log file receives messages."""
    log_file = tmp_path / "logs" / "node-tainter.log"
    setup_logging(verbose=True, log_file=log_file)

    get_logger("test").debug("This is a debug message")

    assert log_file.exists()
    assert "This is a debug message" in log_file.read_text()
    setup_logging()


def test_parse_level_is_case_insensitive():
    assert parse_level("warning") == logging.WARNING
    assert parse_level(" DEBUG ") == logging.DEBUG


def test_parse_level_rejects_unknown_name():
    with pytest.raises(ConfigurationError) as exc_info:
        parse_level("verbose")

    assert "verbose" in exc_info.value.message
    assert "WARNING" in exc_info.value.details


def test_console_follows_configured_level():
    """Info messages reach the console unless a stricter level is set."""
    setup_logging(level="INFO")
    console_handler = logging.getLogger().handlers[0]
    assert console_handler.level == logging.INFO

    setup_logging(level="ERROR")
    assert logging.getLogger().handlers[0].level == logging.ERROR
    setup_logging()


def test_unwritable_log_file_keeps_console(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    setup_logging(log_file=blocker / "node-tainter.log")

    assert len(logging.getLogger().handlers) == 1
    setup_logging()
