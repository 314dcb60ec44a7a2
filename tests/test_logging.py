"""Tests for gatekeeper.logging (GatekeeperLogging, level/format from config)."""

import io
import logging

from gatekeeper.config import LoggingConfig
from gatekeeper.logging import (
    DEFAULT_FORMAT,
    LEVELS,
    GatekeeperLogging,
    _resolve_level,
    report_failure,
)


class TestResolveLevel:
    """_resolve_level maps level names to logging constants."""

    def test_known_levels(self) -> None:
        for name, value in LEVELS.items():
            assert _resolve_level(name) == value

    def test_lowercase_and_whitespace(self) -> None:
        assert _resolve_level("  debug ") == logging.DEBUG

    def test_unknown_level_returns_info(self) -> None:
        assert _resolve_level("TRACE") == logging.INFO
        assert _resolve_level("") == logging.INFO


class TestGatekeeperLogging:
    """GatekeeperLogging applies LoggingConfig to the root logger."""

    def test_setup_sets_root_level(self) -> None:
        GatekeeperLogging(LoggingConfig(level="WARNING", format="%(message)s")).setup()
        assert logging.root.level == logging.WARNING

    def test_debug_flag_forces_debug(self) -> None:
        GatekeeperLogging(LoggingConfig(level="ERROR", format="%(message)s"), debug=True).setup()
        assert logging.root.level == logging.DEBUG

    def test_empty_format_uses_default(self) -> None:
        GatekeeperLogging(LoggingConfig(level="INFO", format="")).setup()
        assert logging.root.handlers[0].formatter._fmt == DEFAULT_FORMAT


def test_report_failure_writes_annotation() -> None:
    out = io.StringIO()
    report_failure("Please fill out the credits information", stream=out)
    assert out.getvalue() == "::error::Please fill out the credits information\n"


def test_report_failure_escapes_newlines() -> None:
    out = io.StringIO()
    report_failure("line one\nline two", stream=out)
    assert out.getvalue() == "::error::line one%0Aline two\n"
