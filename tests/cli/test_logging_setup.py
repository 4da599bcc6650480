"""Tests for CLI logging configuration."""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner
from rich.logging import RichHandler

from statescope.cli.logging_setup import configure_logging, verbosity_level
from statescope.cli.main import cli


class TestConfigureLogging:
    """Tests for the stderr Rich handler."""

    @pytest.mark.parametrize(
        ("count", "level"),
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_verbosity_levels(self, count: int, level: int) -> None:
        assert verbosity_level(count) == level

    def test_single_handler_after_repeated_calls(self) -> None:
        configure_logging(1)
        logger = configure_logging(2)
        assert logger.name == "statescope"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_verbose_flag_keeps_json_clean(self, write_state, mixed_state) -> None:
        result = CliRunner().invoke(
            cli, ["-vv", "graph", str(write_state(mixed_state)), "--format", "json"],
        )
        assert result.exit_code == 0
        assert result.stdout.lstrip().startswith("{")
