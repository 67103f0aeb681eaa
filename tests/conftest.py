"""Shared pytest fixtures for the mailwatch test suite."""

import io
import logging
from datetime import datetime, timezone

import pytest

from mailwatch.channels import Channels
from mailwatch.config import Config
from mailwatch.context import MonitorContext, build_context

FIXED_TIME = datetime(2024, 9, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def channels() -> Channels:
    """Propagating loggers so caplog sees every channel write."""
    results = logging.getLogger("tests.mailwatch.results")
    errors = logging.getLogger("tests.mailwatch.errors")
    for logger in (results, errors):
        logger.setLevel(logging.DEBUG)
        logger.propagate = True
    return Channels(results=results, errors=errors)


@pytest.fixture()
def console() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def ctx(tmp_path, channels, console) -> MonitorContext:
    """An isolated context per test, writing its report to an in-memory stream."""
    config = Config(output_dir=str(tmp_path / "parsed_logs"), clear_console=False)
    return build_context(config, channels, stream=console, time_func=lambda: FIXED_TIME)
