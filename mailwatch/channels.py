"""Logging setup: operational stderr logging plus the two outcome channels.

The results channel gets SUCESSO lines at INFO. The errors channel gets
FALHA/INDEFINIDO lines at ERROR, unrecognized-line warnings, and any
WARNING or above from the mailwatch package loggers.
"""

import logging
import os
import sys
from dataclasses import dataclass

from mailwatch.config import Config

LOG_FORMAT = "%(asctime)s [MAILWATCH] %(levelname)s %(message)s"
CHANNEL_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"

RESULTS_LOGGER = "mailwatch.results"
ERRORS_LOGGER = "mailwatch.errors"


@dataclass(frozen=True)
class Channels:
    results: logging.Logger
    errors: logging.Logger


def _reset(logger: logging.Logger):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(config: Config) -> Channels:
    """Configure handlers for the run and return the outcome channel loggers."""
    os.makedirs(config.output_dir, exist_ok=True)

    console_level = logging.WARNING if config.is_production else logging.INFO
    logging.basicConfig(level=console_level, format=LOG_FORMAT, stream=sys.stderr)

    channel_fmt = logging.Formatter(CHANNEL_FORMAT)

    results_file = logging.FileHandler(config.results_path, encoding="utf-8")
    results_file.setLevel(logging.INFO)
    results_file.setFormatter(channel_fmt)

    errors_file = logging.FileHandler(config.errors_path, encoding="utf-8")
    errors_file.setLevel(logging.WARNING)
    errors_file.setFormatter(channel_fmt)

    results = logging.getLogger(RESULTS_LOGGER)
    errors = logging.getLogger(ERRORS_LOGGER)
    for logger, handler in ((results, results_file), (errors, errors_file)):
        _reset(logger)
        logger.setLevel(logging.INFO)
        logger.propagate = False
        logger.addHandler(handler)
        if not config.is_production:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(console)

    # Operational warnings/errors (read failures, bad config) also land in the errors file
    package = logging.getLogger("mailwatch")
    _reset(package)
    package.addHandler(errors_file)

    return Channels(results=results, errors=errors)
