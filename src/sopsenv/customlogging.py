"""Configures loguru for command line entrypoints.

Log records go to stderr so that stdout carries only the rendered report.
"""

import os
import sys

from loguru import logger

from sopsenv.constants import DEFAULT_LOG_LEVEL, ENV_SOPSENV_LOG_LEVEL

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> <level>{level: <8}</level> {name}:{line} - <level>{message}</level>"


def setup(level: str | None = None):
    """Replaces loguru's default handler with a stderr handler at the configured level."""
    level = (level or os.environ.get(ENV_SOPSENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=None)
