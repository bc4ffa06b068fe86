"""CLI configuration overrides for runtime tunables (index URL, timeouts, logging).

Extracted from serverpin.py to keep the entrypoint slim. Applies CLI
overrides with highest precedence and never raises to avoid breaking the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from constants import Constants
from common.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def apply_cli_overrides(args: Any) -> None:
    """Apply CLI overrides for the snapshot index URL and request timeout.

    Invalid values are logged and ignored so the CLI keeps running on defaults.
    """
    index_url = getattr(args, "INDEX_URL", None)
    if index_url:
        Constants.SNAPSHOT_INDEX_URL = index_url

    timeout = getattr(args, "TIMEOUT", None)
    if timeout is not None:
        try:
            value = float(timeout)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid --timeout value: %s", timeout)
        else:
            if value > 0:
                Constants.REQUEST_TIMEOUT = value
            else:
                logger.warning("Ignoring non-positive --timeout value: %s", timeout)


def setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()

    configure_logging()

    level_name = str(getattr(args, "LOG_LEVEL", None) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    if isinstance(level_value, int):
        logging.getLogger().setLevel(level_value)

    # Add file handler if --logfile specified
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)
