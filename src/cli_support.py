"""Helpers shared by the csv_translator and chunk_translator commands."""
import logging
import os
from typing import Callable, Optional

from src.app_config import AppConfig, load_app_config
from src.errors import LocalizationError, TokenMismatchError
from src.logging_config import LOGGER_NAME

EXIT_OK = 0
EXIT_FAILURE = 1

logger = logging.getLogger(LOGGER_NAME)


def validate_paths(*paths: str) -> None:
    """
    Check that every input file exists and is readable before any work starts.

    Raises:
        FileNotFoundError: If a file is missing.
        PermissionError: If a file cannot be read.
    """
    for path in paths:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Input file '{path}' not found.")
        if not os.access(path, os.R_OK):
            raise PermissionError(f"Input file '{path}' is not readable.")


def run_command(command: Callable[[AppConfig], None], config: Optional[AppConfig]) -> int:
    """
    Run a command and turn its outcome into a process exit status.

    Known failures are reported without a traceback; anything else is logged
    with one. Either way the status is non-zero.
    """
    try:
        if config is None:
            config = load_app_config()
    except (ValueError, TypeError) as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_FAILURE

    try:
        command(config)
    except TokenMismatchError as e:
        logger.error("Value verification failed for %d row(s):", len(e.row_mismatches))
        for row_mismatch in e.row_mismatches:
            for line in row_mismatch.describe().splitlines():
                logger.error("%s", line)
        return EXIT_FAILURE
    except LocalizationError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("File operation failed: %s", e)
        return EXIT_FAILURE
    except Exception:
        logger.exception("An unexpected error occurred during execution.")
        return EXIT_FAILURE
    return EXIT_OK
