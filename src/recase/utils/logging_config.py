# recase/utils/logging_config.py
"""recase.utils.logging_config
=============================

This module provides the logging configuration utility for recase.
It defines global logger objects and a single setup function, `setup_logging`,
which configures logging handlers and log levels from a configuration
dictionary.

Features:
    - Rotating file logging for general events (recase.log by default).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional per-region tracing (regiontrace.log) enabled via the
      RECASE_REGIONTRACE environment variable.
    - Automatic creation of log directories, with fallback to the system temp
      directory on failure.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs
      when called multiple times.
    - Never raises exceptions; errors are reported to stderr and logging
      continues with best effort.

Usage:
    Embedders call `setup_logging()` once at startup, optionally passing the
    configuration returned by `recase.utils.utils.load_config()`.

    >>> from recase.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"console_level": "INFO"}})

Globals:
    logger: Main logger ("recase").
    REGION_LOGGER: Logger for per-region transform traces ("recase.regions").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import-time, unconfigured until ``setup_logging()`` runs.
logger = logging.getLogger("recase")
REGION_LOGGER = logging.getLogger("recase.regions")

REGION_TRACE_ENV = "RECASE_REGIONTRACE"


def _ensure_log_dir(filename: str, fallback_name: str) -> str:
    """Creates the directory of `filename`; returns a temp-dir path on failure."""
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(
                f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr
            )
            filename = os.path.join(tempfile.gettempdir(), fallback_name)
            print(f"Logging to temporary file: '{filename}'", file=sys.stderr)
    return filename


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler: rotating log file capturing everything from the
       configured `file_level` (default DEBUG) upward.
    2. Console handler: optional `stderr` output whose threshold is
       `console_level` (default WARNING).
    3. Error-file handler: optional rotating error.log that stores only
       ERROR and CRITICAL events.
    4. Region-trace handler: optional rotating regiontrace.log enabled when
       ``RECASE_REGIONTRACE`` is ``1/true/yes``; attached to the
       ``recase.regions`` logger, which does not propagate.

    Existing handlers on the root logger are cleared to avoid duplicate
    records when the function is invoked multiple times (e.g. in unit tests).

    Args:
        config (dict | None): Optional configuration blob. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are:

            - ``log_file`` (str): Path of the main log. Default: ``"recase.log"``.
            - ``file_level`` (str): Level for the main log. Default: ``"DEBUG"``.
            - ``console_level`` (str): Level for console output.
              Default: ``"WARNING"``.
            - ``log_to_console`` (bool): Enable the console handler.
              Default: ``True``.
            - ``separate_error_log`` (bool): Whether to create error.log.
              Default: ``False``.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = _ensure_log_dir(
        logging_config.get("log_file", "recase.log"), "recase.log"
    )
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except Exception as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(console_log_level)

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = _ensure_log_dir("error.log", "recase-error.log")
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename,
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except Exception as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []

    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    if error_file_handler:
        root_logger.addHandler(error_file_handler)

    root_logger.setLevel(log_file_level)

    # Region Trace Logger
    region_logger = logging.getLogger("recase.regions")
    region_logger.propagate = False
    region_logger.setLevel(logging.DEBUG)
    region_logger.handlers = []
    region_logger.disabled = False

    if os.environ.get(REGION_TRACE_ENV, "").lower() in {"1", "true", "yes"}:
        try:
            region_trace_handler = logging.handlers.RotatingFileHandler(
                "regiontrace.log",
                maxBytes=1 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            region_trace_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(message)s")
            )
            region_logger.addHandler(region_trace_handler)
            logging.info("Region tracing enabled, logging to 'regiontrace.log'.")
        except Exception as e_trace:
            logging.error(
                f"Failed to set up region trace logging: {e_trace}", exc_info=True
            )
            region_logger.disabled = True
    else:
        region_logger.addHandler(logging.NullHandler())
        region_logger.disabled = True
        logging.debug("Region tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
    if error_file_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")
