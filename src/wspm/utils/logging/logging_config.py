# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Logging configuration utilities for the workspace tooling.

This module provides centralized logging configuration and utilities,
including console and file handler management, log level configuration,
and command-specific logging setup.
"""

import logging
import os
import sys
from typing import Optional

# Default logging format
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
# Simple message-only format for regular console output
MESSAGE_ONLY_FORMAT = "%(message)s"
DEBUG_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def init_core_logging(debug: bool = False) -> logging.Logger:
    """
    Initialize core logging with basic configuration.

    Returns:
        logging.Logger: Configured core logger instance
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=MESSAGE_ONLY_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    logger = logging.getLogger(__name__)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = True

    return logger


def _get_console_handler() -> logging.StreamHandler:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            if handler.stream in (sys.stdout, sys.__stdout__):
                return handler

    console_handler = logging.StreamHandler(sys.stdout)
    root_logger.addHandler(console_handler)
    return console_handler


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Configure logging level based on verbose and debug flags.

    Args:
        verbose: Whether to display DEBUG messages without extra decoration
        debug: Whether to display DEBUG messages with level and logger name

    Note:
        By default, INFO level logs are shown on the console, which includes
        the output streamed from package manager scripts.
    """
    remove_log_handlers()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = _get_console_handler()
    if debug:
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        console_handler.setFormatter(logging.Formatter(MESSAGE_ONLY_FORMAT))


def remove_log_handlers() -> None:
    """
    Remove all file handlers from the root logger to avoid duplicates when reconfiguring.
    """
    root_logger = logging.getLogger()
    handlers_to_remove = [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]

    for handler in handlers_to_remove:
        root_logger.removeHandler(handler)
        handler.close()


def get_log_file_path(command: str, data_dir: str) -> str:
    """
    Get the path to a command's log file.

    Args:
        command: Command name
        data_dir: Data directory path

    Returns:
        Path to the log file
    """
    from wspm.utils.config import get_project_name

    return os.path.join(data_dir, "logs", f"{get_project_name()}_{command}.log")


def add_file_log_handler(command: str, data_dir: Optional[str] = None) -> str:
    """
    Add a file handler for logging to a command-specific log file.

    Args:
        command: The command name for the log file
        data_dir: Optional data directory path

    Returns:
        str: Path of the log file
    """
    from wspm.utils.config import setup_data_dir

    if data_dir is None:
        data_dir = setup_data_dir()
    os.makedirs(os.path.join(data_dir, "logs"), exist_ok=True)

    log_file = get_log_file_path(command, data_dir)

    file_handler = logging.FileHandler(log_file, mode="w")  # Overwrite on each run
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))

    logging.getLogger().addHandler(file_handler)
    return log_file


def suppress_third_party_loggers() -> None:
    """
    Suppress noisy third-party library loggers.
    """
    for logger_name in ["asyncio", "concurrent.futures"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def setup_command_logging(
    command: str, verbose: bool = False, debug: bool = False, data_dir: Optional[str] = None
) -> str:
    """
    Set up logging for a specific command with both console and file output.

    This is the recommended function for all CLI command logging setup.

    Args:
        command: Command name
        verbose: Whether to enable verbose console output
        debug: Whether to enable debug console output
        data_dir: Optional data directory path

    Returns:
        str: Path of the command's log file
    """
    init_core_logging()
    configure_logging(verbose=verbose, debug=debug)
    log_file = add_file_log_handler(command, data_dir)
    suppress_third_party_loggers()

    logging.getLogger(__name__).debug(f"Logging {command} to {log_file}")
    return log_file


def cleanup_logging() -> None:
    """
    Clean up logging handlers on application exit.
    """
    remove_log_handlers()
