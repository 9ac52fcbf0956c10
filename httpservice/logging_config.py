"""
Logging configuration for httpservice

Provides structured logging with optional file output and console output.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path


class ServiceLogger:
    """Centralized logger for the package"""

    def __init__(
        self,
        name: str = "httpservice",
        log_file: Path | None = None,
        console_output: bool = True,
        console_level: int = logging.INFO,
    ):
        """
        Initialize logger

        Args:
            name: Logger name (usually "httpservice" for the root package logger)
            log_file: Path to log file (optional)
            console_output: Whether to print to console
            console_level: Minimum level shown on the console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # Clear existing handlers
        self.logger.handlers = []

        # Format: timestamp - module - level - message
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(console_level)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance"""
        return self.logger


def setup_logging(log_file: Path | None = None, verbose: bool = False) -> logging.Logger:
    """
    Setup logging for a CLI run

    Args:
        log_file: Optional log file receiving DEBUG output
        verbose: Show DEBUG output on the console as well

    Returns:
        Configured logger instance
    """
    logger_wrapper = ServiceLogger(
        name="httpservice",
        log_file=log_file,
        console_output=True,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )

    logger = logger_wrapper.get_logger()
    logger.debug(f"httpservice logging started: {datetime.now().isoformat()}")
    if log_file:
        logger.debug(f"Log file: {log_file}")

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get logger for a specific module

    Args:
        module_name: Name of the module (e.g., 'service', 'http_client')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"httpservice.{module_name}")
