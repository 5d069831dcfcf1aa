"""Logging configuration for asmxref.

Logging is off unless switched on through the environment, so library
callers (editor hosts, the CLI) never get unexpected output.

Environment Variables:
    ASMXREF_LOG: Set to "true" to enable logging (default: "false")
    ASMXREF_LOG_FILE: Path to log file (default: ~/.asmxref.log)
"""

import logging
import os
from pathlib import Path

LOG_ENABLED = os.environ.get("ASMXREF_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("ASMXREF_LOG_FILE", str(Path.home() / ".asmxref.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure logging based on environment variables.

    Creates a logger that writes to the configured log file when
    ASMXREF_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("asmxref")
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance, creating it if necessary."""
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    This is the logging function used throughout the package.
    Messages are only written to the log file if ASMXREF_LOG=true.

    Args:
        message: Message to log
    """
    get_logger().info(message)


def log_exception(context: str, exc: BaseException) -> None:
    """Log a caught exception together with where it was caught.

    Args:
        context: Short description of the failed operation
        exc: The caught exception
    """
    get_logger().info(f"{context}: {type(exc).__name__}: {exc}")


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
    "log_exception",
]
