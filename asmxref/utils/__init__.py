"""Shared utilities: logging, errors, console output."""

from asmxref.utils.errors import (
    AsmXrefError,
    ConfigNotFoundError,
    ExitCode,
    InvalidPositionError,
    RenamingDisabledError,
)
from asmxref.utils.logging import log_exception, log_message

__all__ = [
    "AsmXrefError",
    "ConfigNotFoundError",
    "ExitCode",
    "InvalidPositionError",
    "RenamingDisabledError",
    "log_exception",
    "log_message",
]
