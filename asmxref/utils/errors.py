"""Custom exceptions and exit codes for asmxref.

Scanning is fail-soft (grep logs and returns partial results), so the
exceptions here cover the fail-loud paths: configuration problems surfaced
by the CLI and positions that do not address a symbol.
"""

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes reported by the CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_NOT_FOUND = 2
    RENAMING_DISABLED = 3
    INVALID_POSITION = 4


class AsmXrefError(Exception):
    """Base exception for asmxref errors.

    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class ConfigNotFoundError(AsmXrefError):
    """No workspace configuration covers the document.

    Raised when:
    - The document lies outside the configured root folder
    - No root folder could be resolved at all
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CONFIG_NOT_FOUND


class RenamingDisabledError(AsmXrefError):
    """Renaming is switched off for the workspace (ENABLE_RENAMING=false)."""

    _default_exit_code: ClassVar[ExitCode] = ExitCode.RENAMING_DISABLED


class InvalidPositionError(AsmXrefError):
    """The requested position does not address a symbol.

    Raised when:
    - The line is outside the document
    - There is no word at the column
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.INVALID_POSITION

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        exit_code: ExitCode | None = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line + 1}, column {column + 1})"
        super().__init__(message, exit_code)


__all__ = [
    "ExitCode",
    "AsmXrefError",
    "ConfigNotFoundError",
    "RenamingDisabledError",
    "InvalidPositionError",
]
