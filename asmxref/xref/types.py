"""Value types shared by the cross-reference engine and its hosts.

Lines and characters are 0-based everywhere; only the CLI converts to and
from 1-based numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class LanguageId(str, Enum):
    """The two kinds of source handled: assembler sources and list files."""

    ASM_COLLECTION = "asm-collection"
    ASM_LIST_FILE = "asm-list-file"


@dataclass(frozen=True, order=True)
class Position:
    """A (line, character) position, ordered line first."""

    line: int
    character: int


@dataclass(frozen=True, order=True)
class Range:
    """A half-open range between two positions."""

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> Range:
        return cls(Position(line, start), Position(line, end))


@dataclass(frozen=True)
class TextEdit:
    """Replace the text covered by ``range`` with ``new_text``."""

    range: Range
    new_text: str


@dataclass(frozen=True)
class LiveDocument:
    """An open document whose in-memory text overrides the file on disk.

    Attributes:
        path: Absolute path of the document.
        language_id: Language of the document (see LanguageId).
        text: Complete current text.
        is_dirty: True if the text differs from the file on disk.
    """

    path: Path
    language_id: LanguageId
    text: str
    is_dirty: bool = True


@dataclass
class WorkspaceEdit:
    """Text edits grouped per file, to be applied by the host."""

    changes: dict[Path, list[TextEdit]] = field(default_factory=dict)

    def replace(self, path: Path, range_: Range, new_text: str) -> None:
        self.changes.setdefault(path, []).append(TextEdit(range_, new_text))

    @property
    def size(self) -> int:
        """Total number of text edits."""
        return sum(len(edits) for edits in self.changes.values())

    def __bool__(self) -> bool:
        return self.size > 0


__all__ = [
    "LanguageId",
    "LiveDocument",
    "Position",
    "Range",
    "TextEdit",
    "WorkspaceEdit",
]
