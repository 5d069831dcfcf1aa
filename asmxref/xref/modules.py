"""Module and struct nesting, and label qualification.

A label's full name depends on the MODULE and STRUCT blocks around it::

        MODULE audio
        MODULE samples
    init:               ; audio.samples.init
        ENDMODULE
        ENDMODULE

There is no symbol table. The nesting is recovered by scanning the file
from its first line: an open keyword pushes its name, a close keyword pops
whatever is on top of the stack (nothing if it is empty). Names are not
checked, malformed nesting simply yields a different stack.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from asmxref.utils.errors import InvalidPositionError
from asmxref.xref.comments import strip_all_comments
from asmxref.xref.patterns import LABEL_GROUP, MODULE_CLOSE, MODULE_OPEN, SearchPattern

# Characters a complete label consists of. Renaming uses r"\w" to get the
# single dot-free part under the cursor.
LABEL_CHARS = r"[\w.]"

GLOBAL_MARKER = "@"


@dataclass(frozen=True)
class NestingEvent:
    """A MODULE/STRUCT opening (with its name) or closing on a line."""

    line: int
    opens: bool
    name: str = ""


@dataclass(frozen=True)
class QualifiedLabel:
    """A label as written and its module-qualified form."""

    label: str
    module_label: str


@dataclass
class FileInfo:
    """The lines of a file and its nesting events, computed once per file."""

    lines: list[str]
    events: list[NestingEvent] = field(default_factory=list)

    @classmethod
    def from_lines(cls, lines: list[str]) -> FileInfo:
        return cls(lines=lines, events=get_module_file_info(lines))

    def module_at(self, line: int) -> str:
        """The dot-joined names of the modules open at ``line``.

        Events on ``line`` itself count, like ``get_module(lines, line + 1)``.
        """
        stack: list[str] = []
        for event in self.events:
            if event.line > line:
                break
            if event.opens:
                stack.append(event.name)
            elif stack:
                stack.pop()
        return ".".join(stack)


def _scan_events(lines: Sequence[str], up_to: int) -> list[NestingEvent]:
    stripped = list(lines[:up_to])
    strip_all_comments(stripped)
    events: list[NestingEvent] = []
    for row, line in enumerate(stripped):
        match = MODULE_OPEN.match(line)
        if match:
            events.append(NestingEvent(row, True, match.group("name")))
            continue
        if MODULE_CLOSE.match(line):
            events.append(NestingEvent(row, False))
    return events


def get_module(lines: Sequence[str], up_to: int) -> str:
    """Return the module label valid after the lines ``0 .. up_to - 1``.

    Args:
        lines: The file lines.
        up_to: Exclusive line bound of the scan.

    Returns:
        The open module/struct names joined by dots, e.g. ``"audio.samples"``,
        or ``""`` outside of any module.
    """
    modules: list[str] = []
    for event in _scan_events(lines, up_to):
        if event.opens:
            modules.append(event.name)
        elif modules:
            modules.pop()
    return ".".join(modules)


def get_module_file_info(lines: Sequence[str]) -> list[NestingEvent]:
    """Return all nesting events of a file in line order."""
    return _scan_events(lines, len(lines))


def get_complete_label(line: str, column: int, label_chars: str = LABEL_CHARS) -> tuple[str, str]:
    """Return the label around ``column`` and the text in front of it.

    Starting at ``column`` the label is extended to the left and to the
    right as long as the characters match ``label_chars``.
    """
    char_re = re.compile(label_chars)
    start = min(column, len(line))
    while start > 0 and char_re.fullmatch(line[start - 1]):
        start -= 1
    end = min(column, len(line))
    while end < len(line) and char_re.fullmatch(line[end]):
        end += 1
    return line[start:end], line[:start]


def word_at(lines: Sequence[str], line: int, column: int) -> str:
    """Return the word (letters, digits, underscore) at a position.

    Raises:
        InvalidPositionError: If the line does not exist.
    """
    if not 0 <= line < len(lines):
        raise InvalidPositionError("Line outside of document", line, column)
    word, _ = get_complete_label(lines[line], column, r"\w")
    return word


def get_non_local_label(label_patterns: Sequence[SearchPattern], lines: Sequence[str], line: int) -> str:
    """Return the nearest label definition at or above ``line`` not starting with a dot."""
    for row in range(min(line, len(lines) - 1), -1, -1):
        for pattern in label_patterns:
            match = pattern.regex.search(lines[row])
            if match is None:
                continue
            name = match.group(LABEL_GROUP)
            if not name.startswith("."):
                return name
    return ""


def get_label_and_module_label(
    label_patterns: Sequence[SearchPattern],
    file_info: FileInfo,
    line: int,
    column: int,
    label_chars: str = LABEL_CHARS,
) -> QualifiedLabel:
    """Return the label at a position and its module-qualified form.

    A local label (``.loop``) is prefixed with the enclosing non-local
    label (``main.loop``). A label marked global with ``@`` is not
    qualified by its modules.

    Raises:
        InvalidPositionError: If ``line`` is not a line of the file.
    """
    if not 0 <= line < len(file_info.lines):
        raise InvalidPositionError("Line outside of document", line, column)

    label, pre_string = get_complete_label(file_info.lines[line], column, label_chars)
    if label.startswith("."):
        label = get_non_local_label(label_patterns, file_info.lines, line) + label

    module = file_info.module_at(line)
    if module and not pre_string.endswith(GLOBAL_MARKER):
        module_label = f"{module}.{label}"
    else:
        module_label = label
    return QualifiedLabel(label=label, module_label=module_label)


__all__ = [
    "FileInfo",
    "LABEL_CHARS",
    "NestingEvent",
    "QualifiedLabel",
    "get_complete_label",
    "get_label_and_module_label",
    "get_module",
    "get_module_file_info",
    "get_non_local_label",
    "word_at",
]
