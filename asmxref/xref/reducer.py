"""Reduce grep hits to the references of one symbol.

Grep only finds equal names. The reduction resolves the label and module
label of the searched symbol (the origin) and of every hit, and keeps the
hits whose qualified identity is compatible with the origin's.

The comparison is a heuristic, not a resolver. In exact mode a hit is kept
if any of these hold::

    hit.label        == origin.label
    hit.module_label == origin.module_label
    hit.module_label == origin.label
    hit.label        == origin.module_label

The cross comparisons let an unqualified local reference match a qualified
search and the other way round. They also accept collisions: a label
``init`` in module ``sound`` matches a search for ``init`` in module
``audio`` because the plain labels are equal. The rule is kept in
:class:`ExactCrossMatcher` so another strategy can be passed in.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Protocol

from asmxref.utils.errors import InvalidPositionError
from asmxref.utils.logging import log_message
from asmxref.xref.grep_engine import GrepLocation
from asmxref.xref.line_source import get_lines_for_file
from asmxref.xref.modules import (
    LABEL_CHARS,
    FileInfo,
    QualifiedLabel,
    get_label_and_module_label,
)
from asmxref.xref.patterns import SearchPattern, fuzzy_pattern
from asmxref.xref.types import LiveDocument, Position


class LabelMatcher(Protocol):
    """Decides whether a hit refers to the origin symbol."""

    def matches(self, candidate: QualifiedLabel) -> bool: ...


MatcherFactory = Callable[[QualifiedLabel], LabelMatcher]


class ExactCrossMatcher:
    """Four-way equality of label and module label (see module docstring)."""

    def __init__(self, origin: QualifiedLabel) -> None:
        self.origin = origin

    def matches(self, candidate: QualifiedLabel) -> bool:
        origin = self.origin
        return (
            candidate.label == origin.label
            or candidate.module_label == origin.module_label
            or candidate.module_label == origin.label
            or candidate.label == origin.module_label
        )


class FuzzyCrossMatcher:
    """The same four-way structure with fuzzy patterns of the origin.

    Used for completion, where the typed text may be incomplete.
    """

    def __init__(self, origin: QualifiedLabel) -> None:
        self.origin = origin
        self._label_re: re.Pattern[str] = fuzzy_pattern(origin.label)
        self._module_label_re: re.Pattern[str] = fuzzy_pattern(origin.module_label)

    def matches(self, candidate: QualifiedLabel) -> bool:
        return bool(
            self._label_re.search(candidate.label)
            or self._module_label_re.search(candidate.module_label)
            or self._label_re.search(candidate.module_label)
            or self._module_label_re.search(candidate.label)
        )


def reduce_locations(
    label_patterns: Sequence[SearchPattern],
    locations: Sequence[GrepLocation],
    origin_path: Path,
    origin_position: Position,
    *,
    remove_own_location: bool = True,
    check_full_name: bool = True,
    label_chars: str = LABEL_CHARS,
    documents: Sequence[LiveDocument] = (),
    matcher: MatcherFactory | None = None,
    cancel_event: threading.Event | None = None,
) -> list[GrepLocation]:
    """Keep the locations that refer to the symbol at the origin.

    Every file is read at most once per call; the lines and nesting events
    are cached for the duration of the call only.

    Args:
        label_patterns: Label definition patterns, used to qualify local labels.
        locations: Grep hits.
        origin_path: File of the searched symbol.
        origin_position: Position of the searched symbol.
        remove_own_location: Drop hits on the origin's line.
        check_full_name: Exact comparison (True) or fuzzy comparison (False).
        label_chars: Characters a label consists of.
        documents: Open documents that override files on disk.
        matcher: Factory of the comparison strategy; overrides ``check_full_name``.
        cancel_event: If set, the reduction stops and returns the hits
            checked so far.

    Returns:
        The kept locations in their original order, with ``label`` and
        ``module_label`` set.

    Raises:
        InvalidPositionError: If the origin position is not in its file.
    """
    origin_path = Path(origin_path)
    files_info: dict[Path, FileInfo] = {}

    origin_info = FileInfo.from_lines(get_lines_for_file(origin_path, documents))
    files_info[origin_path] = origin_info
    origin = get_label_and_module_label(
        label_patterns,
        origin_info,
        origin_position.line,
        origin_position.character,
        label_chars,
    )

    factory = matcher or (ExactCrossMatcher if check_full_name else FuzzyCrossMatcher)
    predicate = factory(origin)

    reduced = list(locations)
    # Backwards, so deleting does not shift the entries still to visit.
    for i in range(len(reduced) - 1, -1, -1):
        if cancel_event is not None and cancel_event.is_set():
            log_message(f"reduce_locations: cancelled with {i + 1} hits unchecked")
            return reduced[i + 1 :]

        loc = reduced[i]
        file_info = files_info.get(loc.path)
        if file_info is None:
            file_info = FileInfo.from_lines(get_lines_for_file(loc.path, documents))
            files_info[loc.path] = file_info

        pos = loc.range.start
        if remove_own_location and pos.line == origin_position.line and loc.path == origin_path:
            del reduced[i]
            continue

        try:
            candidate = get_label_and_module_label(
                label_patterns, file_info, pos.line, pos.character, label_chars
            )
        except InvalidPositionError as exc:
            # The file shrank since it was grepped.
            log_message(f"reduce_locations: dropping {loc.path}: {exc}")
            del reduced[i]
            continue

        if predicate.matches(candidate):
            reduced[i] = replace(loc, label=candidate.label, module_label=candidate.module_label)
        else:
            del reduced[i]

    log_message(
        f"reduce_locations: {origin.module_label!r} kept {len(reduced)} of {len(locations)} hits"
    )
    return reduced


__all__ = [
    "ExactCrossMatcher",
    "FuzzyCrossMatcher",
    "LabelMatcher",
    "MatcherFactory",
    "reduce_locations",
]
