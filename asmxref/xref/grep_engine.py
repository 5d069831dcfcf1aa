"""Regex search across the files of a project.

The search is purely textual: every file matching the include glob below
the root folder is scanned line by line after its comments have been
removed. An open document with unsaved changes is searched instead of its
file on disk.

Grep is fail-soft. Any exception while enumerating or scanning files is
logged and the matches collected up to that point are returned.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from asmxref.config.settings import SearchConfig
from asmxref.host.protocol import WorkspaceHost
from asmxref.utils.logging import log_exception, log_message
from asmxref.xref.comments import strip_all_comments
from asmxref.xref.line_source import find_live_document, read_text
from asmxref.xref.modules import get_complete_label
from asmxref.xref.patterns import SearchPattern
from asmxref.xref.types import Range


@dataclass(frozen=True)
class GrepMatch:
    """A single search hit.

    Columns refer to the comment-stripped line. ``start`` lies behind the
    pattern's prefix groups, ``end`` is the end of the whole match.
    """

    path: Path | None
    line: int
    start: int
    end: int
    line_contents: str
    match: re.Match[str] = field(compare=False, repr=False)


@dataclass
class GrepLocation:
    """A search hit addressed by file and range, plus its qualification.

    Attributes:
        path: The file.
        range: Range of the hit on its line.
        match: The underlying hit.
        symbol: The complete label text at the start of the hit.
        label: The resolved label, set by the reduction.
        module_label: The resolved module-qualified label, set by the reduction.
    """

    path: Path
    range: Range
    match: GrepMatch
    symbol: str = ""
    label: str | None = None
    module_label: str | None = None

    @classmethod
    def from_match(cls, match: GrepMatch) -> GrepLocation:
        assert match.path is not None
        symbol, _ = get_complete_label(match.line_contents, match.start)
        return cls(
            path=match.path,
            range=Range.on_line(match.line, match.start, match.end),
            match=match,
            symbol=symbol,
        )


def location_key(loc: GrepLocation) -> tuple[str, int, int]:
    """Identity of a hit: file, line and start column."""
    return (str(loc.path), loc.match.line, loc.match.start)


def remove_duplicates(
    locations: Iterable[GrepLocation],
    key: Callable[[GrepLocation], Hashable] = location_key,
) -> list[GrepLocation]:
    """Remove locations with equal keys.

    The order of first occurrence is kept, the last location of a key wins.
    """
    unique: dict[Hashable, GrepLocation] = {}
    for loc in locations:
        unique[key(loc)] = loc
    return list(unique.values())


def _scan_lines(
    lines: Sequence[str],
    pattern: SearchPattern,
    path: Path | None,
    *,
    skip_empty: bool,
) -> list[GrepMatch]:
    matches: list[GrepMatch] = []
    for index, line in enumerate(lines):
        if skip_empty and not line:
            continue
        for match in pattern.iter_matches(line):
            matches.append(
                GrepMatch(
                    path=path,
                    line=index,
                    start=pattern.start_of(match),
                    end=match.end(),
                    line_contents=line,
                    match=match,
                )
            )
    return matches


def grep_lines(lines: Sequence[str], pattern: SearchPattern) -> list[GrepMatch]:
    """Search the lines of a single document.

    The lines are not modified, comments are stripped from a copy.
    The returned matches carry no path.
    """
    stripped = list(lines)
    strip_all_comments(stripped)
    return _scan_lines(stripped, pattern, None, skip_empty=False)


def grep_lines_multiple(lines: Sequence[str], patterns: Sequence[SearchPattern]) -> list[GrepMatch]:
    """Search a single document for several patterns, results concatenated."""
    matches: list[GrepMatch] = []
    for pattern in patterns:
        matches.extend(grep_lines(lines, pattern))
    return matches


def grep(
    pattern: SearchPattern,
    config: SearchConfig,
    host: WorkspaceHost,
    *,
    cancel_event: threading.Event | None = None,
) -> list[GrepLocation]:
    """Search all project files for ``pattern``.

    Args:
        pattern: The search pattern.
        config: Root folder, language and globs of the search.
        host: Provides the file list and the open documents.
        cancel_event: If set, the search stops before the next file.

    Returns:
        The hits in file discovery order, within a file by line and column.
    """
    all_matches: dict[Path, list[GrepMatch]] = {}
    files_searched = 0

    try:
        paths = host.find(config.include_glob, config.exclude_glob)
        docs = [
            doc
            for doc in host.open_dirty_documents()
            if doc.is_dirty and doc.language_id == config.language_id
        ]

        for path in paths:
            if cancel_event is not None and cancel_event.is_set():
                log_message(f"grep: cancelled after {files_searched} files")
                break
            if not config.contains(path):
                continue

            doc = find_live_document(path, docs)
            if doc is not None:
                all_matches[path] = [
                    replace(m, path=path) for m in grep_lines(doc.text.split("\n"), pattern)
                ]
            else:
                lines = read_text(path).split("\n")
                strip_all_comments(lines)
                file_matches = _scan_lines(lines, pattern, path, skip_empty=True)
                if file_matches:
                    all_matches[path] = file_matches
            files_searched += 1
    except Exception as exc:
        log_exception(f"grep: search for {pattern.pattern!r} aborted", exc)

    locations = [
        GrepLocation.from_match(match) for matches in all_matches.values() for match in matches
    ]
    log_message(
        f"grep: {pattern.pattern!r} found {len(locations)} hits in {files_searched} files"
    )
    return locations


def grep_multiple(
    patterns: Sequence[SearchPattern],
    config: SearchConfig,
    host: WorkspaceHost,
    *,
    cancel_event: threading.Event | None = None,
) -> list[GrepLocation]:
    """Search for several patterns and merge the results.

    Used where more than one pattern describes the same kind of hit, e.g.
    labels with colon and labels at column 0. A hit found by several
    patterns is reported once.
    """
    all_locations: list[GrepLocation] = []
    for pattern in patterns:
        all_locations.extend(grep(pattern, config, host, cancel_event=cancel_event))

    if patterns:
        all_locations = remove_duplicates(all_locations)
    return all_locations


__all__ = [
    "GrepLocation",
    "GrepMatch",
    "grep",
    "grep_lines",
    "grep_lines_multiple",
    "grep_multiple",
    "location_key",
    "remove_duplicates",
]
