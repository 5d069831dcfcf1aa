"""Supply the lines of a file, preferring an open document over the disk."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from asmxref.xref.types import LiveDocument

ENCODING = "utf-8"


def find_live_document(path: Path, documents: Iterable[LiveDocument]) -> LiveDocument | None:
    """Return the document for ``path`` or None if it is not open."""
    for doc in documents:
        if Path(doc.path) == Path(path):
            return doc
    return None


def read_text(path: Path) -> str:
    """Read a file from disk without translating line endings.

    Errors are not caught: a file that cannot be read is an error of the
    caller's request.
    """
    with Path(path).open(encoding=ENCODING, newline="") as f:
        return f.read()


def write_text(path: Path, text: str) -> None:
    """Overwrite a file with ``text``, writing line endings unchanged."""
    with Path(path).open("w", encoding=ENCODING, newline="") as f:
        f.write(text)


def get_lines_for_file(path: Path, documents: Iterable[LiveDocument] = ()) -> list[str]:
    """Return the lines of a file.

    The text of an open document is used if there is one, otherwise the
    file is read from disk. Both are split at ``\\n`` only, so a ``\\r`` of a
    CRLF file stays at the end of its line and columns are unaffected.
    Nothing is cached, every call reads again.

    Args:
        path: The file.
        documents: The open (dirty) documents.
    """
    doc = find_live_document(path, documents)
    if doc is not None:
        return doc.text.split("\n")
    return read_text(path).split("\n")


__all__ = [
    "ENCODING",
    "find_live_document",
    "get_lines_for_file",
    "read_text",
    "write_text",
]
