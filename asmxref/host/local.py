"""A workspace host backed by a plain directory.

Used by the CLI and by tests. Files are enumerated by walking the root
directory. Open documents are kept in memory: they can be registered with
:meth:`LocalWorkspace.open_document` and receive the edits applied through
:meth:`LocalWorkspace.apply_edits`, without touching the disk.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from asmxref.host.globs import compile_glob, glob_matches
from asmxref.utils.logging import log_message
from asmxref.xref.line_source import read_text
from asmxref.xref.types import LanguageId, LiveDocument, Position, TextEdit


class LocalWorkspace:
    """Workspace host for the files below ``root``.

    Args:
        root: The workspace directory.
        max_files: Safety cap on files returned by :meth:`find`.
    """

    def __init__(self, root: Path, *, max_files: int = 100_000) -> None:
        self._root = Path(root).resolve()
        self._max_files = max_files
        self._documents: dict[Path, LiveDocument] = {}

    @property
    def root(self) -> Path:
        """The workspace directory."""
        return self._root

    # ------------------------------------------------------------------
    # File enumeration
    # ------------------------------------------------------------------

    def find(self, include_glob: str, exclude_glob: str | None) -> list[Path]:
        """Return the files below the root matching the globs, in sorted order."""
        include_spec = compile_glob(include_glob)
        results: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames.sort()
            for filename in sorted(filenames):
                abs_path = Path(dirpath) / filename
                rel_path = PurePosixPath(abs_path.relative_to(self._root).as_posix())
                if not include_spec.match_file(str(rel_path)):
                    continue
                if glob_matches(exclude_glob, rel_path):
                    continue
                if len(results) >= self._max_files:
                    log_message(f"LocalWorkspace: hit max_files cap ({self._max_files})")
                    return results
                results.append(abs_path)
        return results

    # ------------------------------------------------------------------
    # Open documents
    # ------------------------------------------------------------------

    def open_document(
        self,
        path: Path,
        text: str | None = None,
        *,
        language_id: LanguageId = LanguageId.ASM_COLLECTION,
        is_dirty: bool = True,
    ) -> LiveDocument:
        """Register an open document.

        Args:
            path: The document path. Relative paths are taken from the root.
            text: The document text. Defaults to the file content on disk.
            language_id: Language of the document.
            is_dirty: Whether the text has unsaved changes.
        """
        abs_path = self._absolute(path)
        if text is None:
            text = read_text(abs_path)
        doc = LiveDocument(path=abs_path, language_id=language_id, text=text, is_dirty=is_dirty)
        self._documents[abs_path] = doc
        return doc

    def close_document(self, path: Path) -> None:
        self._documents.pop(self._absolute(path), None)

    def document(self, path: Path) -> LiveDocument | None:
        """The open document for ``path``, if any."""
        return self._documents.get(self._absolute(path))

    def open_dirty_documents(self) -> list[LiveDocument]:
        return [doc for doc in self._documents.values() if doc.is_dirty]

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def apply_edits(self, edits: Mapping[Path, list[TextEdit]]) -> bool:
        """Apply edits to open documents.

        All target documents must be open, otherwise nothing is changed
        and False is returned.
        """
        targets = {self._absolute(path): path_edits for path, path_edits in edits.items()}
        missing = [path for path in targets if path not in self._documents]
        if missing:
            log_message(f"LocalWorkspace: cannot edit documents that are not open: {missing}")
            return False

        for path, path_edits in targets.items():
            doc = self._documents[path]
            text = _apply_text_edits(doc.text, path_edits)
            self._documents[path] = LiveDocument(
                path=doc.path, language_id=doc.language_id, text=text, is_dirty=True
            )
        return True

    def _absolute(self, path: Path) -> Path:
        path = Path(path)
        if not path.is_absolute():
            path = self._root / path
        return path


def _apply_text_edits(text: str, edits: list[TextEdit]) -> str:
    """Apply edits to ``text``, right-most first so offsets stay valid."""
    line_starts = [0]
    for index, ch in enumerate(text):
        if ch == "\n":
            line_starts.append(index + 1)

    def offset(pos: Position) -> int:
        return line_starts[pos.line] + pos.character

    for edit in sorted(edits, key=lambda e: e.range.start, reverse=True):
        start = offset(edit.range.start)
        end = offset(edit.range.end)
        text = text[:start] + edit.new_text + text[end:]
    return text


__all__ = ["LocalWorkspace"]
