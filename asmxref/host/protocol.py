"""The editor host contract.

The engine never enumerates files, tracks open documents or applies edits
to open documents by itself. It asks a host through this narrow
protocol. :class:`~asmxref.host.local.LocalWorkspace` implements it for
plain directories, an editor integration implements it on top of the
editor's own workspace API.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from asmxref.xref.types import LiveDocument, TextEdit


@runtime_checkable
class WorkspaceHost(Protocol):
    """Services the cross-reference engine consumes from its host."""

    def find(self, include_glob: str, exclude_glob: str | None) -> list[Path]:
        """Return the files matching ``include_glob`` and not ``exclude_glob``."""
        ...

    def open_dirty_documents(self) -> list[LiveDocument]:
        """Return the open documents that have unsaved changes."""
        ...

    def apply_edits(self, edits: Mapping[Path, list[TextEdit]]) -> bool:
        """Apply text edits to open documents. Returns True on success."""
        ...


__all__ = ["LiveDocument", "WorkspaceHost"]
