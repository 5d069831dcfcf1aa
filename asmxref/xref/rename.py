"""Rename all references of a symbol.

Renaming is grep plus reduction plus text replacement. Hits in open
documents with unsaved changes become host edits; all other hits are
written straight to the files on disk, one rewrite per file.

There is no rollback. Disk files are written one after another and the
host edit is applied separately, so a failure leaves earlier files
renamed. Write errors propagate: a failed rename must not look like a
successful one. Positions are not re-checked before writing, a file
changed since it was grepped gets the replacement at the old columns.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from asmxref.config.manager import ConfigManager
from asmxref.config.settings import WorkspaceConfig
from asmxref.host.protocol import WorkspaceHost
from asmxref.utils.console import print_warning
from asmxref.utils.errors import ConfigNotFoundError, InvalidPositionError, RenamingDisabledError
from asmxref.utils.logging import log_message
from asmxref.xref.comments import strip_all_comments
from asmxref.xref.grep_engine import grep, remove_duplicates
from asmxref.xref.line_source import find_live_document, get_lines_for_file, read_text, write_text
from asmxref.xref.modules import word_at
from asmxref.xref.patterns import INCLUDE_DIRECTIVE, label_patterns, reference_pattern
from asmxref.xref.reducer import reduce_locations
from asmxref.xref.types import LanguageId, Position, Range, WorkspaceEdit

# Label characters for renaming: only the dot-free word under the cursor changes.
RENAME_LABEL_CHARS = r"\w"


@dataclass
class RenamePlan:
    """The replacements of one rename, split by where they are applied.

    Attributes:
        old_name: The word being renamed.
        new_name: The replacement.
        edit: Replacements in open documents, applied by the host.
        disk_changes: Replacements in files on disk, per file.
    """

    old_name: str
    new_name: str
    edit: WorkspaceEdit = field(default_factory=WorkspaceEdit)
    disk_changes: dict[Path, list[Range]] = field(default_factory=dict)

    @property
    def files(self) -> list[Path]:
        return list(self.edit.changes) + list(self.disk_changes)

    @property
    def total(self) -> int:
        """Number of replacements."""
        return self.edit.size + sum(len(ranges) for ranges in self.disk_changes.values())


def rename_in_file(path: Path, changes: Iterable[Range], new_name: str) -> None:
    """Replace the given ranges of a file on disk with ``new_name``.

    Lines with an INCLUDE directive are left alone, the file name in it may
    contain the old name. Ranges are applied from the right-most to the
    left-most so that each range still addresses the original columns.
    """
    lines = read_text(path).split("\n")
    code = list(lines)
    strip_all_comments(code)
    for range_ in sorted(changes, key=lambda r: r.start, reverse=True):
        row = range_.start.line
        line = lines[row]
        if INCLUDE_DIRECTIVE.match(code[row]):
            continue
        lines[row] = line[: range_.start.character] + new_name + line[range_.end.character :]
    write_text(path, "\n".join(lines))


class RenameProvider:
    """Plans and performs renames within a workspace.

    Args:
        host: The workspace host.
        config_manager: Resolves the configuration of a document.
    """

    def __init__(self, host: WorkspaceHost, config_manager: ConfigManager | None = None) -> None:
        self._host = host
        self._config_manager = config_manager or ConfigManager()

    def plan_rename(
        self,
        document_path: Path,
        position: Position,
        new_name: str,
        *,
        language_id: LanguageId | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RenamePlan:
        """Find the replacements for renaming the word at ``position``.

        Raises:
            ConfigNotFoundError: If no configuration covers the document.
            RenamingDisabledError: If renaming is disabled for the workspace.
            InvalidPositionError: If there is no word at the position.
        """
        document_path = Path(document_path).resolve()
        config = self._config_manager.config_for_document(document_path)
        if config is None:
            raise ConfigNotFoundError("Document is in no workspace folder.")
        if not config.enable_renaming:
            raise RenamingDisabledError("Renaming is disabled for this workspace folder.")

        return self._plan(config, document_path, position, new_name, language_id, cancel_event)

    def _plan(
        self,
        config: WorkspaceConfig,
        document_path: Path,
        position: Position,
        new_name: str,
        language_id: LanguageId | None,
        cancel_event: threading.Event | None,
    ) -> RenamePlan:
        docs = self._host.open_dirty_documents()
        old_name = word_at(get_lines_for_file(document_path, docs), position.line, position.character)
        if not old_name:
            raise InvalidPositionError("No symbol to rename", position.line, position.character)

        language_id = language_id or config.language_for(document_path)
        locations = grep(
            reference_pattern(old_name),
            config.search_config(language_id),
            self._host,
            cancel_event=cancel_event,
        )
        reduced = reduce_locations(
            label_patterns(config.settings, language_id),
            locations,
            document_path,
            position,
            remove_own_location=False,
            check_full_name=True,
            label_chars=RENAME_LABEL_CHARS,
            documents=docs,
            cancel_event=cancel_event,
        )

        plan = RenamePlan(old_name=old_name, new_name=new_name)
        for loc in remove_duplicates(reduced):
            if find_live_document(loc.path, docs) is not None:
                plan.edit.replace(loc.path, loc.range, new_name)
            else:
                plan.disk_changes.setdefault(loc.path, []).append(loc.range)

        log_message(
            f"rename: {old_name!r} -> {new_name!r}, {plan.total} replacements in {len(plan.files)} files"
        )
        return plan

    def write_disk_changes(self, plan: RenamePlan) -> None:
        """Rewrite the files on disk of a plan."""
        for path, changes in plan.disk_changes.items():
            rename_in_file(path, changes, plan.new_name)

    def provide_rename_edits(
        self,
        document_path: Path,
        position: Position,
        new_name: str,
        *,
        language_id: LanguageId | None = None,
        cancel_event: threading.Event | None = None,
    ) -> WorkspaceEdit:
        """Rename the word at ``position``.

        Files on disk are rewritten immediately. The returned edit holds the
        replacements in open documents and is for the host to apply.
        Without configuration, or with renaming disabled, a warning is shown
        and an empty edit returned. No word at the position gives an empty
        edit as well.
        """
        try:
            plan = self.plan_rename(
                document_path,
                position,
                new_name,
                language_id=language_id,
                cancel_event=cancel_event,
            )
        except (ConfigNotFoundError, RenamingDisabledError) as exc:
            print_warning(str(exc))
            return WorkspaceEdit()
        except InvalidPositionError as exc:
            log_message(f"rename: nothing to rename: {exc}")
            return WorkspaceEdit()

        self.write_disk_changes(plan)
        return plan.edit

    def apply_rename(
        self,
        document_path: Path,
        position: Position,
        new_name: str,
        *,
        language_id: LanguageId | None = None,
    ) -> bool:
        """Rename and hand the open-document edits to the host.

        Returns:
            The result of the host's edit application (True if nothing to apply).
        """
        edit = self.provide_rename_edits(
            document_path, position, new_name, language_id=language_id
        )
        if not edit:
            return True
        return self._host.apply_edits(edit.changes)


__all__ = [
    "RENAME_LABEL_CHARS",
    "RenamePlan",
    "RenameProvider",
    "rename_in_file",
]
