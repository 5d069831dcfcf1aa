"""Reference search built from grep and reduction."""

from __future__ import annotations

import threading
from pathlib import Path

from asmxref.config.settings import WorkspaceConfig
from asmxref.host.protocol import WorkspaceHost
from asmxref.utils.errors import InvalidPositionError
from asmxref.utils.logging import log_message
from asmxref.xref.grep_engine import GrepLocation, grep, grep_multiple, remove_duplicates
from asmxref.xref.line_source import get_lines_for_file
from asmxref.xref.modules import get_complete_label
from asmxref.xref.patterns import get_last_label_part, label_patterns, reference_pattern
from asmxref.xref.reducer import reduce_locations
from asmxref.xref.types import LanguageId, Position


def find_references(
    document_path: Path,
    position: Position,
    config: WorkspaceConfig,
    host: WorkspaceHost,
    *,
    loose: bool = False,
    include_declaration: bool = False,
    language_id: LanguageId | None = None,
    cancel_event: threading.Event | None = None,
) -> list[GrepLocation]:
    """Find the references of the label at ``position``.

    Args:
        document_path: File containing the label.
        position: Position of the label.
        config: Workspace configuration.
        host: The workspace host.
        loose: Compare fuzzily instead of exactly.
        include_declaration: Keep hits on the origin's own line.
        language_id: Language of the search; derived from the path if None.
        cancel_event: Stops grep and reduction early.

    Raises:
        InvalidPositionError: If there is no label at the position.
    """
    document_path = Path(document_path).resolve()
    docs = host.open_dirty_documents()
    lines = get_lines_for_file(document_path, docs)
    if not 0 <= position.line < len(lines):
        raise InvalidPositionError("Line outside of document", position.line, position.character)

    label, _ = get_complete_label(lines[position.line], position.character)
    word = get_last_label_part(label)
    if not word:
        raise InvalidPositionError("No label at position", position.line, position.character)

    language_id = language_id or config.language_for(document_path)
    locations = grep(
        reference_pattern(word),
        config.search_config(language_id),
        host,
        cancel_event=cancel_event,
    )
    reduced = reduce_locations(
        label_patterns(config.settings, language_id),
        locations,
        document_path,
        position,
        remove_own_location=not include_declaration,
        check_full_name=not loose,
        documents=docs,
        cancel_event=cancel_event,
    )
    return remove_duplicates(reduced)


def find_unreferenced_labels(
    config: WorkspaceConfig,
    host: WorkspaceHost,
    language_id: LanguageId = LanguageId.ASM_COLLECTION,
) -> list[GrepLocation]:
    """Return the label definitions that are referenced nowhere in the project."""
    patterns = label_patterns(config.settings, language_id)
    search_config = config.search_config(language_id)
    docs = host.open_dirty_documents()

    definitions = grep_multiple(patterns, search_config, host)
    hits_by_word: dict[str, list[GrepLocation]] = {}
    unreferenced: list[GrepLocation] = []

    for definition in definitions:
        word = get_last_label_part(definition.symbol)
        if not word:
            continue
        hits = hits_by_word.get(word)
        if hits is None:
            hits = grep(reference_pattern(word), search_config, host)
            hits_by_word[word] = hits
        references = reduce_locations(
            patterns,
            hits,
            definition.path,
            definition.range.start,
            remove_own_location=True,
            documents=docs,
        )
        if not references:
            unreferenced.append(definition)

    log_message(
        f"find_unreferenced_labels: {len(unreferenced)} of {len(definitions)} labels unreferenced"
    )
    return unreferenced


__all__ = ["find_references", "find_unreferenced_labels"]
