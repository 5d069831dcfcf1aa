"""Settings and search parameters for asmxref.

:class:`Settings` holds the configurable values, loaded by
:class:`~asmxref.config.manager.ConfigManager`. :class:`SearchConfig` is the
explicit parameter set handed to every grep call, derived from the settings
of one workspace.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from asmxref.xref.types import LanguageId


@dataclass
class Settings:
    """Configuration settings for asmxref.

    Attributes:
        root_folder: Project root. Empty means the directory of the local
            config file, or the start directory if there is none.
        enable_renaming: Allow rename operations.
        exclude_files: Glob of files never searched.
        asm_include_files: Glob of assembler source files.
        list_include_files: Glob of list files.
        labels_with_colons: Recognize "label:" definitions.
        labels_without_colons: Recognize column-0 labels without colon.
    """

    root_folder: str = ""
    enable_renaming: bool = True
    exclude_files: str = "**/{.git,node_modules,build,out}/**"
    asm_include_files: str = "**/*.{asm,inc,s,a80,z80}"
    list_include_files: str = "**/*.{list,lis}"
    labels_with_colons: bool = True
    labels_without_colons: bool = True

    # Config key to attribute mapping
    _key_mapping: dict[str, str] = field(
        default_factory=lambda: {
            "ROOT_FOLDER": "root_folder",
            "ENABLE_RENAMING": "enable_renaming",
            "EXCLUDE_FILES": "exclude_files",
            "ASM_INCLUDE_FILES": "asm_include_files",
            "LIST_INCLUDE_FILES": "list_include_files",
            "LABELS_WITH_COLONS": "labels_with_colons",
            "LABELS_WITHOUT_COLONS": "labels_without_colons",
        },
        repr=False,
    )

    def get_attribute_for_key(self, key: str) -> str | None:
        """Get the attribute name for a config key."""
        return self._key_mapping.get(key)

    @classmethod
    def get_config_keys(cls) -> list[str]:
        """Get list of all valid configuration keys."""
        return list(cls()._key_mapping.keys())

    def include_glob_for(self, language_id: LanguageId) -> str:
        """The include glob of the files belonging to ``language_id``."""
        if language_id == LanguageId.ASM_LIST_FILE:
            return self.list_include_files
        return self.asm_include_files


def normalize_root(root: str | Path) -> str:
    """Resolved root folder path (symlinks followed) ending with a path separator."""
    text = str(Path(root).resolve())
    if not text.endswith(os.sep):
        text += os.sep
    return text


@dataclass(frozen=True)
class SearchConfig:
    """Parameters of one grep call.

    Attributes:
        root_folder: Only files below this folder are searched. Ends with a
            path separator.
        language_id: Only open documents of this language are used.
        include_glob: Files to search.
        exclude_glob: Files to skip.
    """

    root_folder: str
    language_id: LanguageId
    include_glob: str
    exclude_glob: str | None = None

    def contains(self, path: Path) -> bool:
        """True if ``path`` lies below the root folder (lexical check)."""
        return str(path).startswith(self.root_folder)


@dataclass(frozen=True)
class WorkspaceConfig:
    """The effective configuration of the workspace a document belongs to."""

    root_folder: str
    settings: Settings

    @property
    def enable_renaming(self) -> bool:
        return self.settings.enable_renaming

    def language_for(self, path: Path) -> LanguageId:
        """List file if ``path`` matches the list file glob, else assembler source."""
        from asmxref.host.globs import glob_matches

        rel_path = Path(os.path.relpath(path, self.root_folder)).as_posix()
        if glob_matches(self.settings.list_include_files, rel_path):
            return LanguageId.ASM_LIST_FILE
        return LanguageId.ASM_COLLECTION

    def search_config(self, language_id: LanguageId) -> SearchConfig:
        return SearchConfig(
            root_folder=self.root_folder,
            language_id=language_id,
            include_glob=self.settings.include_glob_for(language_id),
            exclude_glob=self.settings.exclude_files or None,
        )


# Default global configuration file path
CONFIG_FILE = Path.home() / ".asmxref-config"


__all__ = [
    "CONFIG_FILE",
    "SearchConfig",
    "Settings",
    "WorkspaceConfig",
    "normalize_root",
]
