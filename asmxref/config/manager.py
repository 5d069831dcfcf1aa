"""Configuration manager for asmxref.

Loads settings with a cascading hierarchy:

    1. Environment Variables (highest priority, ASMXREF_<KEY>)
    2. Local Config (.asmxref in the project or a parent directory)
    3. Global Config (~/.asmxref-config)
    4. Built-in Defaults (lowest priority)

The root folder of a workspace is ROOT_FOLDER if set, else the directory
holding the local config file, else the directory the lookup started from.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from asmxref.config.settings import (
    CONFIG_FILE,
    Settings,
    WorkspaceConfig,
    normalize_root,
)
from asmxref.utils.logging import log_message

logger = logging.getLogger(__name__)

ENV_PREFIX = "ASMXREF_"


class ConfigManager:
    """Manages configuration loading with cascading hierarchy.

    Security features:
    - Safe line-by-line parsing (no eval/exec)
    - Only known keys are applied

    Attributes:
        settings: Current settings instance
        global_config_path: Path to global ~/.asmxref-config file
        local_config_path: Path to discovered local .asmxref file (after load)
        root_folder: Resolved workspace root (after load), ends with a separator
    """

    LOCAL_CONFIG_NAME = ".asmxref"

    def __init__(self, global_config_path: Path | None = None) -> None:
        self.global_config_path = global_config_path or CONFIG_FILE
        self.local_config_path: Path | None = None
        self.root_folder: str | None = None
        self.settings = Settings()
        self._raw_values: dict[str, str] = {}
        self._config_sources: dict[str, str] = {}

    def load(self, start_dir: Path | None = None) -> Settings:
        """Load configuration from all sources with cascading precedence.

        Idempotent: each call starts from clean defaults.

        Args:
            start_dir: Directory where the local config lookup starts.
                Defaults to the current working directory.

        Returns:
            Settings instance with loaded values
        """
        self.settings = Settings()
        self.local_config_path = None
        self.root_folder = None
        self._raw_values = {}
        self._config_sources = {}

        start = (Path(start_dir) if start_dir is not None else Path.cwd()).resolve()
        if start.is_file():
            start = start.parent

        if self.global_config_path.exists():
            log_message(f"Loading global configuration from {self.global_config_path}")
            self._load_file(self.global_config_path, source="global")

        local_path = self._find_local_config(start)
        if local_path:
            self.local_config_path = local_path
            log_message(f"Loading local configuration from {local_path}")
            self._load_file(local_path, source=f"local ({local_path})")

        self._load_environment()

        for key, value in self._raw_values.items():
            self._apply_value_to_settings(key, value)

        self.root_folder = self._resolve_root(start)
        log_message(
            f"Configuration loaded ({len(self._raw_values)} keys), root folder {self.root_folder}"
        )
        return self.settings

    def config_for_document(self, document_path: Path) -> WorkspaceConfig | None:
        """Return the workspace configuration covering ``document_path``.

        Loads the configuration starting at the document's directory.
        Returns None if the document lies outside the resolved root folder.
        """
        path = Path(document_path).resolve()
        self.load(path.parent)
        assert self.root_folder is not None
        if not str(path).startswith(self.root_folder):
            log_message(f"Document {path} is outside root folder {self.root_folder}")
            return None
        return WorkspaceConfig(root_folder=self.root_folder, settings=self.settings)

    def workspace_config(self, start_dir: Path | None = None) -> WorkspaceConfig:
        """Load and return the configuration of the workspace at ``start_dir``."""
        self.load(start_dir)
        assert self.root_folder is not None
        return WorkspaceConfig(root_folder=self.root_folder, settings=self.settings)

    def get_source(self, key: str) -> str:
        """Where the value of ``key`` came from ("default" if not configured)."""
        return self._config_sources.get(key, "default")

    def _resolve_root(self, start: Path) -> str:
        if self.settings.root_folder:
            root = Path(os.path.expanduser(self.settings.root_folder))
            if not root.is_absolute():
                base = self.local_config_path.parent if self.local_config_path else start
                root = base / root
            return normalize_root(root)
        if self.local_config_path is not None:
            return normalize_root(self.local_config_path.parent)
        return normalize_root(start)

    def _find_local_config(self, start: Path) -> Path | None:
        """Find local .asmxref config by traversing up from ``start``.

        Stops at a directory containing .git or at the filesystem root.
        """
        current = start
        while True:
            config_path = current / self.LOCAL_CONFIG_NAME
            if config_path.is_file():
                return config_path

            if (current / ".git").exists():
                break

            parent = current.parent
            if parent == current:
                break
            current = parent

        return None

    def _load_file(self, path: Path, source: str = "file") -> None:
        """Load KEY=VALUE pairs from a config file."""
        pattern = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)=(.*)$")

        with path.open(encoding="utf-8") as f:
            for line in f:
                line = line.strip()

                if not line or line.startswith("#"):
                    continue

                match = pattern.match(line)
                if not match:
                    logger.warning(f"Ignoring malformed line in {path}: {line!r}")
                    continue

                key, value = match.groups()
                if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                    value = value[1:-1]

                self._raw_values[key] = value
                self._config_sources[key] = source

    def _load_environment(self) -> None:
        """Override config with ASMXREF_<KEY> environment variables of known keys."""
        for key in Settings.get_config_keys():
            env_value = os.environ.get(ENV_PREFIX + key)
            if env_value is not None:
                self._raw_values[key] = env_value
                self._config_sources[key] = "environment"

    def _apply_value_to_settings(self, key: str, value: str) -> None:
        attr = self.settings.get_attribute_for_key(key)
        if attr is None:
            logger.warning(f"Unknown config key '{key}', ignoring")
            return

        current_value = getattr(self.settings, attr)
        if isinstance(current_value, bool):
            setattr(self.settings, attr, value.strip().lower() in ("true", "1", "yes"))
        else:
            setattr(self.settings, attr, value)


__all__ = ["ConfigManager", "ENV_PREFIX"]
