"""Configuration: settings, search parameters and their loading."""

from asmxref.config.manager import ConfigManager
from asmxref.config.settings import SearchConfig, Settings, WorkspaceConfig

__all__ = ["ConfigManager", "SearchConfig", "Settings", "WorkspaceConfig"]
