"""Shared pytest fixtures for asmxref tests."""

from pathlib import Path

import pytest

from asmxref.config.manager import ConfigManager
from asmxref.config.settings import Settings, WorkspaceConfig, normalize_root
from asmxref.host.local import LocalWorkspace

MAIN_ASM = """\
    INCLUDE "m.asm"
    INCLUDE "n.asm"
start:
    call M.foo
    call N.foo
    jp start        ; loop forever
unused_label:
    ret
"""

M_ASM = """\
    MODULE M
foo:
    ld a,1
    jp foo
    ENDMODULE
"""

N_ASM = """\
    MODULE N
foo:
    jp foo          ; foo again
    ENDMODULE
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Keep the user's global config and ASMXREF_* variables out of tests."""
    monkeypatch.setattr(
        "asmxref.config.manager.CONFIG_FILE", tmp_path / "no-global-config"
    )
    for key in Settings.get_config_keys():
        monkeypatch.delenv("ASMXREF_" + key, raising=False)


@pytest.fixture
def asm_project(tmp_path: Path) -> Path:
    """A small assembler project with the label ``foo`` in modules M and N.

    Layout::

        .asmxref        local config, marks the root
        main.asm        references M.foo and N.foo
        m.asm           MODULE M with foo
        n.asm           MODULE N with foo
        build/out.asm   excluded by the default exclude glob
        notes.txt       not an assembler file
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / ".git").mkdir()
    (root / ".asmxref").write_text("ENABLE_RENAMING=true\n")
    (root / "main.asm").write_text(MAIN_ASM)
    (root / "m.asm").write_text(M_ASM)
    (root / "n.asm").write_text(N_ASM)
    (root / "build").mkdir()
    (root / "build" / "out.asm").write_text("foo:\n    jp foo\n")
    (root / "notes.txt").write_text("foo\n")
    return root.resolve()


@pytest.fixture
def workspace(asm_project: Path) -> LocalWorkspace:
    """A LocalWorkspace over the fixture project."""
    return LocalWorkspace(asm_project)


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """A ConfigManager with a non-existent global config."""
    return ConfigManager(global_config_path=tmp_path / "no-global-config")


@pytest.fixture
def workspace_config(asm_project: Path) -> WorkspaceConfig:
    """Default settings rooted at the fixture project."""
    return WorkspaceConfig(root_folder=normalize_root(asm_project), settings=Settings())
