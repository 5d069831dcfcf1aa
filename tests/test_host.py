"""Tests for asmxref.host modules."""

from pathlib import PurePosixPath

from pathspec import GitIgnoreSpec

from asmxref.host import LocalWorkspace, WorkspaceHost
from asmxref.host.globs import compile_glob, expand_braces, glob_matches
from asmxref.xref.types import LanguageId, Range, TextEdit, WorkspaceEdit


class TestExpandBraces:
    """Tests for expand_braces."""

    def test_simple(self):
        assert expand_braces("**/*.{asm,inc}") == ["**/*.asm", "**/*.inc"]

    def test_nested(self):
        assert expand_braces("a{b,c{d,e}}") == ["ab", "acd", "ace"]

    def test_two_groups(self):
        assert expand_braces("{a,b}.{x,y}") == ["a.x", "a.y", "b.x", "b.y"]

    def test_no_braces(self):
        assert expand_braces("**/*.asm") == ["**/*.asm"]

    def test_unbalanced(self):
        assert expand_braces("*.{asm") == ["*.{asm"]


class TestGlobMatches:
    """Tests for compile_glob and glob_matches."""

    def test_compile_returns_pathspec(self):
        assert isinstance(compile_glob("**/*.asm"), GitIgnoreSpec)

    def test_double_star_crosses_directories(self):
        assert glob_matches("**/*.{asm,inc}", "main.asm")
        assert glob_matches("**/*.{asm,inc}", PurePosixPath("src/audio/init.inc"))
        assert not glob_matches("**/*.{asm,inc}", "src/readme.md")

    def test_default_exclude(self):
        exclude = "**/{.git,node_modules,build,out}/**"
        assert glob_matches(exclude, "build/out.asm")
        assert glob_matches(exclude, "src/node_modules/x.asm")
        assert not glob_matches(exclude, "src/x.asm")

    def test_no_glob(self):
        assert glob_matches(None, "a.asm") is False
        assert glob_matches("", "a.asm") is False


class TestLocalWorkspaceFind:
    """Tests for LocalWorkspace.find."""

    def test_is_workspace_host(self, workspace):
        assert isinstance(workspace, WorkspaceHost)

    def test_find_sorted_and_filtered(self, workspace, asm_project):
        files = workspace.find("**/*.asm", "**/build/**")
        assert [f.relative_to(asm_project).as_posix() for f in files] == [
            "m.asm",
            "main.asm",
            "n.asm",
        ]

    def test_find_without_exclude(self, workspace, asm_project):
        files = workspace.find("**/*.asm", None)
        assert asm_project / "build" / "out.asm" in files

    def test_max_files(self, asm_project):
        workspace = LocalWorkspace(asm_project, max_files=2)
        assert len(workspace.find("**/*.asm", None)) == 2


class TestLocalWorkspaceDocuments:
    """Tests for open documents and edits."""

    def test_open_document_reads_disk(self, workspace, asm_project):
        doc = workspace.open_document("m.asm")
        assert doc.path == asm_project / "m.asm"
        assert doc.text == (asm_project / "m.asm").read_text()
        assert doc.is_dirty is True
        assert doc.language_id is LanguageId.ASM_COLLECTION

    def test_open_list_file_document(self, workspace):
        doc = workspace.open_document("m.asm", "nop\n", language_id=LanguageId.ASM_LIST_FILE)
        assert doc.language_id is LanguageId.ASM_LIST_FILE

    def test_only_dirty_documents_listed(self, workspace):
        workspace.open_document("m.asm", "nop\n")
        workspace.open_document("n.asm", is_dirty=False)
        assert [doc.path.name for doc in workspace.open_dirty_documents()] == ["m.asm"]

    def test_close_document(self, workspace):
        workspace.open_document("m.asm", "nop\n")
        workspace.close_document("m.asm")
        assert workspace.document("m.asm") is None

    def test_apply_edits(self, workspace, asm_project):
        workspace.open_document("m.asm", "foo:\n    jp foo\n")
        edit = WorkspaceEdit()
        edit.replace(asm_project / "m.asm", Range.on_line(0, 0, 3), "bar")
        edit.replace(asm_project / "m.asm", Range.on_line(1, 7, 10), "bar")

        assert workspace.apply_edits(edit.changes) is True
        assert workspace.document("m.asm").text == "bar:\n    jp bar\n"
        assert (asm_project / "m.asm").read_text().startswith("    MODULE M")

    def test_apply_edits_to_closed_document_fails(self, workspace, asm_project):
        workspace.open_document("m.asm", "foo:\n")
        changes = {
            asm_project / "m.asm": [TextEdit(Range.on_line(0, 0, 3), "bar")],
            asm_project / "n.asm": [TextEdit(Range.on_line(1, 0, 3), "bar")],
        }

        assert workspace.apply_edits(changes) is False
        assert workspace.document("m.asm").text == "foo:\n"


class TestWorkspaceEdit:
    """Tests for WorkspaceEdit."""

    def test_empty_is_falsy(self):
        assert not WorkspaceEdit()
        assert WorkspaceEdit().size == 0

    def test_size(self, tmp_path):
        edit = WorkspaceEdit()
        edit.replace(tmp_path / "a.asm", Range.on_line(0, 0, 1), "x")
        edit.replace(tmp_path / "a.asm", Range.on_line(1, 0, 1), "x")
        edit.replace(tmp_path / "b.asm", Range.on_line(0, 0, 1), "x")
        assert edit.size == 3
        assert edit
