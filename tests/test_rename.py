"""Tests for asmxref.xref.rename module."""

from unittest.mock import patch

import pytest

from asmxref.utils.errors import ConfigNotFoundError, InvalidPositionError, RenamingDisabledError
from asmxref.xref.rename import RenameProvider, rename_in_file
from asmxref.xref.types import Position, Range


class TestRenameInFile:
    """Tests for rename_in_file."""

    def test_replaces_ranges(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text("foo:\n    jp foo\n")

        rename_in_file(path, [Range.on_line(0, 0, 3), Range.on_line(1, 7, 10)], "bar")

        assert path.read_text() == "bar:\n    jp bar\n"

    def test_several_ranges_on_one_line(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text("    ld hl,foo+foo\n")

        rename_in_file(path, [Range.on_line(0, 10, 13), Range.on_line(0, 14, 17)], "longer")

        assert path.read_text() == "    ld hl,longer+longer\n"

    def test_include_line_skipped(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text('    INCLUDE "foo.asm"\nfoo:\n')

        rename_in_file(path, [Range.on_line(0, 13, 16), Range.on_line(1, 0, 3)], "bar")

        assert path.read_text() == '    INCLUDE "foo.asm"\nbar:\n'

    def test_include_in_comment_still_renamed(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text("foo:\n    jp foo      ; include guard loop\n")

        rename_in_file(path, [Range.on_line(0, 0, 3), Range.on_line(1, 7, 10)], "bar")

        assert path.read_text() == "bar:\n    jp bar      ; include guard loop\n"

    def test_labeled_include_line_skipped(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text('start: INCBIN "foo.bin"\n')

        rename_in_file(path, [Range.on_line(0, 15, 18)], "bar")

        assert path.read_text() == 'start: INCBIN "foo.bin"\n'

    def test_crlf_preserved(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_bytes(b"foo:\r\n    jp foo\r\n")

        rename_in_file(path, [Range.on_line(0, 0, 3), Range.on_line(1, 7, 10)], "bar")

        assert path.read_bytes() == b"bar:\r\n    jp bar\r\n"

    def test_write_error_propagates(self, tmp_path):
        path = tmp_path / "a.asm"
        path.write_text("foo:\n")
        with patch("asmxref.xref.rename.write_text", side_effect=OSError("read-only")):
            with pytest.raises(OSError):
                rename_in_file(path, [Range.on_line(0, 0, 3)], "bar")


class TestRenameProvider:
    """Tests for RenameProvider on the fixture project."""

    def test_plan_counts(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        plan = provider.plan_rename(asm_project / "m.asm", Position(1, 0), "bar")

        # The word-level comparison keeps every plain "foo": both module
        # definitions, their uses, and both qualified calls in main.asm.
        assert plan.old_name == "foo"
        assert plan.total == 6
        assert sorted(p.name for p in plan.files) == ["m.asm", "main.asm", "n.asm"]
        assert not plan.edit

    def test_rename_end_to_end(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        edit = provider.provide_rename_edits(asm_project / "m.asm", Position(3, 8), "bar")

        assert not edit
        assert (asm_project / "m.asm").read_text() == (
            "    MODULE M\nbar:\n    ld a,1\n    jp bar\n    ENDMODULE\n"
        )
        assert "call M.bar" in (asm_project / "main.asm").read_text()
        assert "call N.bar" in (asm_project / "main.asm").read_text()
        assert (asm_project / "n.asm").read_text().startswith("    MODULE N\nbar:\n    jp bar")
        assert (asm_project / "build" / "out.asm").read_text() == "foo:\n    jp foo\n"

    def test_comment_text_not_renamed(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        provider.provide_rename_edits(asm_project / "n.asm", Position(1, 0), "bar")

        assert "; foo again" in (asm_project / "n.asm").read_text()

    def test_open_documents_get_edits(self, workspace, config_manager, asm_project):
        workspace.open_document(asm_project / "n.asm")
        provider = RenameProvider(workspace, config_manager)

        assert provider.apply_rename(asm_project / "m.asm", Position(1, 0), "bar") is True

        doc = workspace.document(asm_project / "n.asm")
        assert doc.text.startswith("    MODULE N\nbar:\n    jp bar")
        # Open documents are left to the host, the disk file is untouched.
        assert (asm_project / "n.asm").read_text().startswith("    MODULE N\nfoo:")
        assert (asm_project / "m.asm").read_text().startswith("    MODULE M\nbar:")

    def test_renaming_disabled(self, workspace, config_manager, asm_project):
        (asm_project / ".asmxref").write_text("ENABLE_RENAMING=false\n")
        provider = RenameProvider(workspace, config_manager)

        with pytest.raises(RenamingDisabledError):
            provider.plan_rename(asm_project / "m.asm", Position(1, 0), "bar")

    def test_renaming_disabled_gives_warning_and_empty_edit(
        self, workspace, config_manager, asm_project
    ):
        (asm_project / ".asmxref").write_text("ENABLE_RENAMING=false\n")
        provider = RenameProvider(workspace, config_manager)

        with patch("asmxref.xref.rename.print_warning") as mock_warning:
            edit = provider.provide_rename_edits(asm_project / "m.asm", Position(1, 0), "bar")

        assert not edit
        mock_warning.assert_called_once_with("Renaming is disabled for this workspace folder.")
        assert (asm_project / "m.asm").read_text().startswith("    MODULE M\nfoo:")

    def test_document_outside_workspace(self, workspace, config_manager, asm_project):
        (asm_project / ".asmxref").write_text("ROOT_FOLDER=src\n")
        provider = RenameProvider(workspace, config_manager)

        with patch("asmxref.xref.rename.print_warning") as mock_warning:
            edit = provider.provide_rename_edits(asm_project / "m.asm", Position(1, 0), "bar")

        assert not edit
        mock_warning.assert_called_once_with("Document is in no workspace folder.")
        with pytest.raises(ConfigNotFoundError):
            provider.plan_rename(asm_project / "m.asm", Position(1, 0), "bar")

    def test_invalid_position(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        with pytest.raises(InvalidPositionError):
            provider.plan_rename(asm_project / "m.asm", Position(2, 0), "bar")

    def test_no_word_gives_empty_edit(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        before = (asm_project / "m.asm").read_text()

        edit = provider.provide_rename_edits(asm_project / "m.asm", Position(2, 0), "bar")

        assert not edit
        assert (asm_project / "m.asm").read_text() == before

    def test_line_outside_document(self, workspace, config_manager, asm_project):
        provider = RenameProvider(workspace, config_manager)
        with pytest.raises(InvalidPositionError):
            provider.plan_rename(asm_project / "m.asm", Position(40, 0), "bar")
