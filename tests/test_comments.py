"""Tests for asmxref.xref.comments module."""

from asmxref.xref.comments import strip_all_comments, strip_comment


class TestStripComment:
    """Tests for single-line comment removal."""

    def test_semicolon_comment(self):
        assert strip_comment("    ld a,1 ; load") == ("    ld a,1 ", False)

    def test_double_slash_comment(self):
        assert strip_comment("    ld a,1 // load") == ("    ld a,1 ", False)

    def test_line_without_comment_unchanged(self):
        assert strip_comment("    jp start") == ("    jp start", False)

    def test_semicolon_in_string_is_kept(self):
        line, in_block = strip_comment('    db "a;b" ; text')
        assert line == '    db "a;b" '
        assert in_block is False

    def test_char_literal_semicolon_is_kept(self):
        assert strip_comment("    ld a,';'") == ("    ld a,';'", False)

    def test_lone_quote_is_not_a_literal(self):
        """ex af,af' must not swallow the following comment."""
        assert strip_comment("    ex af,af' ; swap") == ("    ex af,af' ", False)

    def test_inline_block_comment_blanked(self):
        line, in_block = strip_comment("ld /* x */ a,b")
        assert line == "ld " + " " * 7 + " a,b"
        assert len(line) == len("ld /* x */ a,b")
        assert in_block is False

    def test_unterminated_block_opens(self):
        line, in_block = strip_comment("ld a,1 /* start")
        assert line == "ld a,1   "
        assert in_block is True

    def test_inside_block_whole_line_removed(self):
        assert strip_comment("still comment", in_block=True) == ("", True)


class TestStripAllComments:
    """Tests for multi-line comment removal."""

    def test_block_comment_across_lines(self):
        lines = ["ld a,1 /* start", "still comment", "end */ ld b,2"]
        strip_all_comments(lines)

        assert lines[0] == "ld a,1   "
        assert lines[1] == ""
        assert lines[2] == "       ld b,2"

    def test_columns_preserved(self):
        original = "end */ ld b,2"
        lines = ["/*", original]
        strip_all_comments(lines)
        assert lines[1].index("ld") == original.index("ld")

    def test_modifies_in_place(self):
        lines = ["nop ; x", "ret"]
        result = strip_all_comments(lines)
        assert result is None
        assert lines == ["nop ", "ret"]
