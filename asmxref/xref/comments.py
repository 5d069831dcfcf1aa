"""Comment removal for assembler sources.

Comments are removed before any scanning so that commented-out code never
produces a match. Line comments (``;`` and ``//``) cut the line at the
comment start; block comments (``/* ... */``, possibly spanning lines) are
blanked with spaces. In both cases the columns of the remaining code are
unchanged.
"""

from __future__ import annotations

# Character literals such as 'a' or 'ab'. A lone quote (ex af,af') is not a literal.
_MAX_CHAR_LITERAL = 2


def strip_comment(line: str, in_block: bool = False) -> tuple[str, bool]:
    """Remove the comments of a single line.

    Args:
        line: The line text.
        in_block: True if the line starts inside a block comment.

    Returns:
        The stripped line and whether a block comment is still open at its end.
    """
    out: list[str] = []
    pos = 0
    length = len(line)
    while pos < length:
        if in_block:
            end = line.find("*/", pos)
            if end < 0:
                pos = length
                break
            out.append(" " * (end + 2 - pos))
            pos = end + 2
            in_block = False
            continue

        ch = line[pos]
        if ch == '"':
            close = line.find('"', pos + 1)
            if close >= 0:
                out.append(line[pos : close + 1])
                pos = close + 1
                continue
        elif ch == "'":
            close = line.find("'", pos + 1, pos + 2 + _MAX_CHAR_LITERAL)
            if close > pos + 1:
                out.append(line[pos : close + 1])
                pos = close + 1
                continue
        elif ch == ";" or line.startswith("//", pos):
            break
        elif line.startswith("/*", pos):
            out.append("  ")
            pos += 2
            in_block = True
            continue

        out.append(ch)
        pos += 1

    return "".join(out), in_block


def strip_all_comments(lines: list[str]) -> None:
    """Remove all comments from ``lines`` in place.

    Block comments are tracked across lines.
    """
    in_block = False
    for index, line in enumerate(lines):
        lines[index], in_block = strip_comment(line, in_block)


__all__ = ["strip_comment", "strip_all_comments"]
