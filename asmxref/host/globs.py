"""Glob matching for workspace file enumeration.

Globs use gitwildmatch semantics (``**`` crosses directories) through
``pathspec``. Editor-style brace alternatives (``**/*.{asm,inc}``) are
expanded into several patterns first, since gitwildmatch has no braces.
"""

from __future__ import annotations

import functools
from pathlib import PurePosixPath

from pathspec import GitIgnoreSpec


def expand_braces(glob: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, nested ones included.

    ``"**/*.{asm,inc}"`` gives ``["**/*.asm", "**/*.inc"]``. A glob without
    (balanced) braces is returned unchanged.
    """
    start = glob.find("{")
    if start < 0:
        return [glob]

    depth = 0
    parts: list[str] = []
    part_start = start + 1
    for index in range(start, len(glob)):
        ch = glob[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                parts.append(glob[part_start:index])
                head, tail = glob[:start], glob[index + 1 :]
                expanded: list[str] = []
                for part in parts:
                    expanded.extend(expand_braces(head + part + tail))
                return expanded
        elif ch == "," and depth == 1:
            parts.append(glob[part_start:index])
            part_start = index + 1
    return [glob]


@functools.lru_cache(maxsize=64)
def compile_glob(glob: str) -> GitIgnoreSpec:
    """Compile a (brace) glob into a gitwildmatch spec."""
    lines = [alternative.strip() for alternative in expand_braces(glob) if alternative.strip()]
    return GitIgnoreSpec.from_lines(lines)


def glob_matches(glob: str | None, rel_path: PurePosixPath | str) -> bool:
    """True if the root-relative posix path matches ``glob``."""
    if not glob:
        return False
    return compile_glob(glob).match_file(str(rel_path))


__all__ = ["compile_glob", "expand_braces", "glob_matches"]
