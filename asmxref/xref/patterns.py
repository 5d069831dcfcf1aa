"""Regular expressions used to find labels, references and scopes.

Every search goes through a :class:`SearchPattern`. Besides the compiled
regex it records whether all matches of a line are wanted or only the first
one, and which named groups form a prefix that belongs to the match but
not to the symbol. The lengths of those groups are added to the match
start, so the reported range covers the symbol only.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from asmxref.xref.types import LanguageId

if TYPE_CHECKING:
    from asmxref.config.settings import Settings

PREFIX_GROUP = "prefix"
LABEL_GROUP = "label"

# Line number, optional address and optional bytes in front of the source
# text of a list file, e.g. "  12+ 8000 3E 05    ".
LIST_PREFIX = r"(?:\s*\d+\+*\s+(?:[0-9A-Fa-f]{4}\s+)?(?:[0-9A-Fa-f]{2}\s+)*)?"

_LABEL = r"[A-Za-z_.][\w.]*"

# Directives that may start at column 0 and are not labels.
_KEYWORDS = (
    "MODULE",
    "ENDMODULE",
    "STRUCT",
    "ENDSTRUCT",
    "ENDS",
    "INCLUDE",
    "INCBIN",
    "MACRO",
    "ENDM",
    "IF",
    "IFDEF",
    "IFNDEF",
    "ELSE",
    "ENDIF",
    "ORG",
    "DEVICE",
)

MODULE_OPEN = re.compile(
    rf"^{LIST_PREFIX}\s*(?:MODULE|STRUCT)\s+(?P<name>[\w.]+)",
    re.IGNORECASE,
)
MODULE_CLOSE = re.compile(
    rf"^{LIST_PREFIX}\s*(?:ENDMODULE|ENDSTRUCT|ENDS)\b(?!\s*:)",
    re.IGNORECASE,
)
# An INCLUDE/INCBIN directive, optionally behind listing columns and a label.
INCLUDE_DIRECTIVE = re.compile(
    rf"^{LIST_PREFIX}\s*(?:@?[\w.]+:?\s+)?(?:INCLUDE|INCBIN)\s+",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class SearchPattern:
    """A compiled search regex plus how its matches are to be read.

    Attributes:
        regex: The compiled expression.
        global_search: Report every match of a line (True) or the first only.
        prefix_groups: Named groups whose matched text precedes the symbol.
    """

    regex: re.Pattern[str]
    global_search: bool = True
    prefix_groups: tuple[str, ...] = ()

    @classmethod
    def compile(
        cls,
        pattern: str,
        flags: int = 0,
        *,
        global_search: bool = True,
        prefix_groups: tuple[str, ...] = (),
    ) -> SearchPattern:
        regex = re.compile(pattern, flags)
        for group in prefix_groups:
            if group not in regex.groupindex:
                raise ValueError(f"Pattern {pattern!r} has no group named {group!r}")
        return cls(regex=regex, global_search=global_search, prefix_groups=prefix_groups)

    def iter_matches(self, line: str) -> Iterator[re.Match[str]]:
        """Yield the matches of ``line``, restarting at column 0 for every line."""
        if self.global_search:
            yield from self.regex.finditer(line)
            return
        match = self.regex.search(line)
        if match:
            yield match

    def start_of(self, match: re.Match[str]) -> int:
        """Column where the symbol begins, i.e. after the prefix groups."""
        start = match.start()
        for group in self.prefix_groups:
            text = match.group(group)
            if text:
                start += len(text)
        return start

    @property
    def pattern(self) -> str:
        return self.regex.pattern


def reference_pattern(word: str, *, global_search: bool = True) -> SearchPattern:
    """Pattern for any reference to ``word`` as a complete word.

    A qualifier in front of the word (``audio.`` in ``audio.init``) is
    allowed, the word itself must not be part of a longer word.
    Case-sensitive.
    """
    return SearchPattern.compile(
        rf"(?<!\w){re.escape(word)}(?!\w)",
        global_search=global_search,
    )


def prepare_fuzzy(text: str) -> str:
    r"""Interleave the characters of ``text`` with ``\w*`` wildcards.

    ``"init"`` becomes ``\w*i\w*n\w*i\w*t``.
    """
    return "".join(r"\w*" + re.escape(ch) for ch in text)


def fuzzy_pattern(label: str) -> re.Pattern[str]:
    r"""Loose, case-insensitive pattern for completion-style label matching.

    The label is split at its last dot. The module part is kept literally,
    the last part may have other word characters in between and after its
    characters: ``"sound.init"`` becomes ``sound\.\w*i\w*n\w*i\w*t\w*`` and
    would also match ``"sound.initialize"``.
    """
    k = label.rfind(".")
    prefix = label[: k + 1]
    last_part = label[k + 1 :]
    return re.compile(re.escape(prefix) + prepare_fuzzy(last_part) + r"\w*", re.IGNORECASE)


def get_last_label_part(label: str) -> str:
    """Return the last part of a dotted label.

    ``"explosion.init"`` gives ``"init"``, ``"check_all"`` is returned as is.
    """
    return label.rsplit(".", 1)[-1]


def label_colon_pattern(language_id: LanguageId) -> SearchPattern:
    """Label definitions terminated by a colon, indented or not."""
    lead = LIST_PREFIX if language_id == LanguageId.ASM_LIST_FILE else ""
    return SearchPattern.compile(
        rf"^(?P<{PREFIX_GROUP}>{lead}\s*@?)(?P<{LABEL_GROUP}>{_LABEL})(?=:)",
        global_search=False,
        prefix_groups=(PREFIX_GROUP,),
    )


def label_without_colon_pattern() -> SearchPattern:
    """Label definitions at column 0 without a colon (assembler sources only)."""
    keywords = "|".join(_KEYWORDS)
    return SearchPattern.compile(
        rf"^(?P<{PREFIX_GROUP}>@?)(?!(?i:{keywords})(?:\s|$))"
        rf"(?P<{LABEL_GROUP}>{_LABEL})(?=\s|$)",
        global_search=False,
        prefix_groups=(PREFIX_GROUP,),
    )


def label_patterns(settings: Settings, language_id: LanguageId) -> list[SearchPattern]:
    """The label definition patterns enabled for a language.

    List files only support colon-terminated labels, since a word after the
    listing columns is usually an instruction.
    """
    patterns: list[SearchPattern] = []
    if settings.labels_with_colons:
        patterns.append(label_colon_pattern(language_id))
    if settings.labels_without_colons and language_id == LanguageId.ASM_COLLECTION:
        patterns.append(label_without_colon_pattern())
    return patterns


__all__ = [
    "INCLUDE_DIRECTIVE",
    "LABEL_GROUP",
    "LIST_PREFIX",
    "MODULE_CLOSE",
    "MODULE_OPEN",
    "PREFIX_GROUP",
    "SearchPattern",
    "fuzzy_pattern",
    "get_last_label_part",
    "label_colon_pattern",
    "label_patterns",
    "label_without_colon_pattern",
    "prepare_fuzzy",
    "reference_pattern",
]
