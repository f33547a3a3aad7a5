"""Context guards deciding whether an occurrence refers to a symbol.

A name can be a variable, a type and a label at once (``For p.Player =
Each Player`` uses ``Player`` twice, for different things). Each symbol
carries a :class:`ReferencePattern`; an occurrence counts only when the
text around it satisfies that pattern.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING

from models.symbols import ReferencePattern
from parse.lines import in_comment, in_string, is_word_boundary

if TYPE_CHECKING:
    from models.symbols import Symbol

TYPE_PATTERN = ReferencePattern(
    before=r"(?:\.\s*|\b(?:new|each|type|first|last)\s+)",
)
VARIABLE_PATTERN = ReferencePattern(
    before=r"^(?!.*(?:[.\\]\s*|\b(?:new|each)\s+)\Z).*",
)
FIELD_PATTERN = ReferencePattern(before=r"(?:\\\s*|\bfield\b.*)")
LABEL_PATTERN = ReferencePattern(
    before=r"(?:^\s*\.|\b(?:goto|gosub|restore)\s+\.?)",
)
NO_PATTERN = ReferencePattern()

TYPE_INTRODUCTION = re.compile(TYPE_PATTERN.before + r"\Z", re.IGNORECASE)


@lru_cache(maxsize=64)
def _compile_before(pattern: str) -> re.Pattern[str]:
    return re.compile(f"(?:{pattern})\\Z", re.IGNORECASE)


@lru_cache(maxsize=64)
def _compile_after(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def pattern_accepts(pattern: ReferencePattern, before: str, after: str) -> bool:
    """Check the guard against the text before and after an occurrence."""
    if pattern.before is not None and _compile_before(pattern.before).search(before) is None:
        return False
    return not (
        pattern.after is not None and _compile_after(pattern.after).match(after) is None
    )


def accepts(symbol: Symbol, line: str, start: int, end: int) -> bool:
    """Decide whether ``line[start:end]`` is a reference to ``symbol``.

    Rejects partial words, occurrences inside strings or comments, and
    occurrences whose surroundings fail the symbol's guard.
    """
    if not is_word_boundary(line, start, end):
        return False
    if in_string(line, start) or in_comment(line, start):
        return False
    return pattern_accepts(symbol.pattern, line[:start], line[end:])


__all__ = [
    "FIELD_PATTERN",
    "LABEL_PATTERN",
    "NO_PATTERN",
    "TYPE_INTRODUCTION",
    "TYPE_PATTERN",
    "VARIABLE_PATTERN",
    "accepts",
    "pattern_accepts",
]
