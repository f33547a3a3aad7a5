"""Single-line classification helpers.

Comments start at the first ``;`` that is not inside a ``"`` string; strings
never span lines. Everything in the engine and the providers goes through
these helpers before trusting a regex match on a line.
"""

from __future__ import annotations

import re
from typing import NamedTuple

IDENTIFIER = re.compile(r"[A-Za-z_]\w*")
_NUMERIC = re.compile(r"\d+(?:\.\d*)?|\.\d+")


class WordSpan(NamedTuple):
    start: int
    end: int
    text: str


def comment_start(line: str) -> int | None:
    """Return the offset of the comment marker, or None if the line has none."""
    in_string = False
    for index, char in enumerate(line):
        if char == '"':
            in_string = not in_string
        elif char == ";" and not in_string:
            return index
    return None


def code_end(line: str) -> int:
    """Offset where code ends: the comment marker, or the end of the line."""
    start = comment_start(line)
    return len(line) if start is None else start


def strip_comment(line: str) -> str:
    return line[: code_end(line)]


def trailing_comment(line: str) -> str:
    """Text of the trailing comment without its marker, stripped."""
    start = comment_start(line)
    if start is None:
        return ""
    return line[start:].lstrip(";").strip()


def in_string(line: str, offset: int) -> bool:
    """True when ``offset`` lies inside a string literal.

    A position is inside a string when an odd number of quotes precede it.
    The quote characters themselves count as part of the string.
    """
    return line.count('"', 0, offset) % 2 == 1


def in_comment(line: str, offset: int) -> bool:
    start = comment_start(line)
    return start is not None and offset >= start


def is_code_offset(line: str, offset: int) -> bool:
    """True when ``offset`` is neither inside a string nor inside a comment."""
    return not in_string(line, offset) and not in_comment(line, offset)


def is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def is_word_boundary(line: str, start: int, end: int) -> bool:
    """True when ``line[start:end]`` is delimited by non-word characters."""
    if start > 0 and is_word_char(line[start - 1]):
        return False
    return not (end < len(line) and is_word_char(line[end]))


def word_at(line: str, offset: int) -> WordSpan | None:
    """Return the word touching ``offset``.

    The cursor may sit just after the last character of a word, the way an
    editor reports a caret at the end of an identifier.
    """
    if not line:
        return None
    probe = min(offset, len(line))
    if probe == len(line) or not is_word_char(line[probe]):
        if probe > 0 and is_word_char(line[probe - 1]):
            probe -= 1
        else:
            return None
    start = probe
    while start > 0 and is_word_char(line[start - 1]):
        start -= 1
    end = probe
    while end < len(line) and is_word_char(line[end]):
        end += 1
    return WordSpan(start, end, line[start:end])


def word_before(line: str, offset: int) -> WordSpan | None:
    """Return the word ending at ``offset``, skipping intervening spaces."""
    index = offset
    while index > 0 and line[index - 1] in " \t":
        index -= 1
    if index == 0 or not is_word_char(line[index - 1]):
        return None
    return word_at(line, index - 1)


def next_word(line: str, offset: int) -> WordSpan | None:
    """Return the first word starting at or after ``offset``."""
    match = IDENTIFIER.search(line, offset)
    if match is None:
        return None
    return WordSpan(match.start(), match.end(), match.group())


def is_numeric(word: str) -> bool:
    return _NUMERIC.fullmatch(word) is not None


def iter_code_words(line: str):
    """Yield identifier spans outside strings and before any comment."""
    end = code_end(line)
    for match in IDENTIFIER.finditer(line, 0, end):
        if not is_word_boundary(line, match.start(), match.end()):
            continue
        if in_string(line, match.start()):
            continue
        yield WordSpan(match.start(), match.end(), match.group())


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on ``separator`` outside brackets, parentheses and strings."""
    parts: list[str] = []
    depth = 0
    in_quotes = False
    current: list[str] = []
    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        elif not in_quotes:
            if char in "([":
                depth += 1
            elif char in ")]":
                depth = max(depth - 1, 0)
            elif char == separator and depth == 0:
                parts.append("".join(current))
                current = []
                continue
        current.append(char)
    parts.append("".join(current))
    return parts


def matching_paren(text: str, open_index: int) -> int | None:
    """Index of the ``)`` closing the ``(`` at ``open_index``, ignoring strings."""
    depth = 0
    in_quotes = False
    for index in range(open_index, len(text)):
        char = text[index]
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


__all__ = [
    "IDENTIFIER",
    "WordSpan",
    "code_end",
    "comment_start",
    "in_comment",
    "in_string",
    "is_code_offset",
    "is_numeric",
    "is_word_boundary",
    "is_word_char",
    "iter_code_words",
    "matching_paren",
    "next_word",
    "split_top_level",
    "strip_comment",
    "trailing_comment",
    "word_at",
    "word_before",
]
