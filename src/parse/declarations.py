"""Parsing of individual declaration parts.

A part is one comma-separated item of a ``Global``/``Local``/``Const``/
``Dim``/``Field`` line or of a function parameter list, e.g. ``x%``,
``name$ = "bob"``, ``p.Player``, ``grid[10]`` or ``map(20, 20)``.
Anything that does not parse cleanly degrades to an untyped declaration
instead of failing the pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from models.symbols import ValueType
from parse.lines import split_top_level
from utils import normalize_name

_PART = re.compile(
    r"""
    ^\s*(?P<name>[A-Za-z_]\w*)
    \s*(?P<suffix>[%\#$]|\.\s*(?P<type>[A-Za-z_]\w*))?
    \s*(?P<dims>\[[^\]]*\]|\([^)]*\))?
    \s*(?:=\s*(?P<default>.*?))?\s*$
    """,
    re.VERBOSE,
)
_NAME_ONLY = re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)")

SUFFIX_TYPES: dict[str, ValueType] = {
    "%": "integer",
    "#": "float",
    "$": "string",
}


@dataclass(frozen=True)
class ParsedPart:
    """One declared name with its type annotation."""

    name: str
    text: str
    value_type: ValueType = "untyped"
    type_name: str | None = None
    type_display: str | None = None
    array: bool = False
    default: str | None = None

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


def parse_suffix(suffix: str | None) -> tuple[ValueType, str | None, str | None]:
    """Map a type suffix to ``(value_type, normalized type name, display name)``."""
    if not suffix:
        return "untyped", None, None
    if suffix in SUFFIX_TYPES:
        return SUFFIX_TYPES[suffix], None, None
    type_display = suffix.lstrip(".").strip()
    if not type_display:
        return "untyped", None, None
    return "object", normalize_name(type_display), type_display


def parse_part(text: str) -> ParsedPart | None:
    """Parse one declaration part; return None when it has no leading name."""
    stripped = text.strip()
    match = _PART.match(stripped)
    if match is None:
        # Unparsable annotation: keep the name, drop the type.
        name_match = _NAME_ONLY.match(stripped)
        if name_match is None:
            return None
        return ParsedPart(name=name_match.group("name"), text=stripped)

    value_type, type_name, type_display = parse_suffix(match.group("suffix"))
    default = match.group("default")
    return ParsedPart(
        name=match.group("name"),
        text=stripped,
        value_type=value_type,
        type_name=type_name,
        type_display=type_display,
        array=match.group("dims") is not None,
        default=default if default else None,
    )


def parse_parts(text: str) -> list[ParsedPart]:
    """Parse a comma-separated declaration list, skipping unnamed parts."""
    parts: list[ParsedPart] = []
    for raw in split_top_level(text):
        parsed = parse_part(raw)
        if parsed is not None:
            parts.append(parsed)
    return parts


__all__ = ["SUFFIX_TYPES", "ParsedPart", "parse_part", "parse_parts", "parse_suffix"]
