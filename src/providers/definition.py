"""Go-to-definition."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.results import Location, Position
from parse.lines import is_code_offset, is_numeric, word_at
from providers.resolve import member_marker, resolve_member, resolve_symbol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.stubs import StubTable
    from models.symbols import Symbol


def definition(
    symbols: Sequence[Symbol],
    stubs: StubTable,
    path: str,
    lines: Sequence[str],
    position: Position,
) -> list[Location]:
    """Locations declaring the word at ``position``; empty when unresolved.

    Built-ins have no location; a variable or label sharing a built-in's
    name does not hide that, only a user function does.
    """
    if not 0 <= position.line < len(lines):
        return []
    line_text = lines[position.line]
    span = word_at(line_text, position.character)
    if span is None or is_numeric(span.text):
        return []
    if not is_code_offset(line_text, span.start):
        return []

    if member_marker(line_text, span.start) is not None:
        symbol: Symbol | None = resolve_member(
            symbols, path, position.line, line_text, span
        )
    else:
        symbol = resolve_symbol(symbols, path, position.line, line_text, span)
        if symbol is not None and symbol.kind != "function" and span.text in stubs:
            return []

    if symbol is None:
        return []
    return [
        Location(
            path=symbol.path,
            position=Position(line=symbol.range.start_line, character=symbol.range.start_col),
        )
    ]


__all__ = ["definition"]
