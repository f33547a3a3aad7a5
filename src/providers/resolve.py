"""Shared name resolution for the query providers.

Resolution walks the symbols visible at a line in declaration order and
keeps the ones whose context guard accepts the occurrence. The first
function, type or label that matches wins outright. Variables do not stop
the walk: a later variable (a local declared after a global of the same
name, or a loop iterator reusing it) overrides an earlier one.

Locals of a function are only visible inside that function and are visited
after every top-level symbol, so they shadow globals. Loop iterators are
only visible between their ``For`` and ``Next`` lines, and top-level
``Local`` variables are invisible inside functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from parse.context import accepts
from parse.lines import word_before
from utils import normalize_name

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from models.symbols import FunctionSymbol, Symbol, TypeSymbol, VariableSymbol
    from parse.lines import WordSpan


def enclosing_function(
    symbols: Sequence[Symbol], path: str, line: int
) -> FunctionSymbol | None:
    """The function of ``path`` whose body contains ``line``, if any."""
    for symbol in symbols:
        if (
            symbol.kind == "function"
            and symbol.path == path
            and symbol.scope.contains_line(line)
        ):
            return symbol
    return None


def iter_visible(
    symbols: Sequence[Symbol],
    path: str,
    line: int,
    *,
    include_fields: bool = True,
) -> Iterator[Symbol]:
    """Yield the symbols that may be referenced at ``line`` of ``path``."""
    function = enclosing_function(symbols, path, line)
    owner_types: list[TypeSymbol] = []
    for symbol in symbols:
        if symbol.kind == "variable":
            if symbol.is_iterator:
                if symbol.path != path or not symbol.scope.contains_line(line):
                    continue
            elif symbol.storage == "local" and function is not None:
                continue
        elif (
            symbol.kind == "type"
            and include_fields
            and symbol.path == path
            and symbol.scope.contains_line(line)
        ):
            owner_types.append(symbol)
        yield symbol

    for owner in owner_types:
        yield from owner.fields

    if function is not None:
        for local in function.locals:
            if local.is_iterator and not local.scope.contains_line(line):
                continue
            yield local


def resolve_symbol(
    symbols: Sequence[Symbol],
    path: str,
    line: int,
    line_text: str,
    span: WordSpan,
) -> Symbol | None:
    """Resolve the word ``span`` on ``line`` to the symbol it refers to."""
    key = normalize_name(span.text)
    best: Symbol | None = None
    for candidate in iter_visible(symbols, path, line):
        if candidate.normalized_name != key:
            continue
        if not accepts(candidate, line_text, span.start, span.end):
            continue
        if candidate.kind == "variable":
            best = candidate
            continue
        return candidate
    return best


def find_type(symbols: Sequence[Symbol], type_name: str | None) -> TypeSymbol | None:
    if not type_name:
        return None
    key = normalize_name(type_name)
    for symbol in symbols:
        if symbol.kind == "type" and symbol.normalized_name == key:
            return symbol
    return None


def member_marker(line_text: str, start: int) -> int | None:
    """Index of the ``\\`` field marker directly before ``start``, if any."""
    index = start
    while index > 0 and line_text[index - 1] in " \t":
        index -= 1
    if index > 0 and line_text[index - 1] == "\\":
        return index - 1
    return None


def _skip_parens_backward(line_text: str, end: int) -> int | None:
    """Return the index of the ``(`` balancing the ``)`` at ``end - 1``."""
    depth = 0
    index = end - 1
    while index >= 0:
        char = line_text[index]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth == 0:
                return index
        index -= 1
    return None


def member_chain(line_text: str, marker: int) -> list[WordSpan] | None:
    """Words of the expression left of the field marker at ``marker``.

    ``a\\b(1)\\c\\`` with the marker at the last backslash gives
    ``[a, b, c]``. Array subscripts and call arguments are skipped.
    """
    chain: list[WordSpan] = []
    index = marker
    while True:
        end = index
        while end > 0 and line_text[end - 1] in " \t":
            end -= 1
        if end > 0 and line_text[end - 1] == ")":
            open_paren = _skip_parens_backward(line_text, end)
            if open_paren is None:
                return None
            end = open_paren
        word = word_before(line_text, end)
        if word is None:
            return None
        chain.insert(0, word)
        previous = member_marker(line_text, word.start)
        if previous is None:
            return chain
        index = previous


def _symbol_type_name(symbol: Symbol) -> str | None:
    if symbol.kind == "variable":
        return symbol.type_name
    if symbol.kind == "function":
        return symbol.return_type_name
    return None


def member_owner(
    symbols: Sequence[Symbol],
    path: str,
    line: int,
    line_text: str,
    marker: int,
) -> TypeSymbol | None:
    """Resolve the declared Type of the expression left of a field marker."""
    chain = member_chain(line_text, marker)
    if not chain:
        return None
    root = resolve_symbol(symbols, path, line, line_text, chain[0])
    if root is None:
        return None
    owner = find_type(symbols, _symbol_type_name(root))
    for segment in chain[1:]:
        if owner is None:
            return None
        member = find_field(owner, segment.text)
        if member is None:
            return None
        owner = find_type(symbols, member.type_name)
    return owner


def find_field(owner: TypeSymbol, name: str) -> VariableSymbol | None:
    key = normalize_name(name)
    for member in owner.fields:
        if member.normalized_name == key:
            return member
    return None


def resolve_member(
    symbols: Sequence[Symbol],
    path: str,
    line: int,
    line_text: str,
    span: WordSpan,
) -> VariableSymbol | None:
    """Resolve ``span`` as a field when it follows a field marker."""
    marker = member_marker(line_text, span.start)
    if marker is None:
        return None
    owner = member_owner(symbols, path, line, line_text, marker)
    if owner is None:
        return None
    return find_field(owner, span.text)


__all__ = [
    "enclosing_function",
    "find_field",
    "find_type",
    "iter_visible",
    "member_chain",
    "member_marker",
    "member_owner",
    "resolve_member",
    "resolve_symbol",
]
