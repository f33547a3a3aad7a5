"""Completion candidates.

Three disjoint modes, chosen from the text left of the cursor:

* after a ``\\`` field marker, the fields of the expression's declared type;
* after a type-introduction marker (``.``, ``New``, ``Each``, ...), types;
* anywhere else, every visible user symbol followed by every built-in.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.results import CompletionItem
from parse.context import TYPE_INTRODUCTION
from parse.lines import is_code_offset, is_word_char
from providers.resolve import iter_visible, member_marker, member_owner

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.results import Position
    from models.stubs import Stub, StubTable
    from models.symbols import FunctionSymbol, Symbol, TypeSymbol, VariableSymbol

_LABEL_DEFINITION = re.compile(r"^\s*\.\s*\Z")
_DECIMAL_POINT = re.compile(r"\d\.\s*\Z")


def _function_item(symbol: FunctionSymbol) -> CompletionItem:
    return CompletionItem(
        label=symbol.name,
        kind="function",
        detail=symbol.declaration,
        insert_text=f"{symbol.name}($0)",
        is_snippet=True,
        documentation="\n".join(symbol.doc_lines) or None,
        trigger_parameter_hints=True,
    )


def _type_item(symbol: TypeSymbol) -> CompletionItem:
    return CompletionItem(
        label=symbol.name,
        kind="type",
        detail=symbol.declaration,
        insert_text=symbol.name,
    )


def _variable_item(symbol: VariableSymbol) -> CompletionItem:
    if symbol.storage == "parameter":
        kind = "parameter"
    elif symbol.storage == "field":
        kind = "field"
    else:
        kind = "variable"
    return CompletionItem(
        label=symbol.name,
        kind=kind,
        detail=symbol.declaration,
        insert_text=symbol.name,
        documentation=symbol.description or None,
    )


def _symbol_item(symbol: Symbol) -> CompletionItem:
    if symbol.kind == "function":
        return _function_item(symbol)
    if symbol.kind == "type":
        return _type_item(symbol)
    if symbol.kind == "variable":
        return _variable_item(symbol)
    return CompletionItem(
        label=symbol.name,
        kind="label",
        detail=symbol.declaration,
        insert_text=symbol.name,
    )


def stub_item(stub: Stub, *, use_brackets_everywhere: bool = False) -> CompletionItem:
    """Completion for a built-in.

    Call brackets are inserted as a snippet when the built-in takes
    arguments, or for every built-in when brackets are configured.
    """
    if stub.takes_arguments:
        insert_text, is_snippet = f"{stub.name}(${{1}})", True
    elif use_brackets_everywhere:
        insert_text, is_snippet = f"{stub.name}()", True
    else:
        insert_text, is_snippet = stub.name, False
    return CompletionItem(
        label=stub.name,
        kind="builtin",
        detail=stub.declaration,
        insert_text=insert_text,
        is_snippet=is_snippet,
        documentation="\n".join(stub.description) or None,
        trigger_parameter_hints=stub.takes_arguments,
    )


def _field_items(owner: TypeSymbol | None) -> list[CompletionItem]:
    if owner is None:
        return []
    return [_variable_item(member) for member in owner.fields]


def _type_items(symbols: Sequence[Symbol]) -> list[CompletionItem]:
    return [_type_item(symbol) for symbol in symbols if symbol.kind == "type"]


def _visible_items(
    symbols: Sequence[Symbol],
    stubs: StubTable,
    path: str,
    line: int,
    *,
    use_brackets_everywhere: bool,
) -> list[CompletionItem]:
    chosen: dict[str, Symbol] = {}
    for symbol in iter_visible(symbols, path, line, include_fields=False):
        existing = chosen.get(symbol.normalized_name)
        if existing is None or (existing.kind == "variable" and symbol.kind == "variable"):
            chosen[symbol.normalized_name] = symbol

    items = [_symbol_item(symbol) for symbol in chosen.values()]
    seen = set(chosen)
    for stub in stubs:
        if stub.normalized_name in seen:
            continue
        seen.add(stub.normalized_name)
        items.append(stub_item(stub, use_brackets_everywhere=use_brackets_everywhere))
    return items


def complete(
    symbols: Sequence[Symbol],
    stubs: StubTable,
    path: str,
    lines: Sequence[str],
    position: Position,
    *,
    trigger_character: str | None = None,
    use_brackets_everywhere: bool = False,
) -> list[CompletionItem]:
    """Completion candidates at ``position``.

    ``trigger_character`` is accepted for parity with editor requests; the
    mode is always derived from the text so that manual invocation after a
    marker behaves like the triggered request.
    """
    if not 0 <= position.line < len(lines):
        return []
    line_text = lines[position.line]
    cursor = min(position.character, len(line_text))
    if not is_code_offset(line_text, cursor):
        return []

    word_start = cursor
    while word_start > 0 and is_word_char(line_text[word_start - 1]):
        word_start -= 1
    before = line_text[:word_start]

    marker = member_marker(line_text, word_start)
    if marker is not None or trigger_character == "\\":
        if marker is None:
            return []
        owner = member_owner(symbols, path, position.line, line_text, marker)
        return _field_items(owner)

    if TYPE_INTRODUCTION.search(before):
        if _LABEL_DEFINITION.match(before) or _DECIMAL_POINT.search(before):
            return []
        return _type_items(symbols)

    return _visible_items(
        symbols,
        stubs,
        path,
        position.line,
        use_brackets_everywhere=use_brackets_everywhere,
    )


__all__ = ["complete", "stub_item"]
