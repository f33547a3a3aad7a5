"""Document outline (hierarchical document symbols)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.results import OutlineNode

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.symbols import Symbol, VariableSymbol


def _variable_node(symbol: VariableSymbol) -> OutlineNode:
    if symbol.storage == "parameter":
        kind = "parameter"
    elif symbol.storage == "field":
        kind = "field"
    elif symbol.constant:
        kind = "constant"
    else:
        kind = "variable"
    return OutlineNode(
        name=symbol.name,
        kind=kind,
        detail=symbol.declaration,
        range=symbol.scope if symbol.is_iterator else symbol.range,
        selection_range=symbol.range,
    )


def document_outline(symbols: Sequence[Symbol], path: str) -> list[OutlineNode]:
    """Outline of the symbols declared in ``path`` itself (not its includes)."""
    nodes: list[OutlineNode] = []
    for symbol in symbols:
        if symbol.path != path:
            continue
        if symbol.kind == "function":
            children = [_variable_node(local) for local in symbol.locals]
        elif symbol.kind == "type":
            children = [_variable_node(member) for member in symbol.fields]
        elif symbol.kind == "variable":
            nodes.append(_variable_node(symbol))
            continue
        else:
            children = []
        nodes.append(
            OutlineNode(
                name=symbol.name,
                kind=symbol.kind,
                detail=symbol.declaration,
                range=symbol.scope,
                selection_range=symbol.range,
                children=children,
            )
        )
    nodes.sort(key=lambda node: (node.range.start_line, node.range.start_col))
    return nodes


__all__ = ["document_outline"]
