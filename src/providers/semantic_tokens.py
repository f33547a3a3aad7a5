"""Semantic highlighting: classify every accepted symbol occurrence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.results import SemanticToken
from parse.context import accepts
from parse.lines import iter_code_words
from utils import normalize_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.results import TokenClass
    from models.symbols import FunctionSymbol, Symbol

TOKEN_TYPES: tuple[TokenClass, ...] = ("type", "function", "variable", "field", "parameter")


def _classify(symbol: Symbol) -> TokenClass | None:
    if symbol.kind == "function":
        return "function"
    if symbol.kind == "type":
        return "type"
    if symbol.kind == "variable":
        if symbol.storage == "field":
            return "field"
        if symbol.storage == "parameter":
            return "parameter"
        return "variable"
    return None


def _index(symbols: Sequence[Symbol]) -> dict[str, list[Symbol]]:
    index: dict[str, list[Symbol]] = {}
    for symbol in symbols:
        index.setdefault(symbol.normalized_name, []).append(symbol)
    return index


class _LineCandidates:
    """Candidate symbols per name, with the per-line visibility rules."""

    def __init__(self, symbols: Sequence[Symbol], path: str) -> None:
        self.path = path
        self.top_level = _index(symbols)
        self.fields = _index(
            [member for symbol in symbols if symbol.kind == "type" for member in symbol.fields]
        )
        self.functions: list[FunctionSymbol] = [
            symbol for symbol in symbols if symbol.kind == "function" and symbol.path == path
        ]
        self.locals = {id(function): _index(function.locals) for function in self.functions}

    def enclosing(self, line: int) -> FunctionSymbol | None:
        for function in self.functions:
            if function.scope.contains_line(line):
                return function
        return None

    def candidates(self, key: str, line: int, function: FunctionSymbol | None):
        for symbol in self.top_level.get(key, ()):
            if symbol.kind == "variable":
                if symbol.is_iterator:
                    if symbol.path != self.path or not symbol.scope.contains_line(line):
                        continue
                elif symbol.storage == "local" and function is not None:
                    continue
            yield symbol
        yield from self.fields.get(key, ())
        if function is not None:
            for local in self.locals[id(function)].get(key, ()):
                if local.is_iterator and not local.scope.contains_line(line):
                    continue
                yield local


def semantic_tokens(
    symbols: Sequence[Symbol], path: str, lines: Sequence[str]
) -> list[SemanticToken]:
    """Classified spans for every recognised occurrence, in document order.

    Each occurrence resolves the same way a hover would: the first
    accepted function or type wins, otherwise the last accepted variable.
    Fields are recognised anywhere a field marker precedes them; locals
    only inside their function.
    """
    lookup = _LineCandidates(symbols, path)
    tokens: list[SemanticToken] = []
    for line_number, line_text in enumerate(lines):
        function = lookup.enclosing(line_number)
        for span in iter_code_words(line_text):
            chosen: Symbol | None = None
            for candidate in lookup.candidates(normalize_name(span.text), line_number, function):
                if not accepts(candidate, line_text, span.start, span.end):
                    continue
                chosen = candidate
                if candidate.kind != "variable":
                    break
            if chosen is None:
                continue
            classification = _classify(chosen)
            if classification is None:
                continue
            tokens.append(
                SemanticToken(
                    line=line_number,
                    start=span.start,
                    length=span.end - span.start,
                    classification=classification,
                )
            )
    return tokens


def encode_tokens(
    tokens: Sequence[SemanticToken], legend: Sequence[str] = TOKEN_TYPES
) -> list[int]:
    """Encode tokens as relative ``(line, start, length, type, modifiers)`` integers."""
    data: list[int] = []
    previous_line = 0
    previous_start = 0
    for token in sorted(tokens, key=lambda t: (t.line, t.start)):
        delta_line = token.line - previous_line
        delta_start = token.start - previous_start if delta_line == 0 else token.start
        data.extend([delta_line, delta_start, token.length, legend.index(token.classification), 0])
        previous_line = token.line
        previous_start = token.start
    return data


__all__ = ["TOKEN_TYPES", "encode_tokens", "semantic_tokens"]
