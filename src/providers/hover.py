"""Hover information for the word under the cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.results import HoverResult
from models.symbols import SourceRange
from parse.lines import (
    is_code_offset,
    is_numeric,
    is_word_char,
    next_word,
    word_at,
    word_before,
)
from providers.keywords import PHRASE_FIRST_WORDS, keyword_doc, phrase
from providers.resolve import member_marker, resolve_member, resolve_symbol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.results import Position
    from models.stubs import Stub, StubTable
    from models.symbols import Symbol
    from parse.lines import WordSpan

CODE_FENCE = "```blitz3d"

_STORAGE_LABELS = {
    "global": "global variable",
    "local": "local variable",
    "parameter": "parameter",
    "field": "field",
}


def _fenced(declaration: str) -> str:
    return f"{CODE_FENCE}\n{declaration}\n```"


def _param_lines(param_docs: Sequence[str]) -> list[str]:
    lines = []
    for doc in param_docs:
        name, _, rest = doc.partition(" ")
        lines.append(f"*@param* `{name}` {rest}".rstrip())
    return lines


def _example_block(example: str) -> list[str]:
    if not example:
        return []
    return ["Example:", _fenced(example)]


def render_symbol(symbol: Symbol) -> str:
    """Markdown hover text for a user symbol, ending with its defining file."""
    sections = [_fenced(symbol.declaration)]
    if symbol.kind == "function":
        if symbol.doc_lines:
            sections.append("\n".join(symbol.doc_lines))
        if symbol.param_docs:
            sections.append("\n\n".join(_param_lines(symbol.param_docs)))
        sections.extend(_example_block(symbol.example))
    elif symbol.kind == "variable":
        label = "loop variable" if symbol.is_iterator else _STORAGE_LABELS[symbol.storage]
        if symbol.constant:
            label = "constant"
        sections.append(f"*({label})*")
        if symbol.description:
            sections.append(symbol.description)
    elif symbol.kind == "type":
        sections.append(f"*(type with {len(symbol.fields)} fields)*")
    else:
        sections.append("*(label)*")
    sections.append("---")
    sections.append(f"Defined in `{symbol.path}`")
    return "\n\n".join(sections)


def render_stub(stub: Stub) -> str:
    """Markdown hover text for a built-in; stubs have no defining file."""
    sections = [_fenced(stub.declaration)]
    if stub.description:
        sections.append("\n".join(stub.description))
    if stub.param_docs:
        sections.append("\n\n".join(_param_lines(stub.param_docs)))
    sections.extend(_example_block(stub.example))
    return "\n\n".join(sections)


def render_keyword(syntax: str, description: str) -> str:
    return f"{_fenced(syntax)}\n\n{description}"


def _span_range(line: int, start: int, end: int) -> SourceRange:
    return SourceRange(start_line=line, start_col=start, end_line=line, end_col=end)


def _phrase_hover(line_text: str, line: int, span: WordSpan) -> HoverResult | None:
    """Hover for two-word phrases such as ``End If`` or ``Else If``."""
    following = next_word(line_text, span.end)
    if following is not None and line_text[span.end : following.start].strip():
        following = None
    joined = phrase(span.text, following.text if following else None)
    if joined is not None and following is not None:
        start, end = span.start, following.end
    else:
        preceding = word_before(line_text, span.start)
        if preceding is None or preceding.text.lower() not in PHRASE_FIRST_WORDS:
            return None
        joined = phrase(preceding.text, span.text)
        start, end = preceding.start, span.end
    if joined is None:
        return None
    doc = keyword_doc(joined)
    if doc is None:
        return None
    return HoverResult(contents=render_keyword(*doc), range=_span_range(line, start, end))


def hover(
    symbols: Sequence[Symbol],
    stubs: StubTable,
    path: str,
    lines: Sequence[str],
    position: Position,
) -> HoverResult | None:
    """Hover text for the word at ``position``, or None.

    Whitespace, strings, comments and numeric literals never hover.
    User functions take precedence over built-ins of the same name;
    variables and labels never hide a built-in.
    """
    if not 0 <= position.line < len(lines):
        return None
    line_text = lines[position.line]
    offset = position.character
    if offset >= len(line_text) or not is_word_char(line_text[offset]):
        return None
    if not is_code_offset(line_text, offset):
        return None
    span = word_at(line_text, offset)
    if span is None or is_numeric(span.text):
        return None

    phrase_result = _phrase_hover(line_text, position.line, span)
    if phrase_result is not None:
        return phrase_result

    word_range = _span_range(position.line, span.start, span.end)
    if member_marker(line_text, span.start) is not None:
        member = resolve_member(symbols, path, position.line, line_text, span)
        if member is None:
            return None
        return HoverResult(contents=render_symbol(member), range=word_range)

    symbol = resolve_symbol(symbols, path, position.line, line_text, span)
    if symbol is not None and symbol.kind == "function":
        return HoverResult(contents=render_symbol(symbol), range=word_range)

    stub = stubs.first(span.text)
    if stub is not None:
        return HoverResult(contents=render_stub(stub), range=word_range)

    if symbol is not None:
        return HoverResult(contents=render_symbol(symbol), range=word_range)

    doc = keyword_doc(span.text)
    if doc is not None:
        return HoverResult(contents=render_keyword(*doc), range=word_range)
    return None


__all__ = ["hover", "render_keyword", "render_stub", "render_symbol"]
