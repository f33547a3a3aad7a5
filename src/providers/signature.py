"""Signature help for built-in and user function calls."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.results import (
    ParameterInformation,
    Position,
    SignatureHelp,
    SignatureInformation,
)
from parse.keywords import is_reserved
from parse.lines import WordSpan, is_code_offset, matching_paren, word_before
from utils import normalize_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.results import SignatureContext
    from models.stubs import StubTable
    from models.symbols import Symbol

_FUNCTION_KEYWORD = re.compile(r"^\s*function\s+", re.IGNORECASE)
_PARAM_NAME = re.compile(r"[A-Za-z_]\w*")
_STATEMENT_WORD = re.compile(r"\s*(?P<name>[A-Za-z_]\w*)")


def last_open_paren(text: str) -> int | None:
    """Index of the last ``(`` in ``text`` that is not closed, ignoring strings."""
    stack: list[int] = []
    in_quotes = False
    for index, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char == "(":
            stack.append(index)
        elif char == ")" and stack:
            stack.pop()
    return stack[-1] if stack else None


def active_parameter(text: str) -> int:
    """Zero-based index of the argument being typed at the end of ``text``.

    Counts the commas that are not nested inside brackets or strings since
    the last unmatched ``(``; ``Foo(1, 2, `` is on argument 2.
    """
    open_paren = last_open_paren(text)
    start = open_paren + 1 if open_paren is not None else 0
    count = 0
    depth = 0
    in_quotes = False
    for char in text[start:]:
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            count += 1
    return count


def _parameter_spans(label: str) -> list[tuple[int, int]]:
    """Offsets of each parameter inside a rendered signature label."""
    open_paren = label.find("(")
    if open_paren == -1:
        return []
    close_paren = matching_paren(label, open_paren)
    if close_paren is None:
        close_paren = len(label)
    spans: list[tuple[int, int]] = []
    start = open_paren + 1
    depth = 0
    in_quotes = False
    for index in range(open_paren + 1, close_paren + 1):
        char = label[index] if index < close_paren else ","
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        elif char == "," and depth == 0:
            segment = label[start:index]
            stripped = segment.strip()
            if stripped:
                offset = start + (len(segment) - len(segment.lstrip()))
                spans.append((offset, offset + len(stripped)))
            start = index + 1
    return spans


def _doc_key(doc: str) -> str | None:
    match = _PARAM_NAME.match(doc)
    return normalize_name(match.group()) if match else None


def _match_param_docs(
    label: str, spans: Sequence[tuple[int, int]], docs: Sequence[str]
) -> list[str | None]:
    """Pair parameter docs with parameters.

    A doc whose first word names a parameter belongs to it; the others
    are assigned by position.
    """
    names: list[str | None] = []
    for start, end in spans:
        match = _PARAM_NAME.search(label, start, end)
        names.append(normalize_name(match.group()) if match else None)

    by_name: dict[str, str] = {}
    for doc in docs:
        key = _doc_key(doc)
        if key is not None and key in names and key not in by_name:
            by_name[key] = doc

    matched: list[str | None] = []
    for index, name in enumerate(names):
        if name is not None and name in by_name:
            matched.append(by_name[name])
        elif index < len(docs) and _doc_key(docs[index]) not in by_name:
            matched.append(docs[index])
        else:
            matched.append(None)
    return matched


def build_signature(
    declaration: str, description: Sequence[str], param_docs: Sequence[str]
) -> SignatureInformation:
    label = _FUNCTION_KEYWORD.sub("", declaration).strip()
    spans = _parameter_spans(label)
    docs = _match_param_docs(label, spans, param_docs)
    return SignatureInformation(
        label=label,
        documentation="\n".join(description) or None,
        parameters=[
            ParameterInformation(label=span, documentation=doc)
            for span, doc in zip(spans, docs)
        ],
    )


def _collect_signatures(
    symbols: Sequence[Symbol], stubs: StubTable, name: str
) -> list[SignatureInformation]:
    signatures = [
        build_signature(stub.declaration, stub.description, stub.param_docs)
        for stub in stubs.lookup(name)
    ]
    key = normalize_name(name)
    for symbol in symbols:
        if symbol.kind == "function" and symbol.normalized_name == key:
            signatures.append(
                build_signature(symbol.declaration, symbol.doc_lines, symbol.param_docs)
            )
    return signatures


def _statement_word(line_text: str, cursor: int) -> WordSpan | None:
    match = _STATEMENT_WORD.match(line_text)
    if match is None or match.end() > cursor or is_reserved(match.group("name")):
        return None
    return WordSpan(match.start("name"), match.end(), match.group("name"))


def _retrigger(
    help_: SignatureHelp, line_text: str, position: Position
) -> SignatureHelp | None:
    start = help_.start
    if position.line != start.line or position.character < start.character:
        return None
    prefix = line_text[: position.character]
    if prefix.endswith(")"):
        return None
    return help_.model_copy(update={"active_parameter": active_parameter(prefix)})


def signature_help(
    symbols: Sequence[Symbol],
    stubs: StubTable,
    path: str,
    lines: Sequence[str],
    position: Position,
    context: SignatureContext | None = None,
) -> SignatureHelp | None:
    """Signatures for the call being typed at ``position``.

    A new session collects every built-in and user function named by the
    word before the open parenthesis (or the first word of the statement
    for calls written without brackets). A retrigger keeps the session and only moves
    the active parameter, closing it when the cursor leaves the line, moves
    before the start, or steps past a closing parenthesis.
    """
    if not 0 <= position.line < len(lines):
        return None
    line_text = lines[position.line]
    cursor = min(position.character, len(line_text))
    if not is_code_offset(line_text, cursor):
        return None

    if context is not None and context.trigger_kind == "retrigger" and context.active_help:
        return _retrigger(context.active_help, line_text, position)

    prefix = line_text[:cursor]
    open_paren = last_open_paren(prefix)
    if open_paren is not None:
        name = word_before(line_text, open_paren)
    else:
        name = _statement_word(line_text, cursor)
    if name is None:
        return None

    signatures = _collect_signatures(symbols, stubs, name.text)
    if not signatures:
        return None
    return SignatureHelp(
        signatures=signatures,
        active_signature=0,
        active_parameter=active_parameter(prefix),
        start=Position(line=position.line, character=cursor),
    )


__all__ = ["active_parameter", "build_signature", "last_open_paren", "signature_help"]
