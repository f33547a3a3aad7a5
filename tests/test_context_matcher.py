from __future__ import annotations

import pytest

from parse.context import (
    FIELD_PATTERN,
    LABEL_PATTERN,
    NO_PATTERN,
    TYPE_PATTERN,
    VARIABLE_PATTERN,
    accepts,
    pattern_accepts,
)
from parse.extract import extract_symbols


@pytest.mark.parametrize(
    ("before", "expected"),
    [
        ("Local p.", True),
        ("p = New ", True),
        ("For p.Player = Each ", True),
        ("Delete First ", True),
        ("Delete ", False),
        ("Insert a Before ", False),
        ("Insert a After ", False),
        ("Print ", False),
        ("", False),
    ],
)
def test_type_guard(before: str, expected: bool) -> None:
    assert pattern_accepts(TYPE_PATTERN, before, "") is expected


@pytest.mark.parametrize(
    ("before", "expected"),
    [
        ("", True),
        ("Print ", True),
        ("x = y + ", True),
        ("Local p.", False),
        ("p\\", False),
        ("p = New ", False),
        ("For p.Player = EACH ", False),
    ],
)
def test_variable_guard(before: str, expected: bool) -> None:
    assert pattern_accepts(VARIABLE_PATTERN, before, "") is expected


@pytest.mark.parametrize(
    ("before", "expected"),
    [
        ("Print p\\", True),
        ("Print p\\ ", True),
        ("\tField x, ", True),
        ("Print ", False),
    ],
)
def test_field_guard(before: str, expected: bool) -> None:
    assert pattern_accepts(FIELD_PATTERN, before, "") is expected


@pytest.mark.parametrize(
    ("before", "expected"),
    [
        (".", True),
        ("  .", True),
        ("Goto ", True),
        ("Gosub ", True),
        ("Restore .", True),
        ("x.", False),
        ("Print ", False),
    ],
)
def test_label_guard(before: str, expected: bool) -> None:
    assert pattern_accepts(LABEL_PATTERN, before, "") is expected


def test_unconstrained_pattern_accepts_everything() -> None:
    assert pattern_accepts(NO_PATTERN, "anything at all.", "(") is True


def test_accepts_rejects_strings_comments_and_partial_words() -> None:
    (score,) = extract_symbols("main.bb", "Global score\n")

    assert accepts(score, "Print score", 6, 11) is True
    assert accepts(score, 'Print "score"', 7, 12) is False
    assert accepts(score, "Print 1 ; score", 10, 15) is False
    assert accepts(score, "Print scores", 6, 11) is False
    assert accepts(score, "Print myscore", 8, 13) is False


def test_same_name_resolves_by_context() -> None:
    symbols = extract_symbols(
        "main.bb", "Type Player\nEnd Type\nGlobal Player\n"
    )
    type_symbol = next(symbol for symbol in symbols if symbol.kind == "type")
    variable = next(symbol for symbol in symbols if symbol.kind == "variable")
    line = "p.Player = New Player : Print Player"

    assert accepts(type_symbol, line, 2, 8) is True
    assert accepts(variable, line, 2, 8) is False
    assert accepts(type_symbol, line, 15, 21) is True
    assert accepts(variable, line, 15, 21) is False
    assert accepts(type_symbol, line, 30, 36) is False
    assert accepts(variable, line, 30, 36) is True
