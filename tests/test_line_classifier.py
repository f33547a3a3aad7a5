from __future__ import annotations

from parse.lines import (
    WordSpan,
    comment_start,
    in_comment,
    in_string,
    is_numeric,
    iter_code_words,
    matching_paren,
    split_top_level,
    trailing_comment,
    word_at,
    word_before,
)
from utils import normalize_name, split_lines


def test_comment_marker_inside_string_is_ignored() -> None:
    line = 'Print "a;b" ; note'

    assert comment_start(line) == 12
    assert comment_start("x = 1") is None
    assert trailing_comment(line) == "note"


def test_in_string_counts_preceding_quotes() -> None:
    line = 'Print "hello"'

    assert in_string(line, 8) is True
    assert in_string(line, 12) is True
    assert in_string(line, 13) is False
    assert in_string(line, 2) is False


def test_in_comment_starts_at_marker() -> None:
    line = "x = 1 ; set x"

    assert in_comment(line, 6) is True
    assert in_comment(line, 10) is True
    assert in_comment(line, 0) is False


def test_word_at_accepts_caret_after_word() -> None:
    assert word_at("Print score", 11) == WordSpan(6, 11, "score")
    assert word_at("Print score", 7) == WordSpan(6, 11, "score")
    assert word_at("a + b", 2) is None
    assert word_at("", 0) is None


def test_word_before_skips_spaces() -> None:
    assert word_before("Foo  (", 5) == WordSpan(0, 3, "Foo")
    assert word_before("(", 0) is None


def test_iter_code_words_skips_strings_and_comments() -> None:
    words = [span.text for span in iter_code_words('x = "y z" + w ; comment')]

    assert words == ["x", "w"]


def test_split_top_level_respects_nesting_and_strings() -> None:
    parts = split_top_level('a, b(1, 2), "x,y", c[3, 4]')

    assert parts == ["a", " b(1, 2)", ' "x,y"', " c[3, 4]"]


def test_matching_paren_skips_nested_calls() -> None:
    assert matching_paren("f(a(b), c)", 1) == 9
    assert matching_paren("f(a", 1) is None


def test_numeric_literals() -> None:
    assert is_numeric("12")
    assert is_numeric("1.5")
    assert is_numeric(".5")
    assert not is_numeric("a1")


def test_split_lines_handles_mixed_endings() -> None:
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


def test_normalize_name_only_lowercases() -> None:
    assert normalize_name("PlayerX") == "playerx"
    assert normalize_name("name$") == "name$"
