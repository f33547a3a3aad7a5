from __future__ import annotations

from typing import TYPE_CHECKING

from models.results import Location, Position
from parse.extract import extract_symbols
from providers.definition import definition
from stubs.table import load_stub_table
from utils import split_lines

if TYPE_CHECKING:
    from pathlib import Path


def _definition(text: str, line: int, character: int, path: str = "main.bb") -> list[Location]:
    symbols = extract_symbols(path, text)
    return definition(
        symbols,
        load_stub_table(),
        path,
        split_lines(text),
        Position(line=line, character=character),
    )


def _location(path: str, line: int, character: int) -> Location:
    return Location(path=path, position=Position(line=line, character=character))


def test_definition_of_user_function() -> None:
    text = "Function Add(a, b)\nEnd Function\nPrint Add(1, 2)\n"

    assert _definition(text, 2, 7) == [_location("main.bb", 0, 9)]


def test_definition_of_parameter_inside_function() -> None:
    text = "Function Twice(value)\n\tReturn value * 2\nEnd Function\n"

    assert _definition(text, 1, 10) == [_location("main.bb", 0, 15)]


def test_builtins_have_no_definition() -> None:
    assert _definition("Cls\n", 0, 1) == []


def test_variable_named_like_builtin_does_not_hide_it() -> None:
    assert _definition("Global Cls\nCls\n", 1, 1) == []


def test_definition_of_field_after_marker() -> None:
    text = "Type Player\n\tField hp%\nEnd Type\nLocal p.Player = New Player\np\\hp = 3\n"

    assert _definition(text, 4, 3) == [_location("main.bb", 1, 7)]


def test_definition_of_nested_field_chain() -> None:
    text = (
        "Type Vec\n"
        "\tField x#\n"
        "End Type\n"
        "Type Ship\n"
        "\tField pos.Vec\n"
        "End Type\n"
        "Local s.Ship = New Ship\n"
        "Print s\\pos\\x\n"
    )

    assert _definition(text, 7, 12) == [_location("main.bb", 1, 7)]


def test_definition_of_label() -> None:
    assert _definition(".start\nGoto start\n", 1, 6) == [_location("main.bb", 0, 1)]


def test_definition_in_included_file(tmp_path: Path) -> None:
    lib = tmp_path / "lib.bb"
    lib.write_text("Global shared\n", encoding="utf-8")
    main = tmp_path / "main.bb"
    text = 'Include "lib.bb"\nPrint shared\n'
    main.write_text(text, encoding="utf-8")

    assert _definition(text, 1, 7, path=str(main)) == [_location(str(lib), 0, 7)]


def test_unresolved_word_has_no_definition() -> None:
    assert _definition("Print nothing\n", 0, 8) == []
    assert _definition('Print "nothing"\n', 0, 8) == []
