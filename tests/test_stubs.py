from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from models.stubs import Stub, StubTable
from stubs.decls import load_userlib_stubs, parse_decls
from stubs.table import StubError, load_stub_file, load_stub_table, parse_stubs

if TYPE_CHECKING:
    from pathlib import Path


def test_parse_stubs_collects_documentation_blocks() -> None:
    text = (
        "; header comment\n"
        ";; Draws a box.\n"
        ";; Filled by default.\n"
        ";;param x left edge\n"
        ";;example Box 1, 2\n"
        "Function Box(x, y)\n"
        "End Function\n"
        "Function Bare()\n"
    )

    box, bare = parse_stubs(text, source="custom.bb")

    assert box.name == "Box"
    assert box.declaration == "Function Box(x, y)"
    assert box.description == ("Draws a box.", "Filled by default.")
    assert box.param_docs == ("x left edge",)
    assert box.example == "Box 1, 2"
    assert box.source == "custom.bb"
    assert bare.description == ()
    assert bare.takes_arguments is False
    assert box.takes_arguments is True


def test_bundled_table_is_case_insensitive() -> None:
    table = load_stub_table()

    assert len(table) >= 50
    assert "graphics" in table
    assert "GRAPHICS" in table
    assert table.first("cls").declaration == "Function Cls()"
    assert table.lookup("NoSuchCommand") == ()


def test_table_is_loaded_once() -> None:
    assert load_stub_table() is load_stub_table()


def test_stub_table_keeps_duplicates_in_order() -> None:
    first = Stub(name="Dup", declaration="Function Dup()")
    second = Stub(name="DUP", declaration="Function DUP(x)")

    table = StubTable([first]).merged([second])

    assert table.lookup("dup") == (first, second)
    assert table.first("dup") is first


def test_parse_decls() -> None:
    text = (
        '.lib "bass.dll"\n'
        'BASS_Init%(device%, freq%):"BASS_Init"\n'
        "BASS_Free\n"
        "; comment only\n"
        "not a declaration line!\n"
    )

    stubs = parse_decls(text, source="bass.decls")

    assert [stub.name for stub in stubs] == ["BASS_Init", "BASS_Free"]
    assert stubs[0].declaration == "Function BASS_Init%(device%, freq%)"
    assert stubs[1].declaration == "Function BASS_Free()"
    assert "bass.dll" in stubs[0].description[0]
    assert stubs[0].takes_arguments is True


def test_userlibs_are_merged_after_builtins(tmp_path: Path) -> None:
    userlibs = tmp_path / "userlibs"
    userlibs.mkdir()
    (userlibs / "b.decls").write_text('.lib "b.dll"\nBeta(x)\n', encoding="utf-8")
    (userlibs / "a.decls").write_text('.lib "a.dll"\nAlpha()\n', encoding="utf-8")

    assert [stub.name for stub in load_userlib_stubs(userlibs)] == ["Alpha", "Beta"]

    table = load_stub_table(userlibs_dir=str(userlibs))
    names = [stub.name for stub in table]
    assert names[-2:] == ["Alpha", "Beta"]
    assert "Graphics" in names


def test_missing_userlibs_directory_is_empty(tmp_path: Path) -> None:
    assert load_userlib_stubs(tmp_path / "missing") == []


def test_custom_stub_file_replaces_bundled(tmp_path: Path) -> None:
    stub_file = tmp_path / "mine.bb"
    stub_file.write_text(";; Mine.\nFunction Only(a)\n", encoding="utf-8")

    table = load_stub_table(stub_path=str(stub_file))

    assert [stub.name for stub in table] == ["Only"]


def test_unreadable_stub_file_raises(tmp_path: Path) -> None:
    with pytest.raises(StubError, match="Cannot read stub file"):
        load_stub_file(tmp_path / "missing.bb")
