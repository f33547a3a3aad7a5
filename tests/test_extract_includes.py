from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parse.extract import extract_symbols

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_included_symbols_are_spliced_in_place(tmp_path: Path) -> None:
    lib = _write(tmp_path / "lib.bb", "Global fromLib\nFunction Helper()\nEnd Function\n")
    main = _write(tmp_path / "main.bb", 'Global before\nInclude "lib.bb"\nGlobal after\n')

    symbols = extract_symbols(str(main), main.read_text(encoding="utf-8"))

    assert [symbol.name for symbol in symbols] == ["before", "fromLib", "Helper", "after"]
    assert symbols[1].path == str(lib)
    assert symbols[2].path == str(lib)
    assert symbols[0].path == str(main)


def test_include_resolves_against_first_workspace_root(tmp_path: Path) -> None:
    root = tmp_path / "root"
    _write(root / "lib" / "util.bb", "Global util\n")
    main = _write(tmp_path / "elsewhere" / "main.bb", 'Include "lib/util.bb"\n')

    symbols = extract_symbols(
        str(main), main.read_text(encoding="utf-8"), workspace_roots=[root]
    )

    assert [symbol.name for symbol in symbols] == ["util"]
    assert symbols[0].path == str(root / "lib" / "util.bb")


def test_missing_include_is_skipped_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    main = _write(tmp_path / "main.bb", 'Include "missing.bb"\nGlobal kept\n')

    with caplog.at_level(logging.WARNING, logger="parse.extract"):
        symbols = extract_symbols(str(main), main.read_text(encoding="utf-8"))

    assert [symbol.name for symbol in symbols] == ["kept"]
    assert "Cannot read included file" in caplog.text


def test_include_cycle_is_skipped(tmp_path: Path) -> None:
    a = _write(tmp_path / "a.bb", 'Include "b.bb"\nGlobal fromA\n')
    b = _write(tmp_path / "b.bb", 'Include "a.bb"\nGlobal fromB\n')

    symbols = extract_symbols(str(a), a.read_text(encoding="utf-8"))

    assert [symbol.name for symbol in symbols] == ["fromB", "fromA"]
    assert symbols[0].path == str(b)


def test_self_include_is_skipped(tmp_path: Path) -> None:
    main = _write(tmp_path / "main.bb", 'Include "main.bb"\nGlobal once\n')

    symbols = extract_symbols(str(main), main.read_text(encoding="utf-8"))

    assert [symbol.name for symbol in symbols] == ["once"]


def test_unguarded_cycle_stops_at_depth_limit(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    a = _write(tmp_path / "a.bb", 'Include "b.bb"\nGlobal fromA\n')
    _write(tmp_path / "b.bb", 'Include "a.bb"\nGlobal fromB\n')

    with caplog.at_level(logging.WARNING, logger="parse.extract"):
        symbols = extract_symbols(
            str(a),
            a.read_text(encoding="utf-8"),
            include_guard=False,
            max_include_depth=3,
        )

    assert {symbol.name for symbol in symbols} == {"fromA", "fromB"}
    assert "Include depth limit reached" in caplog.text


def test_diamond_includes_are_not_cycles(tmp_path: Path) -> None:
    _write(tmp_path / "shared.bb", "Type Shared\nEnd Type\n")
    _write(tmp_path / "left.bb", 'Include "shared.bb"\n')
    _write(tmp_path / "right.bb", 'Include "shared.bb"\n')
    main = _write(tmp_path / "main.bb", 'Include "left.bb"\nInclude "right.bb"\n')

    symbols = extract_symbols(str(main), main.read_text(encoding="utf-8"))

    assert [symbol.name for symbol in symbols] == ["Shared", "Shared"]
