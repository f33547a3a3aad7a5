from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from parse.extract import extract_symbols
from verify.verify import DeterminismResult, verify_determinism

if TYPE_CHECKING:
    from pathlib import Path

    from models.symbols import Symbol


def _write_source(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "lib.bb").write_text("Const LIMIT = 3\n", encoding="utf-8")
    source = root / "main.bb"
    source.write_text(
        'Include "lib.bb"\n'
        "Type Point\n\tField x, y\nEnd Type\n"
        "Function Plot(p.Point)\n\tLocal n\nEnd Function\n"
        "Global origin.Point = New Point\n",
        encoding="utf-8",
    )
    return source


def test_verify_determinism_requires_source_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Source file does not exist"):
        verify_determinism(path=tmp_path / "missing.bb")


def test_verify_determinism_passes_for_real_extraction(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "repo")

    result = verify_determinism(path=source)

    assert result.ok is True
    assert result.mismatches == ()
    assert result.symbol_count == 4


def test_verify_determinism_reports_drifting_passes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "main.bb"
    source.write_text("Global steady\n", encoding="utf-8")
    calls: list[int] = []

    class _DriftingExtractor:
        def __init__(self, **kwargs: object) -> None:
            pass

        def extract(self, path: str, text: str) -> list[Symbol]:
            calls.append(len(calls))
            return extract_symbols(path, f"Global drift{len(calls)}\n")

    monkeypatch.setattr("verify.verify.SymbolExtractor", _DriftingExtractor)

    result = verify_determinism(path=source)

    assert result == DeterminismResult(
        ok=False,
        symbol_count=1,
        mismatches=("second-pass", "cache-miss", "cache-hit"),
    )
    assert len(calls) == 2
