"""Determinism verification for symbol extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from index.cache import SymbolCache
from parse.extract import SymbolExtractor
from utils import dumps, read_source

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from models.symbols import Symbol


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    symbol_count: int = 0
    mismatches: tuple[str, ...] = field(default_factory=tuple)


def verify_determinism(
    *,
    path: Path,
    workspace_roots: Sequence[str | Path] = (),
    include_guard: bool = True,
    max_include_depth: int = 32,
) -> DeterminismResult:
    """Verify that extraction of one file is deterministic.

    Runs two fresh extraction passes and two passes through a new
    ``SymbolCache`` (a miss, then a hit) over the same text, and compares
    their serialized symbol lists byte-for-byte against the first pass.

    Args:
        path: Source file to extract.
        workspace_roots: Roots used to resolve include directives.
        include_guard: Whether include cycles are skipped.
        max_include_depth: Include nesting limit.

    Returns:
        DeterminismResult naming every pass whose output differed.

    Raises:
        FileNotFoundError: If path does not exist.
        OSError: If path cannot be read.
    """
    if not path.is_file():
        msg = f"Source file does not exist: {path}"
        raise FileNotFoundError(msg)
    text = read_source(path)
    document = str(path)

    def fresh_pass() -> list[Symbol]:
        extractor = SymbolExtractor(
            workspace_roots=workspace_roots,
            include_guard=include_guard,
            max_include_depth=max_include_depth,
        )
        return extractor.extract(document, text)

    cache = SymbolCache(
        workspace_roots=workspace_roots,
        include_guard=include_guard,
        max_include_depth=max_include_depth,
    )
    baseline_symbols = fresh_pass()
    baseline = dumps(baseline_symbols)

    passes = (
        ("second-pass", dumps(fresh_pass())),
        ("cache-miss", dumps(cache.symbols(document, text))),
        ("cache-hit", dumps(cache.symbols(document, text))),
    )
    mismatches = tuple(label for label, output in passes if output != baseline)
    return DeterminismResult(
        ok=not mismatches,
        symbol_count=len(baseline_symbols),
        mismatches=mismatches,
    )
