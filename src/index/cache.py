"""Revision-keyed memoization of extraction passes.

An extraction pass depends on the document text and on every file it
includes. Entries are keyed by document path, a hash of the text and the
include settings; each entry also records the modification time and size
of every included file read during the pass, and every include that
could not be read, and is discarded as soon as one of them changes or
appears, so a cache hit always equals a fresh pass.

Thread-safe: the lock only guards the entry map, extraction itself runs
outside it so concurrent queries never wait on each other's passes.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from parse.extract import MISSING_FILE, SymbolExtractor

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.symbols import Symbol

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, tuple[str, ...], bool, int]


@dataclass
class CacheEntry:
    symbols: list[Symbol]
    file_dependencies: dict[str, tuple[int, int]] = field(default_factory=dict)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    invalidations: int = 0
    evictions: int = 0


def _content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()


def _dependencies_current(dependencies: dict[str, tuple[int, int]]) -> bool:
    for path, stamp in dependencies.items():
        try:
            stat = Path(path).stat()
        except OSError:
            if stamp == MISSING_FILE:
                continue
            return False
        if stat.st_mtime_ns != stamp[0] or stat.st_size != stamp[1]:
            return False
    return True


class SymbolCache:
    """LRU cache of extraction results.

    The returned lists are shared between callers and must be treated as
    read-only.
    """

    MAX_ENTRIES: int = 64

    def __init__(
        self,
        *,
        workspace_roots: Sequence[str | Path] = (),
        include_guard: bool = True,
        max_include_depth: int = 32,
        max_entries: int | None = None,
    ) -> None:
        self.workspace_roots = tuple(str(root) for root in workspace_roots)
        self.include_guard = include_guard
        self.max_include_depth = max_include_depth
        self.max_entries = max_entries if max_entries is not None else self.MAX_ENTRIES
        self._lock = threading.Lock()
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self.stats = CacheStats()

    def _key(self, path: str, text: str) -> CacheKey:
        return (
            path,
            _content_hash(text),
            self.workspace_roots,
            self.include_guard,
            self.max_include_depth,
        )

    def symbols(self, path: str, text: str) -> list[Symbol]:
        """Return the symbols of ``text``, reusing a still-valid earlier pass."""
        key = self._key(path, text)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if _dependencies_current(entry.file_dependencies):
                    self._entries.move_to_end(key)
                    self.stats.hits += 1
                    logger.debug("Symbol cache hit for %s", path)
                    return entry.symbols
                del self._entries[key]
                self.stats.invalidations += 1
            self.stats.misses += 1

        logger.debug("Symbol cache miss for %s", path)
        dependencies: dict[str, tuple[int, int]] = {}
        extractor = SymbolExtractor(
            workspace_roots=self.workspace_roots,
            include_guard=self.include_guard,
            max_include_depth=self.max_include_depth,
            dependencies=dependencies,
        )
        symbols = extractor.extract(path, text)

        with self._lock:
            self._entries[key] = CacheEntry(symbols=symbols, file_dependencies=dependencies)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                self.stats.evictions += 1
        return symbols

    def invalidate(self, path: str | None = None) -> None:
        """Drop entries for ``path``, or every entry when no path is given."""
        with self._lock:
            if path is None:
                self._entries.clear()
                return
            for key in [key for key in self._entries if key[0] == path]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheEntry", "CacheStats", "SymbolCache"]
