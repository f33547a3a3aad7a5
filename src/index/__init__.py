"""Memoized symbol indexing."""

from index.cache import CacheStats, SymbolCache

__all__ = ["CacheStats", "SymbolCache"]
