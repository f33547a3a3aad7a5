"""Line classification, declaration parsing and symbol extraction."""

from parse.context import accepts, pattern_accepts
from parse.extract import IncludeError, SymbolExtractor, extract_symbols
from parse.lines import comment_start, in_string, word_at
from parse.todos import find_todos

__all__ = [
    "IncludeError",
    "SymbolExtractor",
    "accepts",
    "comment_start",
    "extract_symbols",
    "find_todos",
    "in_string",
    "pattern_accepts",
    "word_at",
]
