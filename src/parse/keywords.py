"""Reserved words of the language (lower-cased)."""

from __future__ import annotations

RESERVED_WORDS = frozenset(
    {
        "after",
        "and",
        "before",
        "case",
        "const",
        "data",
        "default",
        "delete",
        "dim",
        "each",
        "else",
        "elseif",
        "end",
        "endfunction",
        "endif",
        "endselect",
        "endtype",
        "exit",
        "false",
        "field",
        "first",
        "float",
        "for",
        "forever",
        "function",
        "global",
        "gosub",
        "goto",
        "if",
        "include",
        "insert",
        "int",
        "last",
        "local",
        "mod",
        "new",
        "next",
        "not",
        "null",
        "or",
        "pi",
        "read",
        "repeat",
        "restore",
        "return",
        "sar",
        "select",
        "shl",
        "shr",
        "step",
        "str",
        "then",
        "to",
        "true",
        "type",
        "until",
        "wend",
        "while",
        "xor",
    }
)


def is_reserved(word: str) -> bool:
    return word.lower() in RESERVED_WORDS


__all__ = ["RESERVED_WORDS", "is_reserved"]
