"""Shared text and serialization utilities for bbls."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Sequence

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split source text into physical lines.

    CRLF, lone CR and lone LF all end a line, so a document saved with
    mixed line endings still maps one-to-one onto editor line numbers.

    Examples:
        >>> split_lines("a\\r\\nb\\rc\\nd")
        ['a', 'b', 'c', 'd']
        >>> split_lines("")
        ['']
    """
    return _LINE_BREAK.split(text)


def normalize_name(name: str) -> str:
    """Return the lookup key for an identifier.

    The language is case-insensitive; the key is the lower-cased name and
    nothing else is altered.

    Examples:
        >>> normalize_name("PlayerX")
        'playerx'
    """
    return name.lower()


def read_source(path: str | Path) -> str:
    """Read a source file as text.

    Sources are usually saved in a Windows codepage; text that is not valid
    UTF-8 is decoded as cp1252 with replacement characters.

    Raises:
        OSError: If the file cannot be read.
    """
    data = Path(path).read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("cp1252", errors="replace")


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if isinstance(obj, (list, tuple)):
        return [_to_dict(item) for item in obj]
    return obj


def dumps(obj: object, *, indent: bool = False) -> bytes:
    """Serialize models (or lists of models) to deterministic JSON bytes."""
    opts = orjson.OPT_SORT_KEYS
    if indent:
        opts |= orjson.OPT_INDENT_2
    return orjson.dumps(_to_dict(obj), option=opts)


def write_jsonl(path: Path, records: Sequence[object]) -> None:
    with path.open("wb") as f:
        for rec in records:
            f.write(dumps(rec))
            f.write(b"\n")
