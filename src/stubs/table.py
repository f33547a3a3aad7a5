"""Loading of the built-in function documentation table.

The stub file is plain source text in a fixed shape::

    ;; Sets the graphics mode.
    ;;param width screen width in pixels
    ;;example Graphics 640, 480
    Function Graphics(width, height, depth=0, mode=0)
    End Function

Description, parameter and example lines collected before a ``Function``
line belong to it. The table is parsed once per process and shared
read-only by every query.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path

from models.stubs import Stub, StubTable
from stubs.decls import load_userlib_stubs
from utils import read_source, split_lines

logger = logging.getLogger(__name__)

BUNDLED_STUBS = "stubs.bb"

_DOC_PARAM = re.compile(r"^\s*;;param\s+(?P<text>.*?)\s*$", re.IGNORECASE)
_DOC_EXAMPLE = re.compile(r"^\s*;;example(?:\s(?P<text>.*?))?\s*$", re.IGNORECASE)
_DOC = re.compile(r"^\s*;;(?: (?P<text>.*?))?\s*$")
_FUNCTION = re.compile(r"^\s*function\s+(?P<name>[A-Za-z_]\w*)", re.IGNORECASE)


class StubError(Exception):
    """Raised when a stub file cannot be read."""


def parse_stubs(text: str, *, source: str | None = None) -> list[Stub]:
    """Parse stub-file text into stubs, in file order."""
    stubs: list[Stub] = []
    description: list[str] = []
    params: list[str] = []
    example: list[str] = []

    for line in split_lines(text):
        match = _DOC_PARAM.match(line)
        if match:
            params.append(match.group("text"))
            continue
        match = _DOC_EXAMPLE.match(line)
        if match:
            example.append(match.group("text") or "")
            continue
        match = _DOC.match(line)
        if match:
            description.append(match.group("text") or "")
            continue
        match = _FUNCTION.match(line)
        if match:
            stubs.append(
                Stub(
                    name=match.group("name"),
                    declaration=line.strip(),
                    param_docs=tuple(params),
                    description=tuple(description),
                    example="\n".join(example),
                    source=source,
                )
            )
            description, params, example = [], [], []
    return stubs


def load_stub_file(path: str | Path) -> list[Stub]:
    try:
        text = read_source(path)
    except OSError as exc:
        msg = f"Cannot read stub file {path}: {exc}"
        raise StubError(msg) from exc
    return parse_stubs(text)


def _bundled_text() -> str:
    return resources.files("stubs").joinpath("data", BUNDLED_STUBS).read_text(
        encoding="utf-8"
    )


@lru_cache(maxsize=8)
def load_stub_table(
    stub_path: str | None = None,
    userlibs_dir: str | None = None,
) -> StubTable:
    """Load (once per argument set) the stub table.

    Args:
        stub_path: Stub file replacing the bundled one.
        userlibs_dir: Directory of ``.decls`` files whose functions are
            appended after the built-in stubs.
    """
    if stub_path:
        stubs = load_stub_file(stub_path)
    else:
        stubs = parse_stubs(_bundled_text())
    logger.debug("Loaded %d stubs from %s", len(stubs), stub_path or BUNDLED_STUBS)

    table = StubTable(stubs)
    if userlibs_dir:
        extra = load_userlib_stubs(Path(userlibs_dir))
        logger.debug("Loaded %d userlib stubs from %s", len(extra), userlibs_dir)
        table = table.merged(extra)
    return table


__all__ = [
    "BUNDLED_STUBS",
    "StubError",
    "load_stub_file",
    "load_stub_table",
    "parse_stubs",
]
