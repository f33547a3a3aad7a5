"""User library declarations (``.decls`` files).

Each file lists functions exported by a DLL under a ``.lib`` header::

    .lib "bass.dll"
    BASS_Init%(device%, freq%, flags%, win%, clsid%):"BASS_Init"

Every declaration becomes a stub so user-library calls get the same hover,
completion and signature help as built-ins.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from models.stubs import Stub
from parse.lines import strip_comment
from utils import read_source, split_lines

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_LIB = re.compile(r'^\s*\.lib\s+"(?P<lib>[^"]*)"', re.IGNORECASE)
_DECL = re.compile(
    r"""^\s*(?P<signature>(?P<name>[A-Za-z_]\w*)\s*[%\#$]?\s*(?:\((?P<params>[^)]*)\))?)
    \s*(?::\s*"(?P<symbol>[^"]*)")?\s*$""",
    re.VERBOSE,
)


def parse_decls(text: str, *, source: str) -> list[Stub]:
    """Parse one ``.decls`` file into stubs."""
    stubs: list[Stub] = []
    library = ""
    for raw in split_lines(text):
        line = strip_comment(raw).strip()
        if not line:
            continue
        match = _LIB.match(line)
        if match:
            library = match.group("lib").strip()
            continue
        match = _DECL.match(line)
        if match is None:
            continue
        signature = match.group("signature").strip()
        if "(" not in signature:
            signature += "()"
        origin = f"{library} ({source})" if library else source
        stubs.append(
            Stub(
                name=match.group("name"),
                declaration=f"Function {signature}",
                description=(f"Declared in user library {origin}.",),
                source=source,
            )
        )
    return stubs


def load_userlib_stubs(directory: Path) -> list[Stub]:
    """Load every ``*.decls`` file in ``directory``, sorted by name.

    Unreadable files are logged and skipped.
    """
    if not directory.is_dir():
        logger.warning("Userlibs directory %s does not exist", directory)
        return []
    stubs: list[Stub] = []
    for path in sorted(directory.glob("*.decls"), key=lambda p: p.name.lower()):
        try:
            text = read_source(path)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            continue
        stubs.extend(parse_decls(text, source=path.name))
    return stubs


__all__ = ["load_userlib_stubs", "parse_decls"]
