"""TODO/FIXME markers in comments."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.results import TodoItem
from parse.lines import comment_start
from utils import split_lines

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_TAGS = ("TODO", "FIXME")


def find_todos(text: str, tags: Sequence[str] = DEFAULT_TAGS) -> list[TodoItem]:
    """Return one item per comment that starts with one of ``tags``.

    ``; TODO: load the level`` yields tag ``TODO`` and text
    ``load the level``. Tags are matched case-sensitively.
    """
    if not tags:
        return []
    pattern = re.compile(
        r";+\s*(?P<tag>" + "|".join(re.escape(tag) for tag in tags) + r")\b:?\s*(?P<text>.*)$"
    )
    items: list[TodoItem] = []
    for number, line in enumerate(split_lines(text)):
        start = comment_start(line)
        if start is None:
            continue
        match = pattern.match(line, start)
        if match is None:
            continue
        items.append(
            TodoItem(
                line=number,
                character=match.start("tag"),
                tag=match.group("tag"),
                text=match.group("text").strip(),
            )
        )
    return items


__all__ = ["DEFAULT_TAGS", "find_todos"]
