from __future__ import annotations

from typing import TYPE_CHECKING

from parse.extract import extract_symbols
from parse.todos import find_todos
from providers.outline import document_outline

if TYPE_CHECKING:
    from pathlib import Path


def test_outline_is_hierarchical_and_sorted(tmp_path: Path) -> None:
    (tmp_path / "lib.bb").write_text("Global fromLib\n", encoding="utf-8")
    main = tmp_path / "main.bb"
    text = (
        'Include "lib.bb"\n'
        "Const MAX = 3\n"
        "Type Point\n"
        "\tField x, y\n"
        "End Type\n"
        "Function Plot(p.Point)\n"
        "\tLocal scale = 2\n"
        "End Function\n"
        ".done\n"
    )
    main.write_text(text, encoding="utf-8")

    nodes = document_outline(extract_symbols(str(main), text), str(main))

    assert [(node.name, node.kind) for node in nodes] == [
        ("MAX", "constant"),
        ("Point", "type"),
        ("Plot", "function"),
        ("done", "label"),
    ]
    point, plot = nodes[1], nodes[2]
    assert [(child.name, child.kind) for child in point.children] == [("x", "field"), ("y", "field")]
    assert [(child.name, child.kind) for child in plot.children] == [
        ("p", "parameter"),
        ("scale", "variable"),
    ]
    assert plot.range.start_line == 5
    assert plot.range.end_line == 7
    assert plot.selection_range.start_col == 9


def test_todos_in_comments_only() -> None:
    text = (
        "; TODO: load the level\n"
        "Print 1 ; FIXME broken\n"
        'Print "; TODO not a comment"\n'
        ";todo lower case is ignored\n"
    )

    items = find_todos(text)

    assert [(item.line, item.character, item.tag, item.text) for item in items] == [
        (0, 2, "TODO", "load the level"),
        (1, 10, "FIXME", "broken"),
    ]


def test_todos_with_custom_tags() -> None:
    items = find_todos("; HACK skip intro\n; TODO later\n", ["HACK"])

    assert [(item.tag, item.text) for item in items] == [("HACK", "skip intro")]
    assert find_todos("; TODO x\n", []) == []
