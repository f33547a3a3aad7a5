from __future__ import annotations

from parse.declarations import parse_part, parse_parts, parse_suffix


def test_suffix_types() -> None:
    assert parse_part("x%").value_type == "integer"
    assert parse_part("speed#").value_type == "float"
    assert parse_part("name$").value_type == "string"
    assert parse_part("plain").value_type == "untyped"


def test_default_value_is_kept() -> None:
    part = parse_part('name$ = "bob"')

    assert part is not None
    assert part.name == "name"
    assert part.default == '"bob"'
    assert part.text == 'name$ = "bob"'


def test_object_suffix_normalizes_type_name() -> None:
    part = parse_part("p.Player")

    assert part is not None
    assert part.value_type == "object"
    assert part.type_name == "player"
    assert part.type_display == "Player"


def test_array_dimensions() -> None:
    assert parse_part("grid[10]").array is True
    assert parse_part("map(20, 20)").array is True
    assert parse_part("x").array is False


def test_unnamed_part_is_skipped() -> None:
    assert parse_part("123") is None
    assert parse_part("   ") is None


def test_unparsable_annotation_degrades_to_untyped() -> None:
    part = parse_part("x@@")

    assert part is not None
    assert part.name == "x"
    assert part.value_type == "untyped"


def test_parse_parts_splits_top_level_commas() -> None:
    parts = parse_parts("a, b#, c.Foo = Null, grid(1, 2)")

    assert [part.name for part in parts] == ["a", "b", "c", "grid"]
    assert [part.value_type for part in parts] == ["untyped", "float", "object", "untyped"]
    assert parts[3].array is True


def test_parse_suffix_without_type_name() -> None:
    assert parse_suffix(".") == ("untyped", None, None)
    assert parse_suffix(None) == ("untyped", None, None)
