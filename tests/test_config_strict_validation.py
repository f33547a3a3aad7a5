from __future__ import annotations

from pathlib import Path

import pytest

from settings.config import BblsConfig, ConfigError, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "bbls.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "use_brackets_everywhere = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_include_depth_must_be_positive(tmp_path: Path) -> None:
    _write_config(tmp_path, "max_include_depth = 0")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_source_extensions_need_leading_dot(tmp_path: Path) -> None:
    _write_config(tmp_path, 'source_extensions = ["bb"]')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_todo_tag_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'todo_tags = ["TODO", " "]')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
use_brackets_everywhere = true
include_cycle_guard = false
max_include_depth = 8
todo_tags = ["TODO", "HACK"]
source_extensions = [".BB", ".bbi"]
stub_path = "docs/stubs.bb"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.use_brackets_everywhere is True
    assert config.include_cycle_guard is False
    assert config.max_include_depth == 8
    assert config.todo_tags == ["TODO", "HACK"]
    assert config.source_extensions == [".bb", ".bbi"]
    assert config.resolve_path(tmp_path, config.stub_path) == str(
        (tmp_path / "docs" / "stubs.bb").resolve()
    )


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert config == BblsConfig()
    assert config.include_cycle_guard is True
    assert config.max_include_depth == 32
    assert config.source_extensions == [".bb"]


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == BblsConfig()


def test_resolve_path_keeps_absolute_paths(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "userlibs"

    assert BblsConfig().resolve_path(Path("/unused"), str(absolute)) == str(absolute.resolve())
    assert BblsConfig().resolve_path(tmp_path, None) is None
