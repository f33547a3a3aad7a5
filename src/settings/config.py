from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "bbls.toml"


class BblsConfig(BaseModel):
    """Configuration for the language engine of one workspace."""

    model_config = ConfigDict(extra="forbid")

    use_brackets_everywhere: bool = Field(
        default=False,
        description="Insert call brackets for built-ins even when they take no arguments",
    )
    stub_path: str | None = Field(
        default=None,
        description="Stub file replacing the bundled built-in documentation",
    )
    userlibs_dir: str | None = Field(
        default=None,
        description="Directory of .decls user library declarations",
    )
    include_cycle_guard: bool = Field(
        default=True,
        description="Skip includes that re-enter a file already being included",
    )
    max_include_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum include nesting before a branch is abandoned",
    )
    todo_tags: list[str] = Field(
        default_factory=lambda: ["TODO", "FIXME"],
        description="Comment tags reported by the TODO scanner",
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: [".bb"],
        description="File extensions treated as source files when scanning",
    )

    @field_validator("source_extensions")
    @classmethod
    def validate_source_extensions(cls, v: list[str]) -> list[str]:
        for extension in v:
            if not extension.startswith("."):
                msg = f"Source extension '{extension}' must start with '.'"
                raise ValueError(msg)
        return [extension.lower() for extension in v]

    @field_validator("todo_tags")
    @classmethod
    def validate_todo_tags(cls, v: list[str]) -> list[str]:
        if any(not tag.strip() for tag in v):
            msg = "todo_tags must not contain empty tags"
            raise ValueError(msg)
        return v

    def resolve_path(self, root: Path, value: str | None) -> str | None:
        """Resolve a config-relative path against the workspace root."""
        if not value:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = root / path
        return str(path.resolve())


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> BblsConfig:
    """Load configuration from bbls.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return BblsConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return BblsConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
