"""Source file discovery for workspace indexing."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path

DEFAULT_EXTENSIONS = (".bb",)


def _should_include_file(
    path: Path,
    directory: Path,
    extensions: Sequence[str],
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: Sequence[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if path.suffix.lower() not in extensions:
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    if any(part.startswith(".") for part in rel_path.parts[:-1]):
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel_path_str = rel_path.as_posix()
    return not (
        exclude_patterns and any(fnmatch(rel_path_str, pat) for pat in exclude_patterns)
    )


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def find_source_files(
    directory: Path,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    exclude_patterns: Sequence[str] | None = None,
) -> Iterator[Path]:
    """Find all source files in a directory, respecting .gitignore.

    Args:
        directory: Workspace directory to search.
        extensions: Lower-case file suffixes (with the dot) to accept.
        exclude_patterns: Optional fnmatch patterns on the relative path;
            matching files are skipped.

    Yields:
        Paths sorted by relative path, so indexing order is deterministic.
    """
    wanted = tuple(extension.lower() for extension in extensions)
    gitignore_matches = _build_gitignore_matcher(directory)

    matched_files = [
        path
        for path in directory.rglob("*")
        if _should_include_file(path, directory, wanted, gitignore_matches, exclude_patterns)
    ]
    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


__all__ = ["DEFAULT_EXTENSIONS", "find_source_files"]
