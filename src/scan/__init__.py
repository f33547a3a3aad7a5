"""Workspace file discovery."""

from scan.files import find_source_files

__all__ = ["find_source_files"]
