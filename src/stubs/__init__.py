"""Built-in and user-library function documentation."""

from stubs.decls import load_userlib_stubs, parse_decls
from stubs.table import (
    StubError,
    load_stub_file,
    load_stub_table,
    parse_stubs,
)

__all__ = [
    "StubError",
    "load_stub_file",
    "load_stub_table",
    "load_userlib_stubs",
    "parse_decls",
    "parse_stubs",
]
