"""Documentation records for built-in functions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from utils import normalize_name


class Stub(BaseModel):
    """Pre-authored documentation for one built-in function."""

    model_config = ConfigDict(frozen=True)

    name: str
    declaration: str
    param_docs: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    example: str = ""
    source: str | None = Field(
        default=None, description="User library the stub was declared in, if any"
    )

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def takes_arguments(self) -> bool:
        """True when the declaration lists at least one parameter."""
        open_paren = self.declaration.find("(")
        if open_paren == -1:
            return False
        close_paren = self.declaration.rfind(")")
        inner = self.declaration[open_paren + 1 : close_paren if close_paren > open_paren else None]
        return bool(inner.strip())


class StubTable:
    """Immutable, name-indexed collection of stubs.

    Loaded once and shared read-only by every query.
    """

    __slots__ = ("_by_name", "_stubs")

    def __init__(self, stubs: tuple[Stub, ...] | list[Stub] = ()) -> None:
        self._stubs: tuple[Stub, ...] = tuple(stubs)
        by_name: dict[str, list[Stub]] = {}
        for stub in self._stubs:
            by_name.setdefault(stub.normalized_name, []).append(stub)
        self._by_name = {key: tuple(value) for key, value in by_name.items()}

    def __iter__(self):
        return iter(self._stubs)

    def __len__(self) -> int:
        return len(self._stubs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._by_name

    def lookup(self, name: str) -> tuple[Stub, ...]:
        return self._by_name.get(normalize_name(name), ())

    def first(self, name: str) -> Stub | None:
        matches = self.lookup(name)
        return matches[0] if matches else None

    def merged(self, extra: list[Stub] | tuple[Stub, ...]) -> StubTable:
        return StubTable((*self._stubs, *extra))


__all__ = ["Stub", "StubTable"]
