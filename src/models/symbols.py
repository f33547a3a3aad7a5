"""Symbol models produced by the extraction engine.

Every extraction pass builds a fresh, ordered list of these records. They
carry no identity beyond their content: two passes over the same text yield
equal (and identically serialized) collections.

Positions are zero-based ``(line, character)`` pairs, the way editors
address a document.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

SymbolKind = Literal["function", "type", "variable", "label"]
StorageKind = Literal["global", "local", "parameter", "field"]
ValueType = Literal["untyped", "integer", "float", "string", "object"]


class SourceRange(BaseModel):
    """A span of text; end character is exclusive, lines are inclusive."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    def encloses(self, other: SourceRange) -> bool:
        return self.start_line <= other.start_line and other.end_line <= self.end_line


class ReferencePattern(BaseModel):
    """Regex sources an occurrence's surroundings must satisfy.

    ``before`` is matched against the text preceding the occurrence and must
    match at its end; ``after`` against the text following it, anchored at
    its start. ``None`` means unconstrained.
    """

    before: str | None = None
    after: str | None = None


class _SymbolBase(BaseModel):
    name: str
    normalized_name: str
    path: str
    declaration: str
    range: SourceRange
    scope: SourceRange
    pattern: ReferencePattern = Field(default_factory=ReferencePattern)
    description: str = ""


class VariableSymbol(_SymbolBase):
    """A global, local, parameter or field.

    A variable with ``scope_end`` set is a loop iterator: it is only visible
    between its ``For`` line and the matching ``Next``.
    """

    kind: Literal["variable"] = "variable"
    storage: StorageKind
    value_type: ValueType = "untyped"
    type_name: str | None = Field(
        default=None, description="Normalized Type name when value_type is object"
    )
    array: bool = False
    constant: bool = False
    default: str | None = None
    scope_end: int | None = None

    @property
    def is_iterator(self) -> bool:
        return self.scope_end is not None


class FunctionSymbol(_SymbolBase):
    """A user function and the locals it owns."""

    kind: Literal["function"] = "function"
    return_type: ValueType = "untyped"
    return_type_name: str | None = None
    end_line: int
    locals: list[VariableSymbol] = Field(default_factory=list)
    doc_lines: list[str] = Field(default_factory=list)
    param_docs: list[str] = Field(default_factory=list)
    example: str = ""

    @property
    def parameters(self) -> list[VariableSymbol]:
        return [local for local in self.locals if local.storage == "parameter"]


class TypeSymbol(_SymbolBase):
    """A user-defined record type and its fields."""

    kind: Literal["type"] = "type"
    end_line: int
    fields: list[VariableSymbol] = Field(default_factory=list)


class LabelSymbol(_SymbolBase):
    """A jump target, visible document-wide."""

    kind: Literal["label"] = "label"


Symbol = Annotated[
    Union[FunctionSymbol, TypeSymbol, VariableSymbol, LabelSymbol],
    Field(discriminator="kind"),
]


__all__ = [
    "FunctionSymbol",
    "LabelSymbol",
    "ReferencePattern",
    "SourceRange",
    "StorageKind",
    "Symbol",
    "SymbolKind",
    "TypeSymbol",
    "ValueType",
    "VariableSymbol",
]
