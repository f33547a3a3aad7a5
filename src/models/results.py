"""Result models returned by the query providers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from models.symbols import SourceRange

CompletionKind = Literal[
    "function",
    "builtin",
    "type",
    "variable",
    "parameter",
    "field",
    "label",
    "keyword",
]
TokenClass = Literal["type", "function", "variable", "field", "parameter"]
TriggerKind = Literal["invoke", "trigger", "retrigger"]


class Position(BaseModel):
    line: int
    character: int


class Location(BaseModel):
    path: str
    position: Position


class HoverResult(BaseModel):
    contents: str
    range: SourceRange


class CompletionItem(BaseModel):
    label: str
    kind: CompletionKind
    detail: str = ""
    insert_text: str
    is_snippet: bool = False
    documentation: str | None = None
    trigger_parameter_hints: bool = False


class ParameterInformation(BaseModel):
    """One parameter of a signature; ``label`` is a span into the signature label."""

    label: tuple[int, int]
    documentation: str | None = None


class SignatureInformation(BaseModel):
    label: str
    documentation: str | None = None
    parameters: list[ParameterInformation] = Field(default_factory=list)


class SignatureHelp(BaseModel):
    signatures: list[SignatureInformation]
    active_signature: int = 0
    active_parameter: int = 0
    start: Position = Field(
        description="Cursor position the help session was opened at"
    )


class SignatureContext(BaseModel):
    trigger_kind: TriggerKind = "invoke"
    trigger_character: str | None = None
    active_help: SignatureHelp | None = None


class SemanticToken(BaseModel):
    line: int
    start: int
    length: int
    classification: TokenClass


class OutlineNode(BaseModel):
    name: str
    kind: Literal["function", "type", "variable", "constant", "parameter", "field", "label"]
    detail: str = ""
    range: SourceRange
    selection_range: SourceRange
    children: list[OutlineNode] = Field(default_factory=list)


class TodoItem(BaseModel):
    line: int
    character: int
    tag: str
    text: str


__all__ = [
    "CompletionItem",
    "CompletionKind",
    "HoverResult",
    "Location",
    "OutlineNode",
    "ParameterInformation",
    "Position",
    "SemanticToken",
    "SignatureContext",
    "SignatureHelp",
    "SignatureInformation",
    "TodoItem",
    "TokenClass",
    "TriggerKind",
]
