"""Model namespace for bbls symbol, stub and query-result schemas."""

from models.results import (
    CompletionItem,
    HoverResult,
    Location,
    OutlineNode,
    ParameterInformation,
    Position,
    SemanticToken,
    SignatureContext,
    SignatureHelp,
    SignatureInformation,
    TodoItem,
)
from models.stubs import Stub, StubTable
from models.symbols import (
    FunctionSymbol,
    LabelSymbol,
    ReferencePattern,
    SourceRange,
    Symbol,
    TypeSymbol,
    VariableSymbol,
)

__all__ = [
    "CompletionItem",
    "FunctionSymbol",
    "HoverResult",
    "LabelSymbol",
    "Location",
    "OutlineNode",
    "ParameterInformation",
    "Position",
    "ReferencePattern",
    "SemanticToken",
    "SignatureContext",
    "SignatureHelp",
    "SignatureInformation",
    "SourceRange",
    "Stub",
    "StubTable",
    "Symbol",
    "TodoItem",
    "TypeSymbol",
    "VariableSymbol",
]
