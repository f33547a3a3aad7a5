"""Position-based query providers."""

from providers.completion import complete
from providers.definition import definition
from providers.hover import hover
from providers.outline import document_outline
from providers.resolve import resolve_symbol
from providers.semantic_tokens import encode_tokens, semantic_tokens
from providers.service import LanguageService
from providers.signature import active_parameter, signature_help

__all__ = [
    "LanguageService",
    "active_parameter",
    "complete",
    "definition",
    "document_outline",
    "encode_tokens",
    "hover",
    "resolve_symbol",
    "semantic_tokens",
    "signature_help",
]
