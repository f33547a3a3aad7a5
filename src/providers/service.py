"""Entry point bundling extraction, stubs and the query providers.

Every public method runs a (possibly memoized) extraction pass over the
given text and answers one query. Providers never raise to their caller:
any unexpected failure is logged and answered with an empty result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from index.cache import SymbolCache
from models.results import Position
from parse.extract import SymbolExtractor
from parse.todos import find_todos
from providers.completion import complete
from providers.definition import definition
from providers.hover import hover
from providers.outline import document_outline
from providers.semantic_tokens import semantic_tokens
from providers.signature import signature_help
from settings.config import BblsConfig, load_config
from stubs.table import load_stub_table
from utils import split_lines

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.results import (
        CompletionItem,
        HoverResult,
        Location,
        OutlineNode,
        SemanticToken,
        SignatureContext,
        SignatureHelp,
        TodoItem,
    )
    from models.stubs import StubTable
    from models.symbols import Symbol

logger = logging.getLogger(__name__)


class LanguageService:
    """Answers editor queries for one workspace.

    Args:
        config: Workspace settings (defaults when omitted).
        workspace_roots: Roots used to resolve include directives.
        stubs: Stub table; loaded from the configured paths when omitted.
        cache: Extraction cache to share; a private one is created unless
            ``use_cache`` is False, in which case every query re-extracts.
    """

    def __init__(
        self,
        config: BblsConfig | None = None,
        *,
        workspace_roots: Sequence[str | Path] = (),
        stubs: StubTable | None = None,
        cache: SymbolCache | None = None,
        use_cache: bool = True,
    ) -> None:
        self.config = config if config is not None else BblsConfig()
        self.workspace_roots = tuple(str(root) for root in workspace_roots)
        if stubs is None:
            stubs = load_stub_table(self.config.stub_path, self.config.userlibs_dir)
        self.stubs = stubs
        if cache is None and use_cache:
            cache = SymbolCache(
                workspace_roots=self.workspace_roots,
                include_guard=self.config.include_cycle_guard,
                max_include_depth=self.config.max_include_depth,
            )
        self.cache = cache

    @classmethod
    def for_workspace(
        cls,
        root: Path,
        *,
        extra_roots: Sequence[Path] = (),
        use_cache: bool = True,
    ) -> LanguageService:
        """Build a service from ``bbls.toml`` under ``root``.

        ``root`` is also the first include root; ``extra_roots`` follow it.

        Raises:
            ConfigError: If the configuration file is invalid.
        """
        config = load_config(root)
        config = config.model_copy(
            update={
                "stub_path": config.resolve_path(root, config.stub_path),
                "userlibs_dir": config.resolve_path(root, config.userlibs_dir),
            }
        )
        return cls(config, workspace_roots=[root, *extra_roots], use_cache=use_cache)

    def symbols(self, path: str, text: str) -> list[Symbol]:
        if self.cache is not None:
            return self.cache.symbols(path, text)
        extractor = SymbolExtractor(
            workspace_roots=self.workspace_roots,
            include_guard=self.config.include_cycle_guard,
            max_include_depth=self.config.max_include_depth,
        )
        return extractor.extract(path, text)

    def hover(self, path: str, text: str, line: int, character: int) -> HoverResult | None:
        try:
            return hover(
                self.symbols(path, text),
                self.stubs,
                path,
                split_lines(text),
                Position(line=line, character=character),
            )
        except Exception:
            logger.exception("Hover failed for %s:%d:%d", path, line, character)
            return None

    def definition(self, path: str, text: str, line: int, character: int) -> list[Location]:
        try:
            return definition(
                self.symbols(path, text),
                self.stubs,
                path,
                split_lines(text),
                Position(line=line, character=character),
            )
        except Exception:
            logger.exception("Definition failed for %s:%d:%d", path, line, character)
            return []

    def complete(
        self,
        path: str,
        text: str,
        line: int,
        character: int,
        trigger_character: str | None = None,
    ) -> list[CompletionItem]:
        try:
            return complete(
                self.symbols(path, text),
                self.stubs,
                path,
                split_lines(text),
                Position(line=line, character=character),
                trigger_character=trigger_character,
                use_brackets_everywhere=self.config.use_brackets_everywhere,
            )
        except Exception:
            logger.exception("Completion failed for %s:%d:%d", path, line, character)
            return []

    def signature_help(
        self,
        path: str,
        text: str,
        line: int,
        character: int,
        context: SignatureContext | None = None,
    ) -> SignatureHelp | None:
        try:
            return signature_help(
                self.symbols(path, text),
                self.stubs,
                path,
                split_lines(text),
                Position(line=line, character=character),
                context,
            )
        except Exception:
            logger.exception("Signature help failed for %s:%d:%d", path, line, character)
            return None

    def semantic_tokens(self, path: str, text: str) -> list[SemanticToken]:
        try:
            return semantic_tokens(self.symbols(path, text), path, split_lines(text))
        except Exception:
            logger.exception("Semantic tokens failed for %s", path)
            return []

    def outline(self, path: str, text: str) -> list[OutlineNode]:
        try:
            return document_outline(self.symbols(path, text), path)
        except Exception:
            logger.exception("Outline failed for %s", path)
            return []

    def todos(self, text: str) -> list[TodoItem]:
        return find_todos(text, self.config.todo_tags)


__all__ = ["LanguageService"]
