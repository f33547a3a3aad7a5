"""Line-oriented symbol extraction.

A single forward pass over the physical lines of a document turns source
text into an ordered list of symbols: functions (owning their parameters,
locals and loop iterators), types (owning their fields), globals and
labels. Include directives are followed recursively and the included
file's symbols are spliced in where the directive appears.

There is no tokenizer and no syntax tree. Each line is matched against a
small set of anchored patterns after its trailing comment has been cut
off; anything that does not parse degrades to an untyped symbol instead of
failing the pass.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from models.symbols import (
    FunctionSymbol,
    LabelSymbol,
    SourceRange,
    TypeSymbol,
    VariableSymbol,
)
from parse.context import (
    FIELD_PATTERN,
    LABEL_PATTERN,
    NO_PATTERN,
    TYPE_PATTERN,
    VARIABLE_PATTERN,
)
from parse.declarations import ParsedPart, parse_part, parse_parts, parse_suffix
from parse.keywords import is_reserved
from parse.lines import (
    code_end,
    matching_paren,
    split_top_level,
    strip_comment,
    trailing_comment,
)
from utils import normalize_name, read_source, split_lines

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.symbols import StorageKind, Symbol

logger = logging.getLogger(__name__)

_SUFFIX = r"(?P<suffix>[%#$]|\.\s*[A-Za-z_]\w*)?"

_INCLUDE = re.compile(r'^\s*include\s+"(?P<path>[^"]*)"', re.IGNORECASE)
_DECLARATION = re.compile(
    r"^\s*(?P<keyword>global|local|const|dim)\s+(?P<rest>.*)$", re.IGNORECASE
)
_FOR = re.compile(r"^\s*for\s+(?P<name>[A-Za-z_]\w*)\s*" + _SUFFIX + r"\s*=", re.IGNORECASE)
_NEXT = re.compile(r"^\s*next\b", re.IGNORECASE)
_ASSIGNMENT = re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)\s*(?P<suffix>[%#$])?\s*=")
_DOC_PARAM = re.compile(r"^\s*;;param\s+(?P<text>.*?)\s*$", re.IGNORECASE)
_DOC_EXAMPLE = re.compile(r"^\s*;;example(?:\s(?P<text>.*?))?\s*$", re.IGNORECASE)
_DOC = re.compile(r"^\s*;; (?P<text>.*?)\s*$")
_FUNCTION = re.compile(
    r"^\s*function\s+(?P<name>[A-Za-z_]\w*)\s*" + _SUFFIX, re.IGNORECASE
)
_END_FUNCTION = re.compile(r"^\s*end\s*function\b", re.IGNORECASE)
_TYPE = re.compile(r"^\s*type\s+(?P<name>[A-Za-z_]\w*)", re.IGNORECASE)
_END_TYPE = re.compile(r"^\s*end\s*type\b", re.IGNORECASE)
_FIELD = re.compile(r"^\s*field\s+(?P<rest>.*)$", re.IGNORECASE)
_LABEL = re.compile(r"^\s*\.(?P<name>[A-Za-z_]\w*)")

_STORAGE_BY_KEYWORD: dict[str, StorageKind] = {
    "global": "global",
    "const": "global",
    "dim": "global",
    "local": "local",
}

# Dependency stamp for an include that could not be read.
MISSING_FILE = (-1, -1)


class IncludeError(Exception):
    """Raised when an included file cannot be resolved or read."""


@dataclass
class _PendingDoc:
    lines: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    example: list[str] = field(default_factory=list)


@dataclass
class _FunctionBuilder:
    name: str
    line: int
    start_col: int
    declaration: str
    suffix: str | None
    doc: _PendingDoc
    iterator_floor: int
    locals: list[VariableSymbol] = field(default_factory=list)

    def declares(self, key: str) -> bool:
        return any(
            local.normalized_name == key and not local.is_iterator
            for local in self.locals
        )


@dataclass
class _TypeBuilder:
    name: str
    line: int
    start_col: int
    declaration: str
    fields: list[VariableSymbol] = field(default_factory=list)


@dataclass
class _PendingIterator:
    part: ParsedPart
    line: int
    start_col: int
    declaration: str
    description: str
    storage: StorageKind
    target: list
    slot: int


@dataclass
class _ScanState:
    """Accumulators threaded through one file's scan."""

    path: str
    lines: list[str]
    symbols: list[Symbol] = field(default_factory=list)
    current_type: _TypeBuilder | None = None
    current_function: _FunctionBuilder | None = None
    pending_doc: _PendingDoc = field(default_factory=_PendingDoc)
    iterators: list[_PendingIterator | None] = field(default_factory=list)

    def line_range(self, line: int, start: int, end: int) -> SourceRange:
        return SourceRange(start_line=line, start_col=start, end_line=line, end_col=end)

    def block_range(self, start_line: int, end_line: int) -> SourceRange:
        end_col = len(self.lines[end_line]) if end_line < len(self.lines) else 0
        return SourceRange(
            start_line=start_line, start_col=0, end_line=end_line, end_col=end_col
        )

    def top_level_declares(self, key: str, storage: StorageKind | None = None) -> bool:
        for symbol in self.symbols:
            if symbol.kind != "variable" or symbol.is_iterator:
                continue
            if symbol.normalized_name != key:
                continue
            if storage is None or symbol.storage == storage:
                return True
        return False

    def iterator_pending(self, key: str) -> bool:
        return any(
            entry is not None and entry.part.normalized_name == key
            for entry in self.iterators
        )


def _locate(line: str, name: str, start: int = 0) -> tuple[int, int]:
    match = re.search(rf"(?<!\w){re.escape(name)}(?!\w)", line[start:])
    if match is None:
        return start, start + len(name)
    return start + match.start(), start + match.end()


def _variable(
    state: _ScanState,
    part: ParsedPart,
    *,
    line: int,
    start_col: int,
    declaration: str,
    storage: StorageKind,
    description: str = "",
    constant: bool = False,
    scope_end: int | None = None,
) -> VariableSymbol:
    name_range = state.line_range(line, start_col, start_col + len(part.name))
    if storage == "field":
        pattern = FIELD_PATTERN
    else:
        pattern = VARIABLE_PATTERN
    scope = state.block_range(line, scope_end) if scope_end is not None else name_range
    return VariableSymbol(
        name=part.name,
        normalized_name=part.normalized_name,
        path=state.path,
        declaration=declaration,
        range=name_range,
        scope=scope,
        pattern=pattern,
        description=description,
        storage=storage,
        value_type=part.value_type,
        type_name=part.type_name,
        array=part.array,
        constant=constant,
        default=part.default,
        scope_end=scope_end,
    )


class SymbolExtractor:
    """Runs extraction passes, following include directives.

    Args:
        workspace_roots: Include paths resolve against the first root when
            one is given, otherwise against the including file's directory.
        include_guard: Skip includes that would re-enter a file already on
            the current include chain.
        max_include_depth: Nesting limit; exceeding it is reported as an
            include failure for that branch.
        dependencies: Optional mapping filled with ``path -> (mtime_ns,
            size)`` for every included file read during the pass, and
            ``MISSING_FILE`` for includes that could not be read.
    """

    def __init__(
        self,
        *,
        workspace_roots: Sequence[str | Path] = (),
        include_guard: bool = True,
        max_include_depth: int = 32,
        dependencies: dict[str, tuple[int, int]] | None = None,
    ) -> None:
        self.workspace_roots = [Path(root) for root in workspace_roots]
        self.include_guard = include_guard
        self.max_include_depth = max_include_depth
        self.dependencies = dependencies

    def extract(self, path: str, text: str) -> list[Symbol]:
        return self._scan(path, text, chain=(self._identity(path),))

    def _identity(self, path: str) -> str:
        return os.path.normcase(os.path.normpath(os.path.abspath(path)))

    def _resolve_include(self, including_path: str, target: str) -> Path:
        if self.workspace_roots:
            base = self.workspace_roots[0]
        else:
            base = Path(including_path).parent
        return Path(os.path.normpath(base / target))

    def _read_include(self, include_path: Path) -> str:
        try:
            text = read_source(include_path)
            stat = include_path.stat()
        except OSError as exc:
            if self.dependencies is not None:
                self.dependencies[str(include_path)] = MISSING_FILE
            msg = f"Cannot read included file {include_path}: {exc}"
            raise IncludeError(msg) from exc
        if self.dependencies is not None:
            self.dependencies[str(include_path)] = (stat.st_mtime_ns, stat.st_size)
        return text

    def _include(self, state: _ScanState, target: str, chain: tuple[str, ...]) -> None:
        include_path = self._resolve_include(state.path, target)
        identity = self._identity(str(include_path))
        if self.include_guard and identity in chain:
            logger.debug("Skipping include cycle %s -> %s", state.path, include_path)
            return
        try:
            if len(chain) > self.max_include_depth:
                msg = f"Include depth limit reached at {include_path}"
                raise IncludeError(msg)
            text = self._read_include(include_path)
        except IncludeError as exc:
            logger.warning("%s", exc)
            return
        state.symbols.extend(self._scan(str(include_path), text, chain=(*chain, identity)))

    def _scan(self, path: str, text: str, *, chain: tuple[str, ...]) -> list[Symbol]:
        state = _ScanState(path=path, lines=split_lines(text))
        for number, raw in enumerate(state.lines):
            self._scan_line(state, number, raw, chain)

        last_line = max(len(state.lines) - 1, 0)
        if state.current_function is not None:
            self._close_function(state, last_line)
        if state.current_type is not None:
            self._close_type(state, last_line)
        self._flush_iterators(state, 0, last_line)
        return state.symbols

    def _scan_line(
        self, state: _ScanState, number: int, raw: str, chain: tuple[str, ...]
    ) -> None:
        code = strip_comment(raw)

        match = _INCLUDE.match(code)
        if match:
            self._include(state, match.group("path"), chain)
            return

        match = _DECLARATION.match(code)
        if match:
            self._declare(state, number, raw, match)
            return

        match = _FOR.match(code)
        if match:
            self._open_loop(state, number, raw, match)
            if any(_NEXT.match(statement) for statement in split_top_level(code, ":")[1:]):
                self._close_loop(state, number)
            return

        if _NEXT.match(code):
            self._close_loop(state, number)
            return

        match = _ASSIGNMENT.match(code)
        if match and not is_reserved(match.group("name")):
            self._implicit_local(state, number, raw, match)
            return

        if self._collect_doc(state, raw):
            return

        if _END_FUNCTION.match(code):
            if state.current_function is not None:
                self._close_function(state, number)
            return

        match = _FUNCTION.match(code)
        if match:
            self._open_function(state, number, raw, code, match)
            return

        if _END_TYPE.match(code):
            if state.current_type is not None:
                self._close_type(state, number)
            return

        match = _TYPE.match(code)
        if match:
            self._open_type(state, number, code, match)
            return

        match = _FIELD.match(code)
        if match:
            self._declare_fields(state, number, raw, match)
            return

        match = _LABEL.match(code)
        if match:
            self._label(state, number, code, match)

    def _declare(self, state: _ScanState, number: int, raw: str, match: re.Match[str]) -> None:
        keyword = match.group("keyword")
        storage = _STORAGE_BY_KEYWORD[keyword.lower()]
        constant = keyword.lower() == "const"
        description = trailing_comment(raw)
        function = state.current_function
        cursor = match.start("rest")
        for part in parse_parts(match.group("rest")):
            start_col, cursor = _locate(raw, part.name, cursor)
            key = part.normalized_name
            if function is not None:
                if function.declares(key):
                    continue
            elif state.top_level_declares(key):
                continue
            symbol = _variable(
                state,
                part,
                line=number,
                start_col=start_col,
                declaration=f"{keyword.capitalize()} {part.text}",
                storage=storage,
                description=description,
                constant=constant,
            )
            if function is not None:
                function.locals.append(symbol)
            else:
                state.symbols.append(symbol)

    def _open_loop(self, state: _ScanState, number: int, raw: str, match: re.Match[str]) -> None:
        part = parse_part(match.group("name") + (match.group("suffix") or ""))
        function = state.current_function
        if part is None:
            state.iterators.append(None)
            return
        key = part.normalized_name
        if function is not None:
            shadowed = function.declares(key)
        else:
            shadowed = state.top_level_declares(key, storage="local")
        if shadowed:
            state.iterators.append(None)
            return

        target = function.locals if function is not None else state.symbols
        start_col = match.start("name")
        state.iterators.append(
            _PendingIterator(
                part=part,
                line=number,
                start_col=start_col,
                declaration=f"For {part.text}",
                description=trailing_comment(raw),
                storage="local" if function is not None else "global",
                target=target,
                slot=len(target),
            )
        )

    def _finish_iterator(self, state: _ScanState, pending: _PendingIterator, end_line: int) -> None:
        symbol = _variable(
            state,
            pending.part,
            line=pending.line,
            start_col=pending.start_col,
            declaration=pending.declaration,
            storage=pending.storage,
            description=pending.description,
            scope_end=end_line,
        )
        pending.target.insert(pending.slot, symbol)

    def _close_loop(self, state: _ScanState, number: int) -> None:
        if not state.iterators:
            return
        floor = state.current_function.iterator_floor if state.current_function else 0
        if len(state.iterators) <= floor:
            return
        pending = state.iterators.pop()
        if pending is not None:
            self._finish_iterator(state, pending, number)

    def _flush_iterators(self, state: _ScanState, floor: int, end_line: int) -> None:
        while len(state.iterators) > floor:
            pending = state.iterators.pop()
            if pending is not None:
                self._finish_iterator(state, pending, end_line)

    def _implicit_local(self, state: _ScanState, number: int, raw: str, match: re.Match[str]) -> None:
        name = match.group("name")
        key = normalize_name(name)
        function = state.current_function
        if state.iterator_pending(key):
            return
        if function is not None:
            if function.declares(key) or state.top_level_declares(key, storage="global"):
                return
        elif state.top_level_declares(key):
            return

        suffix = match.group("suffix") or ""
        part = parse_part(name + suffix)
        if part is None:
            return
        symbol = _variable(
            state,
            part,
            line=number,
            start_col=match.start("name"),
            declaration=f"Local {part.text}",
            storage="local",
            description=trailing_comment(raw),
        )
        if function is not None:
            function.locals.append(symbol)
        else:
            state.symbols.append(symbol)

    def _collect_doc(self, state: _ScanState, raw: str) -> bool:
        match = _DOC_PARAM.match(raw)
        if match:
            state.pending_doc.params.append(match.group("text"))
            return True
        match = _DOC_EXAMPLE.match(raw)
        if match:
            state.pending_doc.example.append(match.group("text") or "")
            return True
        match = _DOC.match(raw)
        if match:
            state.pending_doc.lines.append(match.group("text"))
            return True
        return False

    def _open_function(
        self, state: _ScanState, number: int, raw: str, code: str, match: re.Match[str]
    ) -> None:
        if state.current_function is not None:
            # Missing End Function: the previous body ends on the line above.
            self._close_function(state, max(number - 1, state.current_function.line))

        builder = _FunctionBuilder(
            name=match.group("name"),
            line=number,
            start_col=match.start("name"),
            declaration=code.strip(),
            suffix=match.group("suffix"),
            doc=state.pending_doc,
            iterator_floor=len(state.iterators),
        )
        state.pending_doc = _PendingDoc()
        state.current_function = builder

        open_paren = raw.find("(", match.end())
        if open_paren == -1 or open_paren >= code_end(raw):
            return
        close_paren = matching_paren(code, open_paren)
        params_text = code[open_paren + 1 : close_paren]
        cursor = open_paren + 1
        for part in parse_parts(params_text):
            start_col, cursor = _locate(raw, part.name, cursor)
            if builder.declares(part.normalized_name):
                continue
            builder.locals.append(
                _variable(
                    state,
                    part,
                    line=number,
                    start_col=start_col,
                    declaration=part.text,
                    storage="parameter",
                )
            )

    def _close_function(self, state: _ScanState, end_line: int) -> None:
        builder = state.current_function
        if builder is None:
            return
        self._flush_iterators(state, builder.iterator_floor, end_line)
        return_type, return_type_name, _ = parse_suffix(builder.suffix)
        state.symbols.append(
            FunctionSymbol(
                name=builder.name,
                normalized_name=normalize_name(builder.name),
                path=state.path,
                declaration=builder.declaration,
                range=state.line_range(
                    builder.line, builder.start_col, builder.start_col + len(builder.name)
                ),
                scope=state.block_range(builder.line, end_line),
                pattern=NO_PATTERN,
                return_type=return_type,
                return_type_name=return_type_name,
                end_line=end_line,
                locals=builder.locals,
                doc_lines=builder.doc.lines,
                param_docs=builder.doc.params,
                example="\n".join(builder.doc.example),
            )
        )
        state.current_function = None

    def _open_type(self, state: _ScanState, number: int, code: str, match: re.Match[str]) -> None:
        if state.current_type is not None:
            self._close_type(state, max(number - 1, state.current_type.line))
        state.pending_doc = _PendingDoc()
        state.current_type = _TypeBuilder(
            name=match.group("name"),
            line=number,
            start_col=match.start("name"),
            declaration=code.strip(),
        )

    def _close_type(self, state: _ScanState, end_line: int) -> None:
        builder = state.current_type
        if builder is None:
            return
        state.symbols.append(
            TypeSymbol(
                name=builder.name,
                normalized_name=normalize_name(builder.name),
                path=state.path,
                declaration=builder.declaration,
                range=state.line_range(
                    builder.line, builder.start_col, builder.start_col + len(builder.name)
                ),
                scope=state.block_range(builder.line, end_line),
                pattern=TYPE_PATTERN,
                end_line=end_line,
                fields=builder.fields,
            )
        )
        state.current_type = None

    def _declare_fields(self, state: _ScanState, number: int, raw: str, match: re.Match[str]) -> None:
        builder = state.current_type
        if builder is None:
            return
        description = trailing_comment(raw)
        cursor = match.start("rest")
        for part in parse_parts(match.group("rest")):
            start_col, cursor = _locate(raw, part.name, cursor)
            if any(f.normalized_name == part.normalized_name for f in builder.fields):
                continue
            builder.fields.append(
                _variable(
                    state,
                    part,
                    line=number,
                    start_col=start_col,
                    declaration=f"Field {part.text}",
                    storage="field",
                    description=description,
                )
            )

    def _label(self, state: _ScanState, number: int, code: str, match: re.Match[str]) -> None:
        name = match.group("name")
        start_col = match.start("name")
        name_range = state.line_range(number, start_col, start_col + len(name))
        state.symbols.append(
            LabelSymbol(
                name=name,
                normalized_name=normalize_name(name),
                path=state.path,
                declaration=code.strip(),
                range=name_range,
                scope=name_range,
                pattern=LABEL_PATTERN,
            )
        )


def extract_symbols(
    path: str,
    text: str,
    *,
    workspace_roots: Sequence[str | Path] = (),
    include_guard: bool = True,
    max_include_depth: int = 32,
) -> list[Symbol]:
    """Extract the ordered symbol collection of one document.

    Args:
        path: Identity of the document; included files are recorded under
            their own resolved paths.
        text: Full document text.
        workspace_roots: Roots for include resolution (first one wins).
        include_guard: Skip include cycles instead of recursing.
        max_include_depth: Include nesting limit.

    Returns:
        Symbols in source-declaration order.
    """
    extractor = SymbolExtractor(
        workspace_roots=workspace_roots,
        include_guard=include_guard,
        max_include_depth=max_include_depth,
    )
    return extractor.extract(path, text)


__all__ = ["MISSING_FILE", "IncludeError", "SymbolExtractor", "extract_symbols"]
