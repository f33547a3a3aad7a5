"""Command-line interface for bbls."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from models.results import SignatureContext
from providers.semantic_tokens import TOKEN_TYPES, encode_tokens
from providers.service import LanguageService
from scan.files import find_source_files
from settings.config import ConfigError
from stubs.table import StubError
from utils import dumps, read_source, write_jsonl
from verify.verify import verify_determinism


def _add_file(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Source file to analyze")


def _add_position(parser: argparse.ArgumentParser) -> None:
    _add_file(parser)
    parser.add_argument("line", type=int, help="Zero-based line")
    parser.add_argument("column", type=int, help="Zero-based character")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bbls")
    parser.add_argument(
        "--root",
        action="append",
        default=[],
        help="Workspace root for config and includes (repeatable; first root wins)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_file(subparsers.add_parser("symbols", help="Print extracted symbols"))
    _add_position(subparsers.add_parser("hover", help="Hover text at a position"))
    _add_position(
        subparsers.add_parser("definition", help="Definition locations at a position")
    )

    complete_parser = subparsers.add_parser("complete", help="Completions at a position")
    _add_position(complete_parser)
    complete_parser.add_argument(
        "--trigger",
        default=None,
        help="Trigger character typed before the request (e.g. '.' or '\\')",
    )

    _add_position(subparsers.add_parser("signature", help="Signature help at a position"))

    tokens_parser = subparsers.add_parser("tokens", help="Semantic tokens of a file")
    _add_file(tokens_parser)
    tokens_parser.add_argument(
        "--encode",
        action="store_true",
        help="Print the relative integer encoding instead of token records",
    )

    _add_file(subparsers.add_parser("outline", help="Document outline of a file"))
    _add_file(subparsers.add_parser("todos", help="TODO comments of a file"))

    index_parser = subparsers.add_parser("index", help="Index every source file")
    index_parser.add_argument("directory", help="Workspace directory to scan")
    index_parser.add_argument(
        "--out",
        default=None,
        help="JSON lines output file (default: stdout)",
    )

    _add_file(
        subparsers.add_parser("verify", help="Verify determinism of extraction")
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_roots(roots: list[str]) -> list[Path]:
    return [Path(root).expanduser().resolve() for root in roots]


def _build_service(roots: list[Path]) -> LanguageService:
    if roots:
        return LanguageService.for_workspace(roots[0], extra_roots=roots[1:])
    return LanguageService()


def _emit(obj: object) -> None:
    sys.stdout.write(dumps(obj).decode("utf-8"))
    sys.stdout.write("\n")


def _read_document(file: str) -> tuple[str, str]:
    path = Path(file).expanduser().resolve()
    return str(path), read_source(path)


def _handle_query(service: LanguageService, args: argparse.Namespace) -> int:
    path, text = _read_document(args.file)
    command = args.command

    if command == "symbols":
        _emit(service.symbols(path, text))
        return 0

    if command == "tokens":
        tokens = service.semantic_tokens(path, text)
        if args.encode:
            _emit({"legend": list(TOKEN_TYPES), "data": encode_tokens(tokens)})
        else:
            _emit(tokens)
        return 0

    if command == "outline":
        _emit(service.outline(path, text))
        return 0

    if command == "todos":
        _emit(service.todos(text))
        return 0

    if command == "hover":
        result = service.hover(path, text, args.line, args.column)
        _emit(result)
        return 0 if result is not None else 1

    if command == "definition":
        locations = service.definition(path, text, args.line, args.column)
        _emit(locations)
        return 0 if locations else 1

    if command == "complete":
        _emit(service.complete(path, text, args.line, args.column, args.trigger))
        return 0

    if command == "signature":
        context = SignatureContext(trigger_kind="invoke")
        help_ = service.signature_help(path, text, args.line, args.column, context)
        _emit(help_)
        return 0 if help_ is not None else 1

    raise AssertionError


def _handle_index(service: LanguageService, directory: str, out: str | None) -> int:
    root = Path(directory).expanduser().resolve()
    if not root.is_dir():
        sys.stderr.write(f"error: not a directory: {root}\n")
        return 2

    records = []
    for source in find_source_files(root, extensions=service.config.source_extensions):
        document = str(source)
        try:
            text = read_source(source)
        except OSError as exc:
            sys.stderr.write(f"skipped: {source}: {exc}\n")
            continue
        records.extend(
            symbol for symbol in service.symbols(document, text) if symbol.path == document
        )

    if out is None:
        for record in records:
            _emit(record)
    else:
        write_jsonl(Path(out).expanduser().resolve(), records)
    return 0


def _handle_verify(service: LanguageService, file: str) -> int:
    path = Path(file).expanduser().resolve()
    try:
        result = verify_determinism(
            path=path,
            workspace_roots=service.workspace_roots,
            include_guard=service.config.include_cycle_guard,
            max_include_depth=service.config.max_include_depth,
        )
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label in result.mismatches:
            sys.stderr.write(f"mismatch: {label}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    roots = _resolve_roots(args.root)
    try:
        service = _build_service(roots)
    except (ConfigError, StubError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.command == "index":
        return _handle_index(service, args.directory, args.out)

    if args.command == "verify":
        return _handle_verify(service, args.file)

    try:
        return _handle_query(service, args)
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
