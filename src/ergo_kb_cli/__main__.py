"""
ergo-kb CLI entry point.

Usage:
    ergo-kb list [--source PATH]
    ergo-kb get ID [--source PATH]
    ergo-kb filter TAG [TAG ...] [--source PATH]
    ergo-kb check-parity [DIR] [--strict] [--reference NAME]
    ergo-kb export [--format json|yaml|rag] [--source PATH]
    ergo-kb --help
    ergo-kb --version
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ergo_kb_core import __version__
from ergo_kb_core.exceptions import ErgoKBError
from ergo_kb_core.exporters import to_json, to_yaml
from ergo_kb_core.index import ChunkIndex
from ergo_kb_core.knowledge_base import load_corpus, load_default_index, load_index
from ergo_kb_core.logging_service import LOG_LEVELS, LoggingService
from ergo_kb_core.models import Chunk
from ergo_kb_core.parity import ParityChecker
from ergo_kb_core.utils import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ergo-kb", description="ErgoScript knowledge-base chunk store"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for stderr output (default: ERGO_KB_LOG_LEVEL or WARNING)",
    )

    source = argparse.ArgumentParser(add_help=False)
    source.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Knowledge-base file to load (default: bundled JSON)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", parents=[source], help="List chunk ids and titles")

    get_parser = subparsers.add_parser("get", parents=[source], help="Print one chunk")
    get_parser.add_argument("chunk_id", help="Chunk id, e.g. known_issues")

    filter_parser = subparsers.add_parser(
        "filter", parents=[source], help="List chunks carrying any of the tags"
    )
    filter_parser.add_argument("tags", nargs="+", help="Tags to match")

    parity_parser = subparsers.add_parser(
        "check-parity", help="Verify every serialization in a directory agrees"
    )
    parity_parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        default=None,
        help="Directory of knowledge-base files (default: bundled data)",
    )
    parity_parser.add_argument(
        "--strict", action="store_true", default=None, help="Also compare chunk text"
    )
    parity_parser.add_argument("--reference", default=None, help="File name to compare against")

    export_parser = subparsers.add_parser(
        "export", parents=[source], help="Write the index as JSON or YAML to stdout"
    )
    export_parser.add_argument("--format", choices=["json", "yaml", "rag"], default="json")

    return parser


def _load(source: Optional[Path]) -> ChunkIndex:
    if source is None:
        return load_default_index()
    return load_index(source)


def _format_chunk(chunk: Chunk) -> str:
    return f"# {chunk.title}\nid: {chunk.id}\ntags: {', '.join(chunk.tags)}\n\n{chunk.text}"


def run(args: argparse.Namespace) -> int:
    if args.command == "list":
        for chunk in _load(args.source):
            print(f"{chunk.id}\t{chunk.title}")
        return 0

    if args.command == "get":
        print(_format_chunk(_load(args.source).get(args.chunk_id)))
        return 0

    if args.command == "filter":
        for chunk in _load(args.source).filter(args.tags):
            print(f"{chunk.id}\t{chunk.title}")
        return 0

    if args.command == "check-parity":
        corpus = load_corpus(args.directory)
        report = ParityChecker(strict=args.strict).check_corpus(corpus, args.reference)
        if report.ok:
            print(f"OK: {len(report.compared)} source(s) agree with {report.reference}")
            return 0
        for issue in report.issues:
            print(str(issue))
        return 1

    if args.command == "export":
        index = _load(args.source)
        if args.format == "yaml":
            sys.stdout.write(to_yaml(index))
        elif args.format == "rag":
            sys.stdout.write(to_json(index, layout="rag"))
        else:
            sys.stdout.write(to_json(index))
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if LoggingService.is_configured():
        LoggingService.reset()
    configure_logging(level=args.log_level)

    try:
        return run(args)
    except ErgoKBError as exc:
        LoggingService.log_error(exc, context={"command": args.command})
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
