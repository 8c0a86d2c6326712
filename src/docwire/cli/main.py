"""Main CLI entry point for docwire."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from ..cli.commands import (
    decode_payload,
    dump,
    encode_payload,
    get_document,
    list_collection,
    load_json,
)
from ..exceptions import DocwireError
from ..store.config import StoreConfig


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the docwire CLI."""
    parser = argparse.ArgumentParser(
        prog="docwire",
        description="docwire: Document-Store Wire Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docwire decode response.json          Decode a document or list/query response
  docwire encode record.json            Encode a JSON object as a request body
  docwire list quizzes --project demo   List a collection
  docwire get quizzes abc123            Read one document (project from DOCWIRE_PROJECT_ID)
  docwire --version                     Show version
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version="docwire 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command")

    decode_parser = subparsers.add_parser("decode", help="Decode a wire payload to native JSON")
    decode_parser.add_argument("file", metavar="FILE", help="JSON file with a wire payload")

    encode_parser = subparsers.add_parser("encode", help="Encode native JSON to a wire body")
    encode_parser.add_argument("file", metavar="FILE", help="JSON file with a native object")

    list_parser = subparsers.add_parser("list", help="List the documents of a collection")
    list_parser.add_argument("collection", help="Collection name")
    list_parser.add_argument("--page-size", type=int, default=None, help="Page-size hint")

    get_parser = subparsers.add_parser("get", help="Read one document")
    get_parser.add_argument("collection", help="Collection name")
    get_parser.add_argument("doc_id", metavar="ID", help="Document id")

    for store_parser in (list_parser, get_parser):
        store_parser.add_argument("--project", default=None, help="Project id (overrides env)")
        store_parser.add_argument("--host", default=None, help="REST endpoint (e.g. an emulator)")

    return parser


def _store_config(args: argparse.Namespace) -> StoreConfig:
    if args.project:
        config = StoreConfig(project_id=args.project)
    else:
        config = StoreConfig.from_env()
    if args.host:
        config = dataclasses.replace(config, host=args.host)
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the docwire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command in ("decode", "encode"):
            file_path = Path(args.file)
            if not file_path.exists():
                print(f"Error: File not found: {file_path}", file=sys.stderr)
                return 1
            raw = load_json(file_path)
            result = decode_payload(raw) if args.command == "decode" else encode_payload(raw)
        elif args.command == "list":
            result = list_collection(_store_config(args), args.collection, args.page_size)
        else:
            result = get_document(_store_config(args), args.collection, args.doc_id)
    except (DocwireError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(dump(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
