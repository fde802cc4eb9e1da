"""
Admin CLI for the document store.

Usage:
    docstore list
    docstore upload ./report.pdf --name report.pdf
    docstore delete report.pdf
    docstore reorder report.pdf=1 notes.txt=2
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from docstore_core.config import BackendKind, DocumentStoreConfig, settings
from docstore_core.domain import DocumentEntity, OperationResult
from docstore_core.logging import setup_logging
from docstore_core.runtime.errors import not_found

from app.documents.factory import get_document_store
from app.documents.services.document_store import DocumentStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docstore", description="Manage stored documents")
    parser.add_argument(
        "--backend",
        choices=[kind.value for kind in BackendKind],
        default=None,
        help="Override DOCUMENT_STORE_BACKEND",
    )
    parser.add_argument("--container", default=None, help="Override DOCUMENT_CONTAINER")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List all documents")

    upload = commands.add_parser("upload", help="Upload a file")
    upload.add_argument("path", type=Path)
    upload.add_argument("--name", default=None, help="Document name (defaults to the file name)")

    delete = commands.add_parser("delete", help="Delete a document")
    delete.add_argument("name")

    reorder = commands.add_parser("reorder", help="Set document positions")
    reorder.add_argument("assignments", nargs="+", metavar="NAME=ORDER")

    return parser


def parse_assignment(value: str) -> tuple[str, int]:
    """Split NAME=ORDER; the last '=' separates the order."""
    name, sep, order = value.rpartition("=")
    if not sep or not name:
        raise ValueError(f"expected NAME=ORDER, got '{value}'")
    return name, int(order)


async def run(args: argparse.Namespace, store: DocumentStore) -> OperationResult:
    if args.command == "list":
        return await store.get_all()
    if args.command == "upload":
        return await store.upload(args.name or args.path.name, args.path.open("rb"))
    if args.command == "delete":
        return await store.delete(args.name)
    return await reorder(store, args.orders)


async def reorder(store: DocumentStore, orders: list[tuple[str, int]]) -> OperationResult:
    """Look up the named documents and hand them to the store with new orders."""
    listing = await store.get_all()
    if not listing.successful:
        return listing
    current = {entity.name: entity for entity in listing.result}

    batch: list[DocumentEntity] = []
    for name, order in orders:
        if name not in current:
            return OperationResult.fail(not_found(name))
        batch.append(current[name].with_order(order))
    return await store.reorder(batch)


def main(argv: list[str] | None = None, store: DocumentStore | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "upload" and not args.path.is_file():
        parser.error(f"no such file: {args.path}")
    if args.command == "reorder":
        try:
            args.orders = [parse_assignment(a) for a in args.assignments]
        except ValueError as e:
            parser.error(str(e))

    setup_logging(args.log_level or settings.LOG_LEVEL)

    if store is None:
        overrides = {}
        if args.backend:
            overrides["backend"] = BackendKind(args.backend)
        if args.container:
            overrides["container"] = args.container
        config = DocumentStoreConfig.from_settings().model_copy(update=overrides)
        store = get_document_store(config)

    result = asyncio.run(run(args, store))
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0 if result.successful else 1


if __name__ == "__main__":
    sys.exit(main())
