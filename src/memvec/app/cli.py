from __future__ import annotations

import argparse
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from memvec.adapters.ingestion.text_loader import TextLoader
from memvec.app.container import Container, build_container
from memvec.domain.errors import MemvecError
from memvec.domain.models import SearchRequest
from memvec.settings import load_settings


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="memvec", description="In-memory vector store backed by a JSON file.")
    ap.add_argument("--settings", default=None, help="Path to settings.toml (default: $MEMVEC_SETTINGS or ./settings.toml)")
    ap.add_argument("--store", default=None, help="Vector store JSON file (overrides [store].path)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("index", help="Add text files to the store")
    p.add_argument("paths", nargs="+", help="Files or directories to index")
    p.add_argument("--extensions", default=".md,.txt", help="Comma-separated allowed extensions (default: .md,.txt)")
    p.add_argument("--no-recursive", dest="recursive", action="store_false", help="Do not descend into subdirectories")

    p = sub.add_parser("query", help="Search the store")
    p.add_argument("text", help="Query text")
    p.add_argument("--top-k", type=int, default=None)
    p.add_argument("--threshold", type=float, default=None, help="Minimum similarity in [0,1]")

    p = sub.add_parser("delete", help="Remove documents by id")
    p.add_argument("ids", nargs="+")

    sub.add_parser("stats", help="Show store size and embedder")
    return ap


def _load_existing(c: Container, path: Path) -> None:
    if path.exists():
        c.store.load(path)


def cmd_index(c: Container, path: Path, args: argparse.Namespace) -> int:
    exts = {e.strip().lower() for e in args.extensions.split(",") if e.strip()}
    docs = TextLoader(extensions=exts).load_all(args.paths, recursive=args.recursive)
    if not docs:
        rprint("[yellow]No documents found[/yellow]")
        return 1

    _load_existing(c, path)
    c.store.add(docs)
    c.store.save(path)
    rprint(f"[bold]Indexed[/bold] {len(docs)} documents -> {path} (store count: {c.store.count()})")
    return 0


def cmd_query(c: Container, path: Path, args: argparse.Namespace) -> int:
    c.store.load(path)
    request = SearchRequest(
        query=args.text,
        similarity_threshold=args.threshold if args.threshold is not None else c.settings.search.similarity_threshold,
        top_k=args.top_k if args.top_k is not None else c.settings.search.top_k,
    )
    results = c.store.similarity_search(request)

    table = Table(title=f"Top {request.top_k} for: {request.query!r}")
    table.add_column("#", justify="right")
    table.add_column("score", justify="right")
    table.add_column("id")
    table.add_column("title")
    table.add_column("excerpt")
    for i, r in enumerate(results, start=1):
        doc = r.document
        excerpt = " ".join(doc.content.split())[:80]
        table.add_row(str(i), f"{r.score:.4f}", doc.doc_id, escape(str(doc.metadata.get("title", ""))), escape(excerpt))
    rprint(table)
    return 0


def cmd_delete(c: Container, path: Path, args: argparse.Namespace) -> int:
    c.store.load(path)
    before = c.store.count()
    c.store.delete(args.ids)
    c.store.save(path)
    rprint(f"[bold]Deleted[/bold] {before - c.store.count()} of {len(args.ids)} ids")
    return 0


def cmd_stats(c: Container, path: Path, args: argparse.Namespace) -> int:
    _load_existing(c, path)
    rprint(f"store:      {path}")
    rprint(f"entries:    {c.store.count()}")
    rprint(f"embedder:   {c.embedder.model_name} ({c.embedder.dimensions()} dims)")
    return 0


COMMANDS = {
    "index": cmd_index,
    "query": cmd_query,
    "delete": cmd_delete,
    "stats": cmd_stats,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    settings = load_settings(args.settings or os.getenv("MEMVEC_SETTINGS") or None)
    if args.store:
        settings = replace(settings, store=replace(settings.store, path=Path(args.store)))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    c = build_container(settings)
    try:
        return COMMANDS[args.command](c, settings.store.path, args)
    except MemvecError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
