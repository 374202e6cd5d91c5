"""
Interactive typeahead search over a directory of documents.

The documents are loaded and indexed in memory at start-up; nothing is
written to disk. Each query word matches as a prefix of a document word, and
every query word must appear in the same document.

Usage (from repo root):
    python -m typeahead.search_cli data/
    typeahead-search data/ --prune-threshold 0.2
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Iterable

from .errors import InsufficientQueryError
from .loader import load_documents
from .posting import NGRAM_WIDTH
from .service import PRUNE_THRESHOLD, IndexService


def build_service(
    data_dir: Path,
    ngram_width: int = NGRAM_WIDTH,
    prune_threshold: float = PRUNE_THRESHOLD,
) -> tuple[IndexService, Dict[int, str]]:
    """
    Load every document under data_dir into a fresh IndexService.
    Returns (service, doc_id -> relative path).
    """
    documents, doc_paths = load_documents(data_dir)
    svc = IndexService(ngram_width=ngram_width, prune_threshold=prune_threshold)
    svc.upsert(documents)
    return svc, doc_paths


def run_search_loop(
    svc: IndexService,
    doc_paths: Dict[int, str],
    top_k: int = 10,
) -> None:
    """
    Interactive command-line search loop.
    """
    print(f"Indexed {svc.document_count()} documents.")
    print("Enter queries (all words must match as prefixes). Empty line or Ctrl+C to exit.")

    while True:
        try:
            raw_query = input("query> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not raw_query:
            break

        try:
            doc_ids = svc.search(raw_query)
        except InsufficientQueryError:
            print("No valid terms in query.")
            continue

        if not doc_ids:
            print("No documents matched all query terms.")
            continue

        print(f"{len(doc_ids)} matches, showing {min(top_k, len(doc_ids))}:")
        for rank, doc_id in enumerate(doc_ids[:top_k], start=1):
            print(f"{rank:2d}. {doc_paths.get(doc_id, f'<doc {doc_id}>')}")


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Typeahead search over a document directory.")
    parser.add_argument(
        "data_dir",
        type=Path,
        help="Directory of .html, .json or .txt documents to index.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of results to show per query.",
    )
    parser.add_argument(
        "--ngram-width",
        type=int,
        default=NGRAM_WIDTH,
        help=f"Width of index n-grams (default: {NGRAM_WIDTH}).",
    )
    parser.add_argument(
        "--prune-threshold",
        type=float,
        default=PRUNE_THRESHOLD,
        help=f"Drop n-grams found in more than this fraction of documents (default: {PRUNE_THRESHOLD}).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log index activity to stderr.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.data_dir.is_dir():
        parser.error(f"not a directory: {args.data_dir}")

    svc, doc_paths = build_service(
        args.data_dir,
        ngram_width=args.ngram_width,
        prune_threshold=args.prune_threshold,
    )
    run_search_loop(svc, doc_paths, top_k=args.top)


if __name__ == "__main__":
    main()
