"""
Document loader: builds index Documents from files in a directory tree.
Supports .html (visible text), .json (with a "content" field) and .txt.
"""

import json
import logging
from pathlib import Path

from .service import Document
from .tokenizer import extract_text_from_html, read_html_file

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".html", ".htm", ".json", ".txt")


def read_document_text(filepath: Path) -> str:
    """
    Read the indexable text of a file.
    - .json: the "content" field, HTML stripped
    - .html/.htm: visible text
    - .txt: raw text
    """
    filepath = Path(filepath)
    suffix = filepath.suffix.lower()
    if suffix == ".json":
        data = json.loads(filepath.read_text(encoding="utf-8"))
        if "content" not in data:
            raise ValueError(f"JSON file has no 'content' field: {filepath}")
        return extract_text_from_html(data["content"])
    if suffix in (".html", ".htm"):
        return extract_text_from_html(read_html_file(filepath))
    return read_html_file(filepath)


def find_document_files(data_dir: Path) -> list[Path]:
    """All supported files under data_dir, sorted by path."""
    data_dir = Path(data_dir)
    return sorted(
        (p for p in data_dir.rglob("*") if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES),
        key=lambda p: str(p),
    )


def load_documents(data_dir: Path) -> tuple[list[Document], dict[int, str]]:
    """
    Build one Document per readable file under data_dir.
    Ids are 1, 2, ... in sorted path order; unreadable files are skipped.
    Returns (documents, doc_id -> path relative to data_dir).
    """
    data_dir = Path(data_dir)
    documents: list[Document] = []
    doc_paths: dict[int, str] = {}
    next_doc_id = 1

    for filepath in find_document_files(data_dir):
        try:
            text = read_document_text(filepath)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", filepath, e)
            continue

        try:
            rel = str(filepath.relative_to(data_dir)).replace("\\", "/")
        except ValueError:
            rel = filepath.name

        documents.append(Document(id=next_doc_id, text=text))
        doc_paths[next_doc_id] = rel
        next_doc_id += 1

    return documents, doc_paths
