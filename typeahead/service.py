"""
Typeahead index service: incremental upsert and prefix search.

Search narrows candidates with the n-gram posting index, then confirms every
query word against each candidate's PrefixVerifier. A document matches when
every query word is a prefix of one of its words.

Usage:
    svc = IndexService()
    svc.upsert([Document(1, "The quick brown fox")])
    svc.search("qui bro")  # -> [1]
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, NamedTuple

from .errors import InsufficientQueryError, InvalidInputError, SearchCancelledError
from .locking import ReadWriteLock
from .posting import NGRAM_WIDTH, PostingIndex, analyze
from .tokenizer import tokenize
from .verifier import PrefixVerifier

logger = logging.getLogger(__name__)

# Fraction of live documents above which an n-gram is pruned after each batch
PRUNE_THRESHOLD = 0.1


@dataclass(frozen=True)
class Document:
    """
    A document to index.
    - id: caller-managed identifier (> 0); the caller ensures uniqueness
    - text: the text to index
    - prior_text: the text previously indexed under id; required for updates
      only, leave empty for new documents
    """

    id: int
    text: str
    prior_text: str = ""


class _DocMeta(NamedTuple):
    external_id: int
    verifier: PrefixVerifier


class IndexService:
    """
    In-memory fulltext index suitable for a typeahead search box.

    Searches run concurrently with each other; an upsert excludes every
    other operation for the duration of its batch.
    """

    def __init__(
        self,
        tokenizer: Callable[[str], list[str]] = tokenize,
        ngram_width: int = NGRAM_WIDTH,
        prune_threshold: float = PRUNE_THRESHOLD,
    ) -> None:
        if prune_threshold <= 0:
            raise ValueError(f"prune_threshold must be positive, got {prune_threshold}")
        self.tokenizer = tokenizer
        self.ngram_width = ngram_width
        self.prune_threshold = prune_threshold
        self._idx = PostingIndex(width=ngram_width)
        self._docs: dict[int, _DocMeta] = {}
        self._ext_ids: dict[int, int] = {}
        self._lock = ReadWriteLock()

    def document_count(self) -> int:
        """Number of live internal documents."""
        with self._lock.read_locked():
            return len(self._docs)

    def __len__(self) -> int:
        return self.document_count()

    def __contains__(self, external_id: int) -> bool:
        with self._lock.read_locked():
            return external_id in self._ext_ids

    def _analyze(self, text: str) -> tuple[list[str], list[str]]:
        return analyze(text, self.tokenizer, self.ngram_width)

    def search(self, query: str, cancel: threading.Event | None = None) -> list[int]:
        """
        Return the external ids of documents in which every query word is a
        prefix of some word, in indexing order.

        Raises InsufficientQueryError when the query has no content, and
        SearchCancelledError as soon as `cancel` is observed set.
        """
        ngrams, words = self._analyze(query)
        if not ngrams:
            raise InsufficientQueryError(f"query {query!r} does not have enough content")
        with self._lock.read_locked():
            candidates = self._idx.query_ngrams(ngrams)
            doc_ids: list[int] = []
            for doc_id in candidates:
                if cancel is not None and cancel.is_set():
                    raise SearchCancelledError(f"search for {query!r} was cancelled")
                meta = self._docs.get(doc_id)
                if meta is None:
                    logger.debug("Candidate %d has no metadata, skipping", doc_id)
                    continue
                # all query words must match; otherwise it is a false positive
                if all(meta.verifier.verify(word) for word in words):
                    doc_ids.append(meta.external_id)
        return doc_ids

    def _validate(self, documents: list[Document]) -> None:
        # ids already indexed by earlier documents of the same batch
        pending: set[int] = set()
        for i, doc in enumerate(documents):
            if not isinstance(doc.id, int) or isinstance(doc.id, bool) or doc.id <= 0:
                raise InvalidInputError(f"documents[{i}]: ID must be greater than zero, got {doc.id!r}")
            if (doc.id in self._ext_ids or doc.id in pending) and not doc.prior_text:
                raise InvalidInputError(
                    f"documents[{i}] is already indexed, but prior_text was not provided. "
                    "To update the document, the text it contained previously must also be provided"
                )
            pending.add(doc.id)

    def upsert(self, documents: Iterable[Document]) -> None:
        """
        Add or update a batch of documents.

        The whole batch is validated first; on InvalidInputError nothing is
        changed. Updating a document removes the postings derived from its
        prior_text, so prior_text must be exactly the text indexed last time.
        """
        documents = list(documents)
        with self._lock.write_locked():
            self._validate(documents)
            updated = 0
            for doc in documents:
                old_id = self._ext_ids.get(doc.id)
                if old_id is not None:
                    # remove the old internal doc first; the new one gets a fresh id
                    _, old_words = self._analyze(doc.prior_text)
                    for word in old_words:
                        self._idx.delete(word, old_id)
                    self._idx.retire(old_id)
                    del self._docs[old_id]
                    updated += 1
                ngrams, words = self._analyze(doc.text)
                doc_id = self._idx.add_ngrams(ngrams)
                self._docs[doc_id] = _DocMeta(doc.id, PrefixVerifier(words))
                self._ext_ids[doc.id] = doc_id
            self._idx.prune(self.prune_threshold)
            self._idx.sort()
            logger.debug(
                "Upserted %d documents (%d updates), %d live",
                len(documents), updated, len(self._docs),
            )
