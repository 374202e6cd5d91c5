"""
N-gram extraction and the in-memory posting index.

Every word is prefixed with a boundary marker before extraction, so the
n-grams that touch the marker only match at the start of a word. The index
maps each n-gram to a sorted list of internal document ids and answers
conjunctive queries by intersecting those lists.

Removal re-derives the n-grams of the previously indexed words, so the
extraction rules (marker, width) must not change while documents are indexed
under them.
"""

import logging
from bisect import bisect_left
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

# Prepended to every word; the tokenizer never emits it inside a token.
BOUNDARY_MARKER = "_"
# Width of a full n-gram window
NGRAM_WIDTH = 3


def extract_ngrams(word: str, width: int = NGRAM_WIDTH) -> list[str]:
    """
    Return the n-grams of a single lowercase word, in order, without repeats.

    The marked word contributes its anchored prefixes shorter than `width`
    (so "p" still yields "_p") followed by every full-width window. The
    n-grams of any prefix of a word are therefore a subset of the word's own.
    """
    if width < 2:
        raise ValueError(f"n-gram width must be at least 2, got {width}")
    if not word:
        return []
    marked = BOUNDARY_MARKER + word
    grams = [marked[:k] for k in range(2, min(width, len(marked) + 1))]
    grams.extend(marked[i:i + width] for i in range(len(marked) - width + 1))
    return list(dict.fromkeys(grams))


def analyze(
    text: str,
    tokenizer: Callable[[str], list[str]],
    width: int = NGRAM_WIDTH,
) -> tuple[list[str], list[str]]:
    """
    Tokenize text and extract the n-grams of all its words.
    Returns (ngrams without repeats, words in text order).
    """
    words = tokenizer(text)
    ngrams: dict[str, None] = {}
    for word in words:
        for gram in extract_ngrams(word, width):
            ngrams[gram] = None
    return list(ngrams), words


def intersect_sorted(postings_lists: list[list[int]]) -> list[int]:
    """
    Intersect ascending doc id lists (AND query).
    Returns the ids present in every list, ascending.
    """
    if not postings_lists:
        return []
    # Start from the shortest list for efficiency.
    postings_lists = sorted(postings_lists, key=len)
    result = list(postings_lists[0])
    for other in postings_lists[1:]:
        i = j = 0
        new_result: list[int] = []
        while i < len(result) and j < len(other):
            d1 = result[i]
            d2 = other[j]
            if d1 == d2:
                new_result.append(d1)
                i += 1
                j += 1
            elif d1 < d2:
                i += 1
            else:
                j += 1
        result = new_result
        if not result:
            break
    return result


class PostingIndex:
    """
    Inverted index: map from n-gram -> ascending list of internal doc ids.

    Internal ids are allocated here, start at 1 and are never reused. Posting
    lists of n-grams removed by prune() are not kept; such n-grams are
    remembered and ignored by later inserts and queries. The pruned set only
    grows: an n-gram stays pruned after the corpus shrinks, which keeps
    memory for its key and gives up its selectivity for good.
    """

    def __init__(self, width: int = NGRAM_WIDTH) -> None:
        if width < 2:
            raise ValueError(f"n-gram width must be at least 2, got {width}")
        self.width = width
        self._index: dict[str, list[int]] = {}
        self._pruned: set[str] = set()
        self._docs: list[int] = []
        self._unsorted: set[str] = set()
        self._next_id = 1

    def add_ngrams(self, ngrams: Iterable[str]) -> int:
        """Allocate a fresh doc id and post it under every given n-gram."""
        doc_id = self._next_id
        self._next_id += 1
        self._docs.append(doc_id)
        for gram in dict.fromkeys(ngrams):
            if gram in self._pruned:
                continue
            postings = self._index.setdefault(gram, [])
            if postings and postings[-1] > doc_id:
                self._unsorted.add(gram)
            postings.append(doc_id)
        return doc_id

    def delete(self, word: str, doc_id: int) -> None:
        """Remove doc_id from the postings of every n-gram of word (idempotent)."""
        for gram in extract_ngrams(word, self.width):
            postings = self._index.get(gram)
            if not postings:
                continue
            if gram in self._unsorted:
                postings.sort()
                self._unsorted.discard(gram)
            i = bisect_left(postings, doc_id)
            if i < len(postings) and postings[i] == doc_id:
                del postings[i]
            if not postings:
                del self._index[gram]

    def retire(self, doc_id: int) -> None:
        """Drop doc_id from the live document set after its words were deleted."""
        i = bisect_left(self._docs, doc_id)
        if i < len(self._docs) and self._docs[i] == doc_id:
            del self._docs[i]

    def query_ngrams(self, ngrams: Iterable[str]) -> list[int]:
        """
        Return the ids of documents posted under every given n-gram, ascending.

        Unknown n-grams make the result empty. Pruned n-grams are skipped; if
        nothing remains to intersect, every live document is a candidate.
        """
        postings_lists: list[list[int]] = []
        for gram in dict.fromkeys(ngrams):
            if gram in self._pruned:
                continue
            postings = self._index.get(gram)
            if not postings:
                return []
            if gram in self._unsorted:
                postings = sorted(postings)
            postings_lists.append(postings)
        if not postings_lists:
            return list(self._docs)
        return intersect_sorted(postings_lists)

    def prune(self, threshold: float) -> int:
        """
        Discard n-grams posted for more than threshold * live documents.
        Returns the number of n-grams pruned.
        """
        max_docs = int(threshold * len(self._docs))
        common = [gram for gram, postings in self._index.items() if len(postings) > max_docs]
        for gram in common:
            del self._index[gram]
            self._unsorted.discard(gram)
            self._pruned.add(gram)
        if common:
            logger.debug("Pruned %d n-grams (limit %d docs)", len(common), max_docs)
        return len(common)

    def sort(self) -> None:
        """Re-sort posting lists changed out of order since the last sort."""
        for gram in self._unsorted:
            postings = self._index.get(gram)
            if postings:
                postings.sort()
        self._unsorted.clear()

    def ngram_count(self) -> int:
        """Number of n-grams that currently have a posting list."""
        return len(self._index)

    def is_pruned(self, gram: str) -> bool:
        return gram in self._pruned

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, gram: str) -> bool:
        return gram in self._index
