"""
Per-document exact prefix check used to discard n-gram false positives.

A document's words joined by a delimiter contain "delimiter + P" exactly when
some word starts with P. A MARISA trie over the words answers that in time
proportional to len(P), whatever the size of the document.
"""

import marisa_trie


class PrefixVerifier:
    """Immutable word-prefix lookup over one indexed text."""

    __slots__ = ("_trie",)

    def __init__(self, words: list[str]) -> None:
        self._trie = marisa_trie.Trie(words)

    def verify(self, word: str) -> bool:
        """True if word is a prefix of at least one indexed word."""
        if not word:
            return False
        return next(self._trie.iterkeys(word), None) is not None

    @property
    def words_count(self) -> int:
        """Number of distinct words in the indexed text."""
        return len(self._trie)

    def __repr__(self) -> str:
        return f"PrefixVerifier(words={self.words_count})"
