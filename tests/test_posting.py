import unittest

from typeahead.posting import PostingIndex, analyze, extract_ngrams, intersect_sorted
from typeahead.tokenizer import tokenize


class TestExtractNgrams(unittest.TestCase):
    def test_marked_windows(self):
        self.assertEqual(extract_ngrams("brown"), ["_b", "_br", "bro", "row", "own"])

    def test_short_words_still_yield_ngrams(self):
        self.assertEqual(extract_ngrams("a"), ["_a"])
        self.assertEqual(extract_ngrams("ab"), ["_a", "_ab"])
        self.assertEqual(extract_ngrams(""), [])

    def test_repeats_removed(self):
        self.assertEqual(extract_ngrams("aaaa"), ["_a", "_aa", "aaa"])

    def test_wider_ngrams(self):
        self.assertEqual(extract_ngrams("brown", 4), ["_b", "_br", "_bro", "brow", "rown"])

    def test_invalid_width(self):
        with self.assertRaises(ValueError):
            extract_ngrams("word", 1)
        with self.assertRaises(ValueError):
            PostingIndex(width=1)

    def test_prefix_ngrams_are_subset_of_word_ngrams(self):
        word = "pickled"
        full = set(extract_ngrams(word))
        for end in range(1, len(word) + 1):
            self.assertLessEqual(set(extract_ngrams(word[:end])), full)

    def test_suffix_is_not_anchored(self):
        self.assertFalse(set(extract_ngrams("row")) <= set(extract_ngrams("brown")))

    def test_analyze(self):
        ngrams, words = analyze("Brown brow", tokenize)
        self.assertEqual(words, ["brown", "brow"])
        self.assertEqual(ngrams, ["_b", "_br", "bro", "row", "own"])


class TestIntersect(unittest.TestCase):
    def test_intersect_sorted(self):
        self.assertEqual(intersect_sorted([[1, 3, 5, 7], [3, 4, 5], [3, 5, 9]]), [3, 5])
        self.assertEqual(intersect_sorted([[1, 2], [3, 4]]), [])
        self.assertEqual(intersect_sorted([]), [])


class TestPostingIndex(unittest.TestCase):
    def setUp(self):
        self.idx = PostingIndex()
        self.fox = self.idx.add_ngrams(extract_ngrams("fox") + extract_ngrams("brown"))
        self.sea = self.idx.add_ngrams(extract_ngrams("sea") + extract_ngrams("brown"))

    def test_ids_are_fresh(self):
        self.assertEqual((self.fox, self.sea), (1, 2))
        self.assertEqual(self.idx.add_ngrams([]), 3)
        self.assertEqual(len(self.idx), 3)

    def test_query_intersects(self):
        self.assertEqual(self.idx.query_ngrams(extract_ngrams("bro")), [1, 2])
        self.assertEqual(self.idx.query_ngrams(extract_ngrams("fo") + extract_ngrams("bro")), [1])
        self.assertEqual(self.idx.query_ngrams(extract_ngrams("fox") + extract_ngrams("sea")), [])

    def test_unknown_ngram_matches_nothing(self):
        self.assertEqual(self.idx.query_ngrams(["zzz"]), [])

    def test_delete_is_idempotent(self):
        self.idx.delete("brown", self.fox)
        self.idx.delete("brown", self.fox)
        self.assertEqual(self.idx.query_ngrams(extract_ngrams("brown")), [2])
        self.idx.delete("brown", self.sea)
        self.assertNotIn("own", self.idx)
        self.assertEqual(self.idx.query_ngrams(extract_ngrams("brown")), [])

    def test_retire(self):
        self.idx.retire(self.fox)
        self.idx.retire(self.fox)
        self.assertEqual(len(self.idx), 1)

    def test_prune_common_ngrams(self):
        idx = PostingIndex()
        for i in range(10):
            grams = ["xyz", "uvw"] if i == 0 else ["xyz"]
            idx.add_ngrams(grams)
        self.assertEqual(idx.prune(0.5), 1)
        self.assertTrue(idx.is_pruned("xyz"))
        self.assertNotIn("xyz", idx)
        # pruned n-grams are skipped; nothing left to intersect means every doc
        self.assertEqual(idx.query_ngrams(["xyz"]), list(range(1, 11)))
        self.assertEqual(idx.query_ngrams(["xyz", "uvw"]), [1])
        # later inserts do not resurrect a partial posting list
        idx.add_ngrams(["xyz"])
        self.assertNotIn("xyz", idx)
        self.assertEqual(idx.ngram_count(), 1)

    def test_pruned_ngram_stays_pruned_after_corpus_shrinks(self):
        idx = PostingIndex()
        ids = [idx.add_ngrams(["xyz"]) for _ in range(4)]
        idx.prune(0.5)
        for doc_id in ids[1:]:
            idx.delete("xyz", doc_id)
            idx.retire(doc_id)
        self.assertEqual(len(idx), 1)
        self.assertTrue(idx.is_pruned("xyz"))
        self.assertEqual(idx.query_ngrams(["xyz"]), [ids[0]])

    def test_sort_keeps_postings_ordered(self):
        self.idx.sort()
        self.assertEqual(self.idx.query_ngrams(["_b"]), [1, 2])


if __name__ == "__main__":
    unittest.main()
