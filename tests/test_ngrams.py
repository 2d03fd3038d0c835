"""
Tests for ngrams.py - phrase tracking and normalization.
"""

import itertools

import pytest

from wordlex.ngrams import NgramTracker, normalize_ngrams


def feed(tracker, words, stops=()):
    for word in words:
        if word in stops:
            tracker.stop()
        else:
            tracker.accept(word)


ROT_EINE = "rot eine rot rot rot eine rot rot eine rot rot eine rot rot blargh".split()


class TestNgramTracker:
    """Tests for the phrase buffer."""

    def test_counts_trailing_phrases(self):
        tracker = NgramTracker(max_length=5)
        feed(tracker, ["a", "b", "c"])
        assert tracker.counts == {"a b": 1, "b c": 1, "a b c": 1}

    def test_stop_clears_buffer(self):
        tracker = NgramTracker(max_length=5)
        feed(tracker, ["a", "b", ".", "c", "d"], stops={"."})
        assert tracker.counts == {"a b": 1, "c d": 1}

    def test_max_length_bounds_phrases(self):
        tracker = NgramTracker(max_length=2)
        feed(tracker, ["a", "b", "c", "d"])
        assert max(len(p.split()) for p in tracker.counts) == 2
        assert tracker.counts == {"a b": 1, "b c": 1, "c d": 1}

    def test_unbounded(self):
        tracker = NgramTracker(max_length=None)
        feed(tracker, list("abcdefg"))
        assert tracker.counts["a b c d e f g"] == 1

    def test_disabled(self):
        tracker = NgramTracker(enabled=False)
        feed(tracker, ["a", "b", "c"])
        assert tracker.counts == {}

    def test_inject_punctuation(self):
        """Injected marks become part of phrases."""
        tracker = NgramTracker(max_length=3)
        tracker.accept("and")
        tracker.inject_punctuation("/")
        tracker.accept("or")
        assert tracker.counts["and / or"] == 1

    def test_reset(self):
        tracker = NgramTracker()
        feed(tracker, ["a", "b"])
        tracker.reset()
        tracker.accept("c")
        assert tracker.counts == {}

    def test_max_length_too_small(self):
        with pytest.raises(ValueError):
            NgramTracker(max_length=1)

    def test_rot_eine_counts(self):
        """Stop words split the run into phrases; 'rot rot' occurs five times."""
        tracker = NgramTracker(max_length=5)
        feed(tracker, ROT_EINE, stops={"eine"})
        assert tracker.counts == {
            "rot rot": 5,
            "rot rot rot": 1,
            "rot blargh": 1,
            "rot rot blargh": 1,
        }


class TestNormalizeNgrams:
    """Tests for removing nested phrase double counts."""

    def test_docstring_example(self):
        assert normalize_ngrams({"a b c": 2, "a b": 3, "b c": 2}) == {"a b c": 2, "a b": 1}

    def test_rot_eine(self):
        tracker = NgramTracker(max_length=5)
        feed(tracker, ROT_EINE, stops={"eine"})
        normalized = normalize_ngrams(tracker.counts)
        assert normalized["rot rot"] == 2
        assert normalized["rot rot rot"] == 1
        assert normalized["rot rot blargh"] == 1
        assert "rot blargh" not in normalized

    def test_in_place_by_default(self):
        counts = {"a b c": 1, "a b": 1}
        result = normalize_ngrams(counts)
        assert result is counts
        assert counts == {"a b c": 1}

    def test_copy(self):
        counts = {"a b c": 1, "a b": 1}
        result = normalize_ngrams(counts, copy=True)
        assert result == {"a b c": 1}
        assert counts == {"a b c": 1, "a b": 1}

    def test_shrinks_from_both_ends(self):
        """A 4-word phrase is deducted from its 3-word and 2-word edges."""
        counts = {"a b c d": 1, "a b c": 2, "b c d": 2, "a b": 5, "c d": 5, "b c": 5}
        normalize_ngrams(counts)
        assert counts["a b c d"] == 1
        assert counts["a b c"] == 1
        assert counts["b c d"] == 1
        assert counts["b c"] == 5 - 1 - 1

    def test_pairs_untouched(self):
        counts = {"a b": 3, "b c": 1}
        assert normalize_ngrams(counts) == {"a b": 3, "b c": 1}

    def test_equal_length_order_independent(self):
        """Phrases of the same length can be processed in any order."""
        tracker = NgramTracker(max_length=4)
        feed(tracker, "a b c a b c d b c d a b . c d a b c".split(), stops={"."})
        reference = normalize_ngrams(tracker.counts, copy=True)

        items = list(tracker.counts.items())
        longest = [kv for kv in items if len(kv[0].split()) == 3]
        rest = [kv for kv in items if len(kv[0].split()) != 3]
        for perm in itertools.islice(itertools.permutations(longest), 200):
            counts = dict(rest[:len(rest) // 2] + list(perm) + rest[len(rest) // 2:])
            assert normalize_ngrams(counts) == reference
