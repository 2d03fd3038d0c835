"""
Phrase (n-gram) tracking for a lexicon run.

Accepted words are appended to a bounded phrase buffer; every time a
word comes in, each trailing run of two or more buffered words is
counted as a phrase. A stop clears the buffer, so phrases never span a
stop word or a boundary the tokenizer signals (usually punctuation).
"""

from collections import Counter, defaultdict, deque
from typing import Deque, Dict, List, Optional


class NgramTracker:
    """
    Sliding phrase buffer plus phrase counts.

    Args:
        max_length: Longest phrase kept in the buffer; None means unbounded.
        enabled: When False, accept() is a no-op and nothing is counted.
    """

    def __init__(self, max_length: Optional[int] = None, enabled: bool = True):
        if max_length is not None and max_length < 2:
            raise ValueError(f"max_length must be at least 2, got {max_length}")
        self.max_length = max_length
        self.enabled = enabled
        self.buffer: Deque[str] = deque(maxlen=max_length)
        self.counts: Counter = Counter()

    def accept(self, word: str) -> None:
        """Append a word and count every trailing phrase it completes."""
        if not self.enabled:
            return
        self.buffer.append(word)
        words = list(self.buffer)
        for length in range(2, len(words) + 1):
            self.counts[' '.join(words[-length:])] += 1

    def stop(self) -> None:
        """Mark a phrase boundary."""
        self.buffer.clear()

    def inject_punctuation(self, *marks: str) -> None:
        """Feed punctuation that should count as part of phrases (slashes, hyphens)."""
        for mark in marks:
            self.accept(mark)

    def reset(self) -> None:
        self.buffer.clear()
        self.counts = Counter()


def normalize_ngrams(counts: Dict[str, int], copy: bool = False) -> Dict[str, int]:
    """
    Remove double counting of phrases nested in longer phrases.

    Phrases are processed longest first. Each phrase's count is deducted
    from every shorter phrase it starts or ends with (dropping words from
    the front and from the back until two words are left); a phrase whose
    count falls to zero or below is deleted. Only meaningful once a run
    is complete.

    Args:
        counts: Phrase -> count map, e.g. from NgramTracker.counts.
        copy: Work on a copy instead of modifying counts in place.

    Returns:
        The normalized map (counts itself unless copy is set).

    Example:
        >>> normalize_ngrams({'a b c': 2, 'a b': 3, 'b c': 2})
        {'a b c': 2, 'a b': 1}
    """
    if copy:
        counts = dict(counts)

    by_length: Dict[int, List[str]] = defaultdict(list)
    for phrase in counts:
        by_length[len(phrase.split(' '))].append(phrase)

    for length in sorted(by_length, reverse=True):
        if length <= 2:
            break
        for phrase in by_length[length]:
            if phrase not in counts:
                continue
            count = counts[phrase]
            front = phrase.split(' ')
            back = list(front)
            while len(front) > 2:
                front.pop(0)
                back.pop()
                for sub in (' '.join(front), ' '.join(back)):
                    if sub in counts:
                        remaining = counts[sub] - count
                        if remaining > 0:
                            counts[sub] = remaining
                        else:
                            del counts[sub]
    return counts
