"""
Lexicon runs: the shared bookkeeping behind every resolver.

A run roughly corresponds to the words of one document. It counts how
often each word was looked up, which words stayed unknown, and which
phrases occurred, and it caches definite resolutions so a repeated word
is only decomposed once.

Both the single-lexicon resolver and the cascade are LexiconRuns; they
only differ in how lookup() finds a token. Everything that happens
around a top-level call lives here, once.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple, Union

from wordlex.ngrams import NgramTracker, normalize_ngrams
from wordlex.settings import NGRAM_MAX
from wordlex.tokens import Token

logger = logging.getLogger(__name__)


# ============================================================================
# Resolver Interface
# ============================================================================

@dataclass(frozen=True)
class Resolution:
    """
    A definite lookup result plus the dictionary's own stop marker.

    stored_word is the dictionary's spelling for exact hits, which may
    differ in case from the word looked up.
    """
    token: Token
    stop: bool = False
    stored_word: Optional[str] = None


@dataclass
class CallScope:
    """
    Memo for one top-level resolution tree.

    Attributes:
        nonwords: Words proven unresolvable during this call.
        entered: Words whose decomposition has been started during this call.
    """
    nonwords: Set[str] = field(default_factory=set)
    entered: Set[str] = field(default_factory=set)


class Resolver(ABC):
    """Anything a cascade can consult: lexica, recognizers, other cascades."""

    @abstractmethod
    def lookup(self, word: str, internal: bool = False) -> Optional[Resolution]:
        """
        Try to resolve a word without touching any run statistics.

        Args:
            word: The word to resolve.
            internal: True when called while testing a decomposition.

        Returns:
            A Resolution, or None if this resolver has no definite answer.
        """

    def declared_stop_tags(self) -> FrozenSet[str]:
        """Tags that should end a phrase when a word resolves to them."""
        return frozenset()


# ============================================================================
# Run State
# ============================================================================

@dataclass
class RunState:
    """Everything a run accumulates; cleared by LexiconRun.restart()."""
    count: int = 0
    unknown_count: int = 0
    words: Counter = field(default_factory=Counter)
    unknown: Counter = field(default_factory=Counter)
    cache: Dict[str, Resolution] = field(default_factory=dict)

    def counts(self) -> Dict[str, int]:
        return {'count': self.count, 'ucount': self.unknown_count}


class LexiconRun(Resolver):
    """
    A resolver that owns a run: statistics, cache and phrase tracking.

    Subclasses implement lookup(); resolve() wraps it with the run's
    bookkeeping for top-level calls.

    Args:
        stop_tags: Extra tags that force a phrase boundary.
        ngrams: Whether to track phrases at all.
        ngram_max: Longest phrase tracked; None for unbounded.
    """

    # Language-specific subclasses list their stop word tags here
    DEFAULT_STOP_TAGS: FrozenSet[str] = frozenset()

    def __init__(
        self,
        stop_tags: Iterable[str] = (),
        ngrams: bool = True,
        ngram_max: Optional[int] = NGRAM_MAX,
    ):
        self.stop_tags: Set[str] = set(self.DEFAULT_STOP_TAGS)
        self.stop_on_tags(*stop_tags)
        self.tracker = NgramTracker(max_length=ngram_max, enabled=ngrams)
        self.state = RunState()

    # ------------------------------------------------------------------
    # Stop words
    # ------------------------------------------------------------------

    def stop_on_tags(self, *tags: str) -> None:
        """Register tags that end a phrase. By default nothing is a stop word."""
        self.stop_tags.update(tags)

    def declared_stop_tags(self) -> FrozenSet[str]:
        return frozenset(self.stop_tags)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, word: str, internal: bool = False) -> Token:
        """
        Resolve a word to a token; never raises for unknown words.

        Top-level calls (internal=False) update the run: word counts, the
        cache, and the phrase tracker. Internal calls only return a token.

        Args:
            word: The word to resolve.
            internal: True for recursive calls made while decomposing.

        Returns:
            The resolved Token, or the unknown token ("?", word).
        """
        if internal:
            found = self.lookup(word, internal=True)
            return found.token if found else Token.unknown(word)

        self.state.count += 1
        self.state.words[word] += 1

        found = self.state.cache.get(word)
        if found is None:
            found = self.lookup(word)
            if found is not None:
                self.state.cache[word] = found
        if found is None:
            self.state.unknown_count += 1
            self.state.unknown[word] += 1
            found = Resolution(Token.unknown(word))

        self._track(found)
        return found.token

    def _track(self, found: Resolution) -> None:
        token = found.token
        if token.is_split:
            return
        if found.stop or token.tag in self.stop_tags:
            self.tracker.stop()
        else:
            self.tracker.accept(token.surface)

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Signal a phrase boundary (usually punctuation the tokenizer saw)."""
        self.tracker.stop()

    def inject_punctuation(self, *marks: str) -> None:
        """Feed punctuation that should count as part of phrases, e.g. slashes."""
        self.tracker.inject_punctuation(*marks)

    def restart(self) -> None:
        """Clear statistics, cache and phrases to start a new run with the same lexicon."""
        self.state = RunState()
        self.tracker.reset()
        logger.debug(f"{type(self).__name__} restarted")

    @property
    def ngrams(self) -> Counter:
        return self.tracker.counts

    def stats(self, which: Optional[str] = None) -> Union[Dict[str, int], Tuple[Dict[str, int], Counter, Counter]]:
        """
        Retrieve the current statistics of the run.

        Args:
            which: One of 'stats', 'words', 'unknown', 'ngrams'; None for all three of
                (stats, words, unknown).

        Returns:
            The named map, or a (stats, words, unknown) tuple.
        """
        maps = {
            'stats': self.state.counts(),
            'words': self.state.words,
            'unknown': self.state.unknown,
            'ngrams': self.tracker.counts,
        }
        if which is None:
            return maps['stats'], maps['words'], maps['unknown']
        if which not in maps:
            raise KeyError(f"Unknown statistic: {which}")
        return maps[which]

    def normalize_ngrams(self, counts: Optional[Dict[str, int]] = None) -> Dict[str, int]:
        """
        Normalize a phrase map in place (the run's own by default).

        Only meaningful after the run is complete.
        """
        if counts is None:
            counts = self.tracker.counts
        return normalize_ngrams(counts)
