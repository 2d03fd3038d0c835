"""
Dictionary-backed word resolution.

A Lexicon resolves a word by trying, in order, until something sticks:

1. the run's cache;
2. an exact (case-insensitive) match in each word table;
3. the lower-cased word, if it has non-ASCII capitals that SQLite's
   NOCASE collation can't fold;
4. a known prefix followed by a resolvable remainder ("un+happy");
5. a known compound start followed by a resolvable remainder
   ("news+paper");
6. a suffix rule whose stripped stem resolves ("child+ren"), merging
   the rule's feature delta into the stem's tag.

Steps 4-6 recurse as internal calls. Within one top-level call a memo
records the words already proven unresolvable and the words whose
decomposition has been entered, so no remainder is derived twice and
no rule set can send the search round in a cycle.

Example:
    >>> from wordlex.provider import MemoryDictionary
    >>> d = MemoryDictionary()
    >>> _ = d.add_word("happy", "adj")
    >>> _ = d.add_prefix("un")
    >>> lex = Lexicon(d)
    >>> lex.resolve("unhappy")
    Token(tag='adj', surface='unhappy', trace='un+happy', raw_tag=None, extra=())
"""

import logging
from dataclasses import replace
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

import regex

from wordlex.errors import LexiconConfigError
from wordlex.features import merge_pos, split_pos
from wordlex.provider import DictionaryProvider
from wordlex.run import CallScope, LexiconRun, Resolution
from wordlex.settings import MIN_REMAINDER, NGRAM_MAX
from wordlex.tokens import AffixCandidate, Token

logger = logging.getLogger(__name__)

TraceSink = Callable[[str], None]


@lru_cache(maxsize=1024)
def _stem_pattern(constraint: str):
    return regex.compile(f"(?:{constraint})$")


def stem_matches(constraint: str, stem: str) -> bool:
    """Whether a stem ends the way a suffix rule requires."""
    if not constraint:
        return True
    return _stem_pattern(constraint).search(stem) is not None


def is_acronym(text: str) -> bool:
    return text.isalpha() and text.isupper()


def _acronym_mismatch(stored: Optional[str], word: str) -> bool:
    return stored is not None and stored != word and is_acronym(stored)


def has_foreign_capital(text: str) -> bool:
    """True if the text has an upper-case letter outside ASCII (Ä, Ó, ...)."""
    return any(ch.isupper() and not ch.isascii() for ch in text)


class Lexicon(LexiconRun):
    """
    A run against one dictionary provider.

    Args:
        provider: Where words and affix rules come from.
        stop_tags: Tags that end a phrase, on top of DEFAULT_STOP_TAGS.
        ngrams: Whether to track phrases.
        ngram_max: Longest phrase tracked.
        trace: Optional callable receiving a message at each decision
            point of a resolution (for debugging morphology).

    Raises:
        LexiconConfigError: If provider isn't a DictionaryProvider.
    """

    def __init__(
        self,
        provider: DictionaryProvider,
        stop_tags: Iterable[str] = (),
        ngrams: bool = True,
        ngram_max: Optional[int] = NGRAM_MAX,
        trace: Optional[TraceSink] = None,
    ):
        if not isinstance(provider, DictionaryProvider):
            raise LexiconConfigError(
                f"Lexicon needs a DictionaryProvider, got {type(provider).__name__}"
            )
        super().__init__(stop_tags=stop_tags, ngrams=ngrams, ngram_max=ngram_max)
        self.provider = provider
        self.trace = trace

    @classmethod
    def open(cls, db_path: Optional[Union[str, Path]] = None, **kwargs) -> 'Lexicon':
        """
        Open a lexicon on a SQLite database.

        Table names (word_tables, prefix_table, start_table, suffix_table)
        go to SqlDictionary; everything else to the Lexicon.
        """
        from wordlex.db.connection import get_session
        from wordlex.db.dictionary import SqlDictionary

        table_args = {
            k: kwargs.pop(k)
            for k in ('word_tables', 'prefix_table', 'start_table', 'suffix_table')
            if k in kwargs
        }
        return cls(SqlDictionary(get_session(db_path), **table_args), **kwargs)

    @classmethod
    def from_text(cls, text: str, **kwargs) -> 'Lexicon':
        """Build a lexicon from a lexicon definition string, held in memory."""
        from wordlex.loading.lexicon_text import load_into_memory

        return cls(load_into_memory(string=text), **kwargs)

    def _note(self, message: str) -> None:
        logger.debug(message)
        if self.trace is not None:
            self.trace(message)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def lookup(self, word: str, internal: bool = False) -> Optional[Resolution]:
        return self._find(word, CallScope(), internal)

    def _find(self, word: str, scope: CallScope, internal: bool) -> Optional[Resolution]:
        if internal and word in scope.nonwords:
            return None
        self._note(f"Looking up {word}")

        if internal:
            cached = self.state.cache.get(word)
            if cached is not None and not _acronym_mismatch(cached.stored_word, word):
                return cached

        for record in self.provider.lookup_exact(word):
            # Keeps acronyms from acting as parts of words: vorher+IG+er for IG
            if internal and _acronym_mismatch(record.word, word):
                continue
            tag, raw = split_pos(record.pos)
            return Resolution(Token(tag, word, raw_tag=raw), stop=record.stop, stored_word=record.word)
        self._note(f"{word} not found directly")

        if has_foreign_capital(word):
            lowered = word.lower()
            self._note(f"Could it be {lowered}?")
            found = self._find(lowered, scope, True)
            if found is not None:
                return Resolution(
                    replace(found.token, surface=word), stop=found.stop, stored_word=found.stored_word
                )

        scope.entered.add(word)

        found = self._strip_front(word, self.provider.lookup_prefixes(word), scope)
        if found is None:
            found = self._strip_front(word, self.provider.lookup_compound_starts(word), scope)
        if found is None:
            found = self._strip_suffix(word, scope)
        if found is not None:
            return found

        self._note(f"{word} is unknown")
        if internal:
            scope.nonwords.add(word)
        return None

    def _strip_front(
        self, word: str, candidates: List[AffixCandidate], scope: CallScope
    ) -> Optional[Resolution]:
        """Try each leading fragment (longest first) against the rest of the word."""
        for start in candidates:
            if not start.fragment:
                continue
            rest = word[len(start.fragment):]
            if len(rest) < MIN_REMAINDER:
                continue
            self._note(f"Could it be ({start.fragment})+{rest}?")
            found = self._find(rest, scope, True)
            if found is not None:
                token = replace(found.token, surface=word, trace=f"{start.fragment}+{rest}")
                return Resolution(token)
        return None

    def _strip_suffix(self, word: str, scope: CallScope) -> Optional[Resolution]:
        """Try each suffix rule whose suffix ends the word."""
        for rule in self.provider.lookup_suffixes(word):
            if len(rule.suffix) >= len(word):
                continue
            stem = word[:len(word) - len(rule.suffix)]
            if len(stem) < MIN_REMAINDER or stem in scope.nonwords:
                continue
            if not stem_matches(rule.constraint, stem):
                continue
            rest = stem + rule.substitution
            if len(rest) < MIN_REMAINDER or rest in scope.entered:
                continue
            self._note(f"Could it be {rest}+({rule.suffix})?")
            found = self._find(rest, scope, True)
            if found is None:
                continue
            inner = found.token
            tag, raw = split_pos(merge_pos(inner.tag, inner.raw_tag, rule.tag_delta))
            token = Token(
                tag=tag,
                surface=word,
                trace=f"{inner.trace or rest}+{rule.suffix}",
                raw_tag=raw,
            )
            return Resolution(token)
        return None
