"""
Dictionary providers: where a lexicon gets its words and affix rules.

The resolver only ever asks four questions, in this shape:

- lookup_exact: at most one record per word table, in table order;
- lookup_prefixes / lookup_compound_starts: fragments the word starts
  with, longest first;
- lookup_suffixes: rules whose suffix the word ends with, longest suffix
  first, then shortest substitution first.

MemoryDictionary answers them from Python data; SqlDictionary
(wordlex.db.dictionary) answers them from SQLite tables.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, Iterator, List, Optional, Sequence

from wordlex.tokens import AffixCandidate, SuffixRule, WordRecord

_ASCII_LOWER = {c: c + 32 for c in range(ord('A'), ord('Z') + 1)}


def nocase(text: str) -> str:
    """Fold ASCII letters only, the way SQLite's NOCASE collation does."""
    return text.translate(_ASCII_LOWER)


class DictionaryProvider(ABC):
    """Read-only access to word tables and affix rules."""

    @abstractmethod
    def lookup_exact(self, word: str) -> Iterator[WordRecord]:
        """Yield at most one case-insensitive match per word table, in table order."""

    def lookup_prefixes(self, word: str) -> List[AffixCandidate]:
        """Known prefixes the word starts with, longest first."""
        return []

    def lookup_compound_starts(self, word: str) -> List[AffixCandidate]:
        """Known compound-word starts the word begins with, longest first."""
        return []

    def lookup_suffixes(self, word: str) -> List[SuffixRule]:
        """Suffix rules whose suffix ends the word (see module docstring for order)."""
        return []


def order_suffix_rules(rules: Sequence[SuffixRule]) -> List[SuffixRule]:
    """Longest suffix first, then shortest substitution first."""
    return sorted(rules, key=lambda r: (-len(r.suffix), len(r.substitution)))


# ============================================================================
# In-Memory Provider
# ============================================================================

class MemoryDictionary(DictionaryProvider):
    """
    A provider backed by plain dicts.

    Handy for tests and small, hand-written lexica:

        >>> d = MemoryDictionary()
        >>> _ = d.add_word("happy", "adj")
        >>> _ = d.add_prefix("un")
        >>> [r.tag for r in d.lookup_exact("Happy")]
        ['adj']

    Args:
        tables: Names of the word tables, in lookup order.
    """

    def __init__(self, tables: Sequence[str] = ('words',)):
        if not tables:
            raise ValueError("MemoryDictionary needs at least one word table")
        self.tables: Dict[str, Dict[str, WordRecord]] = OrderedDict((t, {}) for t in tables)
        self.prefixes: Dict[str, AffixCandidate] = {}
        self.starts: Dict[str, AffixCandidate] = {}
        self.suffixes: List[SuffixRule] = []

    def add_word(
        self,
        word: str,
        tag: Optional[str] = None,
        flags: str = "",
        stop: bool = False,
        table: Optional[str] = None,
    ) -> WordRecord:
        """Add (or replace) a word in a table; the first table by default."""
        if table is None:
            table = next(iter(self.tables))
        if table not in self.tables:
            self.tables[table] = {}
        record = WordRecord(word=word, tag=tag or None, flags=flags, stop=stop)
        self.tables[table][nocase(word)] = record
        return record

    def add_prefix(self, fragment: str, tag: Optional[str] = None, flags: str = "") -> AffixCandidate:
        candidate = AffixCandidate(fragment=fragment, tag=tag or None, flags=flags)
        self.prefixes[nocase(fragment)] = candidate
        return candidate

    def add_compound_start(self, fragment: str, tag: Optional[str] = None, flags: str = "") -> AffixCandidate:
        candidate = AffixCandidate(fragment=fragment, tag=tag or None, flags=flags)
        self.starts[nocase(fragment)] = candidate
        return candidate

    def add_suffix_rule(self, rule: SuffixRule) -> SuffixRule:
        self.suffixes.append(rule)
        return rule

    def lookup_exact(self, word: str) -> Iterator[WordRecord]:
        key = nocase(word)
        for table in self.tables.values():
            record = table.get(key)
            if record is not None:
                yield record

    @staticmethod
    def _starting(fragments: Dict[str, AffixCandidate], word: str) -> List[AffixCandidate]:
        key = nocase(word)
        found = [c for k, c in fragments.items() if key.startswith(k)]
        return sorted(found, key=lambda c: -len(c.fragment))

    def lookup_prefixes(self, word: str) -> List[AffixCandidate]:
        return self._starting(self.prefixes, word)

    def lookup_compound_starts(self, word: str) -> List[AffixCandidate]:
        return self._starting(self.starts, word)

    def lookup_suffixes(self, word: str) -> List[SuffixRule]:
        return order_suffix_rules([r for r in self.suffixes if word.endswith(r.suffix)])
