"""
Cascades: several resolvers consulted in order as one.

A typical cascade puts cheap recognizers for numbers and specials first,
then one or more dictionaries, then a punctuation splitter as a last
resort. The cascade keeps its own run; members are only asked for a
lookup, so their own statistics and caches stay untouched.
"""

import logging
from typing import Iterable, List, Optional, Union

from wordlex.errors import LexiconConfigError
from wordlex.lexicon import Lexicon
from wordlex.provider import DictionaryProvider
from wordlex.run import LexiconRun, Resolution, Resolver
from wordlex.settings import NGRAM_MAX

logger = logging.getLogger(__name__)

Member = Union[Resolver, DictionaryProvider]


class Cascade(LexiconRun):
    """
    An ordered list of resolvers; the first definite answer wins.

    Members may be Lexicons, Recognizers, other Cascades, or bare
    DictionaryProviders (wrapped in a Lexicon). Stop tags declared by
    the members are adopted at construction, so a stop word from any
    member ends a phrase in the cascade's run.

    Example:
        >>> from wordlex.recognizers import Recognizer
        >>> from wordlex.provider import MemoryDictionary
        >>> d = MemoryDictionary()
        >>> _ = d.add_word("rot", "adj")
        >>> c = Cascade(Recognizer('NUM'), d)
        >>> c.resolve("42").tag, c.resolve("rot").tag, c.resolve("xyzzy").tag
        ('NUM', 'adj', '?')

    Raises:
        LexiconConfigError: If there are no members or a member can't resolve words.
    """

    def __init__(
        self,
        *members: Member,
        stop_tags: Iterable[str] = (),
        ngrams: bool = True,
        ngram_max: Optional[int] = NGRAM_MAX,
    ):
        if not members:
            raise LexiconConfigError("A cascade needs at least one member")
        super().__init__(stop_tags=stop_tags, ngrams=ngrams, ngram_max=ngram_max)
        self.members: List[Resolver] = [self._adopt(m) for m in members]
        for member in self.members:
            self.stop_on_tags(*member.declared_stop_tags())
        logger.debug(f"Cascade of {len(self.members)} members, stop tags {sorted(self.stop_tags)}")

    @staticmethod
    def _adopt(member: Member) -> Resolver:
        if isinstance(member, Resolver):
            return member
        if isinstance(member, DictionaryProvider):
            return Lexicon(member)
        raise LexiconConfigError(
            f"Cascade members must be resolvers or dictionary providers, got {type(member).__name__}"
        )

    def lookup(self, word: str, internal: bool = False) -> Optional[Resolution]:
        for member in self.members:
            found = member.lookup(word, internal=internal)
            if found is not None and not found.token.is_unknown:
                return found
        return None
