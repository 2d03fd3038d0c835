"""
Rule-based recognizers for word-like things that don't belong in a dictionary.

Numbers, dates, URLs, ID strings and the like are treated as words by a
grammar but are better caught by a lightweight rule than looked up. A
Recognizer is an ordered chain of rules; the first rule that matches
wins, and no match at all returns None (not the unknown token), so a
cascade knows to ask its next member.

Rules come in three kinds:

- Literal: exact string equality.
- Pattern: whole-string regular expression; non-empty captures are
  appended to the token's extra fields.
- Predicate: a function returning a complete token (or None); it may
  choose its own tag, as the date predicate does with DATE and TIME.

Specs are resolved once, at construction, into a flat rule list:

    >>> rec = Recognizer('NUM', 'URL', ('YES', 'yes'))
    >>> rec.match('98.2').to_list()
    ['NUM', '98.2', '.']
    >>> rec.match('YES') is None
    True
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import (
    Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple, Union,
)

import regex

from wordlex import settings
from wordlex.errors import RecognizerSpecError
from wordlex.run import Resolution, Resolver
from wordlex.settings import FALLBACK_TLDS, SPLIT_TAG
from wordlex.tokens import Token

logger = logging.getLogger(__name__)

PredicateResult = Optional[Union[Token, Sequence[str]]]


# ============================================================================
# Rule Variants
# ============================================================================

@dataclass(frozen=True)
class Literal:
    """Matches one exact string."""
    tag: str
    value: str

    def match(self, word: str) -> Optional[Token]:
        if word == self.value:
            return Token(self.tag, word)
        return None


@dataclass(frozen=True)
class Pattern:
    """Matches a whole word against a regular expression."""
    tag: str
    pattern: Any
    flags: int = 0

    def __post_init__(self):
        if isinstance(self.pattern, str):
            object.__setattr__(self, 'pattern', regex.compile(self.pattern, self.flags))

    def match(self, word: str) -> Optional[Token]:
        m = self.pattern.fullmatch(word)
        if m is None:
            return None
        return Token(self.tag, word, extra=tuple(g for g in m.groups() if g))


@dataclass(frozen=True)
class Predicate:
    """Asks a function; the function builds the whole token, tag included."""
    tag: Optional[str]
    func: Callable[[str], PredicateResult]

    def match(self, word: str) -> Optional[Token]:
        result = self.func(word)
        if not result:
            return None
        if isinstance(result, Token):
            return result
        if isinstance(result, str) or not isinstance(result, Sequence) or len(result) < 2:
            logger.warning(f"Predicate {self.func!r} returned {result!r} for {word!r}; treated as no match")
            return None
        return Token.from_fields(result)


@dataclass(frozen=True)
class Standard:
    """A named rule (or group of rules) from the standard catalog."""
    name: str


@dataclass(frozen=True)
class Group:
    """Several specs spliced in place of one."""
    specs: Tuple[Any, ...]


Rule = Union[Literal, Pattern, Predicate]


# ============================================================================
# Standard Predicates
# ============================================================================

_SLASH_DATE = regex.compile(r'\d+/\d+/\d+')
_TIME = regex.compile(r'\d+:\d\d(?::\d\d)?')
_TIME_RANGE = regex.compile(r'\d+:\d\d(?::\d\d)?-\d+:\d\d(?::\d\d)?')
_DOT_DATE = regex.compile(r'(\d+)\.(\d+)\.(\d+)')
_DASH_DATE = regex.compile(r'(\d+)-(\d+)-(\d+)')


def _plausible_year(n: int) -> bool:
    return 1500 <= n <= 3000


def date_recognizer(word: str) -> Optional[Token]:
    """
    Recognize plausible dates and times.

    Slashed dates (1/2/2014) are always dates. Dotted and dashed dates
    need a year between 1500 and 3000 at the start or the end and two
    other parts under 32; there's no telling day-first from month-first
    without context, so no attempt is made. x:xx, xx:xx:xx and ranges
    like 9:00-17:30 are TIME.

    Example:
        >>> date_recognizer('2004.03.04')
        Token(tag='DATE', surface='2004.03.04', trace=None, raw_tag=None, extra=())
        >>> date_recognizer('4.03.1') is None
        True
    """
    if _SLASH_DATE.fullmatch(word):
        return Token('DATE', word)
    if _TIME.fullmatch(word) or _TIME_RANGE.fullmatch(word):
        return Token('TIME', word)

    m = _DOT_DATE.fullmatch(word) or _DASH_DATE.fullmatch(word)
    if m:
        first, middle, last = (int(g) for g in m.groups())
        if first < 32 and middle < 32 and _plausible_year(last):
            return Token('DATE', word)
        if last < 32 and middle < 32 and _plausible_year(first):
            return Token('DATE', word)
    return None


@lru_cache(maxsize=None)
def load_tld_list(path: Optional[Path] = None) -> Optional[FrozenSet[str]]:
    """
    Load a top-level domain list (IANA tlds-alpha-by-domain.txt format).

    Args:
        path: List file; defaults to settings.TLD_LIST_PATH.

    Returns:
        Lower-cased TLDs, or None if no list is configured or readable.
    """
    path = path or settings.TLD_LIST_PATH
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        logger.warning(f"TLD list not found at {path}, using fallback TLDs")
        return None

    tlds = set()
    with open(path, encoding='utf-8') as f:
        for line in f:
            line = line.split('#', 1)[0].strip()
            if line:
                tlds.add(line.lower())
    logger.debug(f"Loaded {len(tlds)} TLDs from {path}")
    return frozenset(tlds)


def valid_tld(tld: str, tlds: Optional[Iterable[str]] = None) -> bool:
    """Whether tld looks like a real top-level domain."""
    known = load_tld_list() if tlds is None else tlds
    if known is not None:
        return tld.lower() in known
    return len(tld) == 2 or tld in FALLBACK_TLDS


_SCHEME_URL = regex.compile(r'[a-z]+://.+')
_MAILTO = regex.compile(r'mailto:[a-z]')
_EMAIL = regex.compile(r'[^@]+@[^@]+\..+')
_HOST = regex.compile(r'[a-z0-9.]+\.([a-z]+)')


def url_recognizer(word: str, tlds: Optional[Iterable[str]] = None) -> Optional[Token]:
    """
    Recognize things that look like URLs or email addresses.

    This judges shape only; nothing is validated:

        http://my.actual.url/this?query  -> URL
        michael@vivtek.com               -> EMAIL
        www.mybiddingsite.de             -> URL
        something.else                   -> no match (unknown TLD)
    """
    if _SCHEME_URL.fullmatch(word):
        return Token('URL', word)
    if _MAILTO.match(word):
        return Token('URL', word)
    if _EMAIL.fullmatch(word):
        return Token('EMAIL', word)
    m = _HOST.match(word)
    if m and valid_tld(m.group(1), tlds):
        return Token('URL', word)
    return None


_PUNCT_SPLIT = regex.compile(r'([\p{P}=])')


def punctuation_splitter(word: str) -> Optional[Token]:
    """
    Split a word at punctuation, keeping the punctuation as pieces.

    A SPLIT token tells the tokenizer to re-feed its pieces as new words.
    A splitter usually goes after the dictionaries, or "and/or" and
    "e-mail" would never be recognized as words.

    Example:
        >>> punctuation_splitter('and/or').pieces
        ('and', '/', 'or')
    """
    pieces = tuple(p for p in _PUNCT_SPLIT.split(word) if p)
    if len(pieces) <= 1:
        return None
    return Token(SPLIT_TAG, word, extra=pieces)


# ============================================================================
# Standard Catalog
# ============================================================================

STANDARD_RULES: Dict[str, Tuple[Any, ...]] = {
    'COPY': (Literal('COPY', '©'),),
    'LSEC': (Literal('LSEC', '§'), Literal('LSEC', '§§')),
    'NUM': (
        Pattern('NUM', r'\d+'),
        Pattern('NUM', r'\d+([.,])\d+'),
        Pattern('NUM', r'\d[\d.]*'),
    ),
    'DATE': (Predicate('DATE', date_recognizer),),
    'URL': (Predicate('URL', url_recognizer),),
    'ID': (Pattern('ID', r'[a-z][a-z0-9_]*[0-9_][a-z0-9_]*', regex.IGNORECASE),),
    'SPLIT': (Predicate(SPLIT_TAG, punctuation_splitter),),
}

STANDARD_GROUPS: Dict[str, Tuple[str, ...]] = {
    'SPECIALS': ('COPY', 'LSEC'),
}


def _from_tuple(spec: tuple) -> List[Rule]:
    """Expand a (tag, matcher, ...) tuple into one rule per matcher."""
    if len(spec) < 2 or not isinstance(spec[0], str):
        raise RecognizerSpecError(spec, "a rule tuple needs a tag and at least one matcher")
    tag = spec[0]
    rules: List[Rule] = []
    for matcher in spec[1:]:
        if isinstance(matcher, str):
            rules.append(Literal(tag, matcher))
        elif hasattr(matcher, 'fullmatch'):
            rules.append(Pattern(tag, matcher))
        elif callable(matcher):
            rules.append(Predicate(tag, matcher))
        else:
            raise RecognizerSpecError(spec, f"can't match with {matcher!r}")
    return rules


class Recognizer(Resolver):
    """
    An ordered chain of recognizer rules.

    Args:
        *specs: Each spec is one of:
            - a standard name ('NUM', 'URL', 'SPECIALS', ...);
            - a (tag, matcher, ...) tuple whose matchers are strings
              (literals), compiled patterns, or callables (predicates);
            - a Literal, Pattern, Predicate, Standard or Group;
            - a bare callable, used as a predicate.
        standards: Extra named specs, consulted before the built-in catalog.

    Raises:
        RecognizerSpecError: For unknown names or malformed specs.
    """

    def __init__(self, *specs: Any, standards: Optional[Mapping[str, Sequence[Any]]] = None):
        self.standards: Dict[str, Sequence[Any]] = dict(standards or {})
        self.rules: List[Rule] = self._expand(specs, ())
        logger.debug(f"Recognizer built with {len(self.rules)} rules")

    def standard_recognizer(self, name: str) -> Sequence[Any]:
        """Look up a standard rule or group by name."""
        if name in self.standards:
            return self.standards[name]
        if name in STANDARD_RULES:
            return STANDARD_RULES[name]
        if name in STANDARD_GROUPS:
            return STANDARD_GROUPS[name]
        raise RecognizerSpecError(name, "unknown recognizer")

    def _expand(self, specs: Iterable[Any], naming: Tuple[str, ...]) -> List[Rule]:
        rules: List[Rule] = []
        for spec in specs:
            if isinstance(spec, (Literal, Pattern, Predicate)):
                rules.append(spec)
            elif isinstance(spec, (str, Standard)):
                name = spec if isinstance(spec, str) else spec.name
                if name in naming:
                    raise RecognizerSpecError(name, f"group refers to itself via {' > '.join(naming)}")
                rules.extend(self._expand(self.standard_recognizer(name), naming + (name,)))
            elif isinstance(spec, Group):
                rules.extend(self._expand(spec.specs, naming))
            elif isinstance(spec, tuple):
                rules.extend(_from_tuple(spec))
            elif callable(spec):
                rules.append(Predicate(None, spec))
            else:
                raise RecognizerSpecError(spec, "not a name, a rule tuple or a callable")
        return rules

    def match(self, word: str) -> Optional[Token]:
        """Return the first rule's token for word, or None if no rule matches."""
        for rule in self.rules:
            token = rule.match(word)
            if token is not None:
                return token
        return None

    def lookup(self, word: str, internal: bool = False) -> Optional[Resolution]:
        token = self.match(word)
        return Resolution(token) if token is not None else None
