"""
Token and dictionary record types for wordlex.

A Token is what every resolver hands back to the tokenizer. The other
dataclasses are the transient rows a DictionaryProvider answers with.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from wordlex.settings import DEFAULT_TAG, SPLIT_TAG, UNKNOWN_TAG


# ============================================================================
# Tokens
# ============================================================================

@dataclass(frozen=True)
class Token:
    """
    A resolved (or unresolved) word.

    Attributes:
        tag: Part-of-speech or recognizer tag; "?" for unknown words.
        surface: The word as the caller passed it in.
        trace: Decomposition path, e.g. "un+happy" or "child+ren".
        raw_tag: Composite tag ("n+p") the suffix algebra produced, if any.
        extra: Additional fields, e.g. pattern captures or splitter pieces.
    """
    tag: str
    surface: str
    trace: Optional[str] = None
    raw_tag: Optional[str] = None
    extra: Tuple[str, ...] = ()

    @classmethod
    def unknown(cls, word: str) -> 'Token':
        """The unknown token for a word."""
        return cls(UNKNOWN_TAG, word)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> 'Token':
        """Build a token from a flat (tag, surface, *extra) sequence."""
        if len(fields) < 2:
            raise ValueError(f"Token needs at least a tag and a surface: {fields!r}")
        return cls(tag=fields[0], surface=fields[1], extra=tuple(fields[2:]))

    @property
    def is_unknown(self) -> bool:
        return self.tag == UNKNOWN_TAG

    @property
    def is_split(self) -> bool:
        return self.tag == SPLIT_TAG

    @property
    def pieces(self) -> Tuple[str, ...]:
        """Pieces a splitter token asks the tokenizer to re-feed."""
        return self.extra if self.is_split else ()

    def to_list(self) -> List[str]:
        """Flatten into the classic [tag, surface, ...] token array."""
        fields = [self.tag, self.surface]
        if self.raw_tag:
            fields.extend([self.trace or self.surface, self.raw_tag])
        elif self.trace:
            fields.append(self.trace)
        fields.extend(self.extra)
        return fields


# ============================================================================
# Dictionary Records
# ============================================================================

@dataclass(frozen=True)
class WordRecord:
    """An exact-match row from one of the word tables."""
    word: str
    tag: Optional[str] = None
    flags: str = ""
    stop: bool = False

    @property
    def pos(self) -> str:
        """The tag, or the generic word tag for tables without one."""
        return self.tag or DEFAULT_TAG


@dataclass(frozen=True)
class AffixCandidate:
    """A prefix or compound-start fragment matching the front of a word."""
    fragment: str
    tag: Optional[str] = None
    flags: str = ""


@dataclass(frozen=True)
class SuffixRule:
    """
    A suffix stripping rule.

    Attributes:
        category: Flag letter the rule was declared under (e.g. "R").
        stem_pos: Part of speech the stem is expected to have; stored, not enforced.
        constraint: Pattern the stripped stem has to end with ("" = any).
        substitution: Text appended to the stem before looking it up.
        suffix: The literal suffix being stripped.
        tag_delta: Feature delta merged into the stem's tag ("+p", "n-f").
        chain: Reserved for chained rules; unused.
    """
    category: str = ""
    stem_pos: str = ""
    constraint: str = ""
    substitution: str = ""
    suffix: str = ""
    tag_delta: str = ""
    chain: str = ""
