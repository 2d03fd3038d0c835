"""
Exceptions raised by wordlex.

Resolution itself never raises for an unknown word; these cover
configuration mistakes caught at construction time and malformed
lexicon sources caught while loading.
"""

from typing import Any, Optional


class WordlexError(Exception):
    """Base class for all wordlex errors."""


class LexiconConfigError(WordlexError):
    """Raised when a lexicon, cascade or provider is constructed without a usable source."""


class RecognizerSpecError(WordlexError):
    """Raised when a recognizer specification can't be turned into rules."""

    def __init__(self, spec: Any, reason: str):
        self.spec = spec
        self.reason = reason
        super().__init__(f"Bad recognizer {spec!r}: {reason}")


class LexiconLoadError(WordlexError):
    """Raised when a lexicon definition line can't be loaded."""

    def __init__(self, reason: str, line_no: Optional[int] = None, line: Optional[str] = None):
        self.reason = reason
        self.line_no = line_no
        self.line = line
        where = f" (line {line_no}: {line!r})" if line_no is not None else ""
        super().__init__(f"{reason}{where}")
