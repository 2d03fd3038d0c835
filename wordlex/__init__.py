"""
Wordlex: dictionary-backed word resolution for tokenizers.

A tokenizer hands wordlex one word at a time and gets a tagged token
back. Words are found in a lexicon directly or by stripping prefixes,
compound starts and rule-based suffixes; numbers, dates and URLs are
caught by recognizers; cascades chain both. Each run counts words,
unknowns and phrases along the way.

Example:
    >>> from wordlex import Lexicon
    >>> lex = Lexicon.from_text('''
    ... words:
    ... child  n
    ... suffixes:
    ... R: irregular plural
    ... n   .   .   ren   +p   .
    ... ''')
    >>> lex.resolve("children").to_list()
    ['n', 'children', 'child+ren', 'n+p']
"""

__version__ = "0.1.0"

from wordlex.cascade import Cascade
from wordlex.errors import LexiconConfigError, LexiconLoadError, RecognizerSpecError, WordlexError
from wordlex.lexicon import Lexicon
from wordlex.provider import DictionaryProvider, MemoryDictionary
from wordlex.recognizers import Recognizer
from wordlex.tokens import Token

__all__ = [
    "Cascade",
    "DictionaryProvider",
    "Lexicon",
    "LexiconConfigError",
    "LexiconLoadError",
    "MemoryDictionary",
    "Recognizer",
    "RecognizerSpecError",
    "Token",
    "WordlexError",
]
