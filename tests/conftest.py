"""
Shared fixtures for wordlex tests.
"""

import pytest

from wordlex.db.connection import dispose_engines, get_session
from wordlex.loading.lexicon_text import load_lexicon
from wordlex.provider import MemoryDictionary
from wordlex.tokens import SuffixRule


ENGLISH_LEXICON = """
# A tiny English lexicon
words:
the       art+def
a         art+indef
happy     adj
child/R   n
paper     n
cat       n
IG        abbr

prefixes:
un

starts:
news

suffixes:
R: irregular plural
n   .   .   ren   +p   .
S: regular plural
.   .   .   s     +p   .
"""


@pytest.fixture
def english_lexicon():
    """The text of a small English lexicon definition."""
    return ENGLISH_LEXICON


@pytest.fixture
def english_dictionary():
    """A MemoryDictionary with a few words, one prefix, one start and two suffix rules."""
    d = MemoryDictionary()
    d.add_word("the", "art+def")
    d.add_word("a", "art+indef")
    d.add_word("happy", "adj")
    d.add_word("child", "n", flags="R")
    d.add_word("paper", "n")
    d.add_word("cat", "n")
    d.add_word("IG", "abbr")
    d.add_prefix("un")
    d.add_compound_start("news")
    d.add_suffix_rule(SuffixRule(category="R", stem_pos="n", suffix="ren", tag_delta="+p"))
    d.add_suffix_rule(SuffixRule(category="S", suffix="s", tag_delta="+p"))
    return d


@pytest.fixture
def db_path(tmp_path):
    """A lexicon database loaded from ENGLISH_LEXICON."""
    path = tmp_path / "lexicon.sqlt"
    session = get_session(path)
    try:
        load_lexicon(session, string=ENGLISH_LEXICON)
    finally:
        session.close()
    yield path
    dispose_engines()


@pytest.fixture
def db_session(db_path):
    """An open session on the test database."""
    session = get_session(db_path)
    yield session
    session.close()
