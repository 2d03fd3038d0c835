"""
Tests for models.py - Pydantic output models.
"""

from wordlex.lexicon import Lexicon
from wordlex.models import RunReport, TokenResult
from wordlex.tokens import Token


class TestTokenResult:
    """Tests for TokenResult."""

    def test_from_token(self):
        result = TokenResult.from_token(Token("n", "children", trace="child+ren", raw_tag="n+p"))
        assert result.tag == "n"
        assert result.trace == "child+ren"
        assert result.raw_tag == "n+p"
        assert result.extra == []
        assert result.is_unknown is False

    def test_unknown(self):
        assert TokenResult.from_token(Token.unknown("xyzzy")).is_unknown is True

    def test_extra(self):
        result = TokenResult.from_token(Token("NUM", "99.9", extra=(".",)))
        assert result.model_dump()["extra"] == ["."]


class TestRunReport:
    """Tests for RunReport."""

    def test_from_run(self, english_dictionary):
        lex = Lexicon(english_dictionary)
        tokens = [lex.resolve(w) for w in "happy happy cat xyzzy".split()]
        report = RunReport.from_run(lex, tokens)
        assert report.count == 4
        assert report.unknown_count == 1
        assert report.unknown == {"xyzzy": 1}
        assert [t.tag for t in report.tokens] == ["adj", "adj", "n", "?"]
        assert report.ngrams["happy happy"] == 1

    def test_normalize_leaves_run_alone(self, english_dictionary):
        lex = Lexicon(english_dictionary)
        for word in "happy happy cat".split():
            lex.resolve(word)
        report = RunReport.from_run(lex, normalize=True)
        assert report.ngrams == {"happy happy cat": 1}
        assert lex.ngrams["happy cat"] == 1
