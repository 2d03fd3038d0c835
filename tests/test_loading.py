"""
Tests for loading/lexicon_text.py - lexicon definition files.
"""

import pytest
from sqlalchemy import inspect, text

from wordlex.db.connection import get_session
from wordlex.errors import LexiconLoadError
from wordlex.lexicon import Lexicon
from wordlex.loading.lexicon_text import (
    expand_digraphs, load_into_memory, load_lexicon, parse_lexicon, parse_suffix_line, parse_word_line,
)


class TestLineParsing:
    """Tests for single lines."""

    def test_word_with_flags_and_pos(self):
        entry = parse_word_line("child/R   n")
        assert (entry.word, entry.flags, entry.pos) == ("child", "R", "n")

    def test_bare_word(self):
        entry = parse_word_line("news")
        assert (entry.word, entry.flags, entry.pos) == ("news", "", "")

    def test_trailing_fields_ignored(self):
        entry = parse_word_line("dog/S n old-entry")
        assert (entry.word, entry.flags, entry.pos) == ("dog", "S", "n")

    def test_missing_word(self):
        with pytest.raises(ValueError):
            parse_word_line("/R n")

    def test_suffix_dots_are_empty(self):
        rule = parse_suffix_line("n   .   .   ren   +p   .", "R")
        assert rule.category == "R"
        assert rule.stem_pos == "n"
        assert rule.constraint == ""
        assert rule.substitution == ""
        assert rule.suffix == "ren"
        assert rule.tag_delta == "+p"
        assert rule.chain == ""

    def test_short_suffix_line(self):
        rule = parse_suffix_line(". [^aeiou] y ies", "")
        assert (rule.constraint, rule.substitution, rule.suffix, rule.tag_delta) == ("[^aeiou]", "y", "ies", "")

    def test_digraphs(self):
        assert expand_digraphs('A"rger') == "Ärger"
        assert expand_digraphs("Stra sSe caf e'") == "Stra ße caf é"
        assert expand_digraphs("and--or") == "and/or"


class TestParseLexicon:
    """Tests for whole definitions."""

    def test_domains(self, english_lexicon):
        domains = parse_lexicon(string=english_lexicon)
        assert list(domains) == ["words", "prefixes", "starts", "suffixes"]
        assert len(domains["words"].words) == 7
        assert [r.category for r in domains["suffixes"].rules] == ["R", "S"]

    def test_comments(self):
        domains = parse_lexicon(string="words:  # the words\ncat n  # a pet\n# dog n\n")
        assert [e.word for e in domains["words"].words] == ["cat"]
        assert domains["words"].words[0].pos == "n"

    def test_table_rename(self):
        domains = parse_lexicon(string="words: german\nKatze n\n")
        assert domains["words"].table == "german"

    def test_digraph_words(self):
        domains = parse_lexicon(string='words:\nA"pfel n\nand--or conj\n')
        assert [e.word for e in domains["words"].words] == ["Äpfel", "and/or"]

    def test_returning_to_a_domain(self):
        domains = parse_lexicon(string="words:\ncat n\nstarts:\nnews\nwords:\ndog n\n")
        assert [e.word for e in domains["words"].words] == ["cat", "dog"]

    def test_import(self, tmp_path):
        (tmp_path / "more.txt").write_text("dog n\nbird n\n", encoding="utf-8")
        main = tmp_path / "lexicon.txt"
        main.write_text("words: words < more.txt\ncat n\n", encoding="utf-8")
        domains = parse_lexicon(file=main)
        assert [e.word for e in domains["words"].words] == ["dog", "bird", "cat"]

    def test_missing_import(self, tmp_path):
        main = tmp_path / "lexicon.txt"
        main.write_text("words: words < nowhere.txt\n", encoding="utf-8")
        with pytest.raises(LexiconLoadError) as exc_info:
            parse_lexicon(file=main)
        assert exc_info.value.line_no == 1

    def test_entry_before_domain(self):
        with pytest.raises(LexiconLoadError) as exc_info:
            parse_lexicon(string="cat n\n")
        assert exc_info.value.line_no == 1

    def test_duplicate_word(self):
        with pytest.raises(LexiconLoadError) as exc_info:
            parse_lexicon(string="words:\ncat n\nCat n\n")
        assert exc_info.value.line_no == 3

    def test_malformed_line_number(self):
        with pytest.raises(LexiconLoadError) as exc_info:
            parse_lexicon(string="words:\ncat n\n/R n\n")
        assert exc_info.value.line_no == 3
        assert exc_info.value.line == "/R n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LexiconLoadError):
            parse_lexicon(file=tmp_path / "nope.txt")

    def test_needs_one_source(self):
        with pytest.raises(ValueError):
            parse_lexicon()


class TestLoadIntoMemory:
    """Tests for in-memory lexica."""

    def test_resolves(self, english_lexicon):
        lex = Lexicon(load_into_memory(string=english_lexicon))
        assert lex.resolve("unhappy").trace == "un+happy"
        assert lex.resolve("newspaper").trace == "news+paper"
        assert lex.resolve("children").raw_tag == "n+p"

    def test_unused_domain_skipped(self):
        d = load_into_memory(string="words:\ncat n\nends:\npaper n\n")
        assert list(d.tables) == ["words"]
        assert list(d.lookup_exact("paper")) == []

    def test_renamed_word_table(self):
        d = load_into_memory(string="words: german\nKatze n\n")
        assert list(d.tables) == ["german"]


class TestLoadLexicon:
    """Tests for loading into a database."""

    def test_tables_and_counts(self, tmp_path, english_lexicon):
        session = get_session(tmp_path / "lex.sqlt")
        loaded = load_lexicon(session, string=english_lexicon)
        assert loaded == {"words": 7, "prefixes": 1, "starts": 1, "suffixes": 2}
        assert set(inspect(session.get_bind()).get_table_names()) == set(loaded)
        session.close()

    def test_reload_replaces(self, tmp_path):
        session = get_session(tmp_path / "lex.sqlt")
        load_lexicon(session, string="words:\ncat n\n")
        load_lexicon(session, string="words:\ndog n\n")
        words = session.execute(text("select word from words")).scalars().all()
        assert words == ["dog"]
        session.close()

    def test_other_domains_stored(self, tmp_path):
        session = get_session(tmp_path / "lex.sqlt")
        load_lexicon(session, string="words:\ncat n\nends:\npaper n\n")
        assert session.execute(text("select pos from ends where word='paper'")).scalar() == "n"
        session.close()
