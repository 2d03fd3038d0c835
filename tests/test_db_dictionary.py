"""
Tests for db/ - SQLite storage and the SQL dictionary provider.
"""

import pytest
from sqlalchemy import MetaData, inspect

from wordlex.db.connection import get_engine, get_session
from wordlex.db.dictionary import SqlDictionary
from wordlex.db.models import create_tables, suffix_table, word_table
from wordlex.errors import LexiconConfigError
from wordlex.lexicon import Lexicon


class TestSqlDictionary:
    """Tests for lookups against a loaded database."""

    def test_exact_nocase(self, db_session):
        d = SqlDictionary(db_session)
        records = list(d.lookup_exact("CAT"))
        assert len(records) == 1
        assert records[0].word == "cat"
        assert records[0].tag == "n"

    def test_exact_flags(self, db_session):
        record = next(SqlDictionary(db_session).lookup_exact("child"))
        assert record.flags == "R"

    def test_exact_missing(self, db_session):
        assert list(SqlDictionary(db_session).lookup_exact("dog")) == []

    def test_prefixes(self, db_session):
        d = SqlDictionary(db_session)
        assert [c.fragment for c in d.lookup_prefixes("Unhappy")] == ["un"]
        assert d.lookup_prefixes("happy") == []

    def test_compound_starts(self, db_session):
        d = SqlDictionary(db_session)
        assert [c.fragment for c in d.lookup_compound_starts("newspaper")] == ["news"]

    def test_suffixes(self, db_session):
        d = SqlDictionary(db_session)
        rules = d.lookup_suffixes("children")
        assert [r.suffix for r in rules] == ["ren"]
        assert rules[0].category == "R"
        assert rules[0].stem_pos == "n"
        assert rules[0].tag_delta == "+p"
        assert rules[0].substitution == ""

    def test_suffix_order(self, tmp_path):
        path = tmp_path / "order.sqlt"
        engine = get_engine(path)
        words, suffixes = create_tables(engine, [("words", "words"), ("suffixes", "suffixes")])
        with engine.begin() as conn:
            conn.execute(suffixes.insert(), [
                {"suffix": "s", "stem": ""},
                {"suffix": "ies", "stem": "ye"},
                {"suffix": "ies", "stem": "y"},
                {"suffix": "es", "stem": ""},
            ])
        session = get_session(path)
        rules = SqlDictionary(session).lookup_suffixes("flies")
        session.close()
        assert [(r.suffix, r.substitution) for r in rules] == [
            ("ies", "y"), ("ies", "ye"), ("es", ""), ("s", ""),
        ]

    def test_longest_fragment_first(self, tmp_path):
        path = tmp_path / "starts.sqlt"
        engine = get_engine(path)
        words, starts = create_tables(engine, [("words", "words"), ("starts", "starts")])
        with engine.begin() as conn:
            conn.execute(starts.insert(), [{"word": "news"}, {"word": "newspaper"}, {"word": "new"}])
        session = get_session(path)
        found = SqlDictionary(session).lookup_compound_starts("newspaperman")
        session.close()
        assert [c.fragment for c in found] == ["newspaper", "news", "new"]


class TestSqlDictionaryConfiguration:
    """Tests for table reflection."""

    def test_missing_word_table(self, db_session):
        with pytest.raises(LexiconConfigError):
            SqlDictionary(db_session, word_tables=["german"])

    def test_missing_affix_tables(self, tmp_path):
        path = tmp_path / "bare.sqlt"
        create_tables(get_engine(path), [("words", "words")])
        session = get_session(path)
        d = SqlDictionary(session)
        assert d.prefix_table is None
        assert d.lookup_suffixes("cats") == []
        session.close()

    def test_old_schema_without_pos(self, tmp_path):
        """Tables without a pos column resolve to the generic word tag."""
        path = tmp_path / "old.sqlt"
        engine = get_engine(path)
        with engine.begin() as conn:
            conn.exec_driver_sql("create table words (word varchar primary key)")
            conn.exec_driver_sql("insert into words values ('hello')")
        session = get_session(path)
        assert Lexicon(SqlDictionary(session)).resolve("Hello").tag == "word"
        session.close()

    def test_several_word_tables(self, tmp_path):
        path = tmp_path / "two.sqlt"
        engine = get_engine(path)
        names, words = create_tables(engine, [("names", "names"), ("words", "words")])
        with engine.begin() as conn:
            conn.execute(names.insert(), [{"word": "mark", "pos": "name"}])
            conn.execute(words.insert(), [{"word": "mark", "pos": "n"}, {"word": "pen", "pos": "n"}])
        session = get_session(path)
        d = SqlDictionary(session, word_tables=["words", "names"])
        assert [r.tag for r in d.lookup_exact("mark")] == ["n", "name"]
        session.close()


class TestModels:
    """Tests for table definitions."""

    def test_word_table_columns(self):
        table = word_table(MetaData(), "words")
        assert [c.name for c in table.columns] == ["word", "flags", "pos", "stop"]

    def test_suffix_table_index(self, tmp_path):
        engine = get_engine(tmp_path / "idx.sqlt")
        create_tables(engine, [("suffixes", "suffixes")])
        indexes = inspect(engine).get_indexes("suffixes")
        assert indexes[0]["column_names"] == ["suffix"]

    def test_suffix_table_columns(self):
        table = suffix_table(MetaData(), "suffixes")
        assert {"flag", "matchpos", "match", "stem", "suffix", "pos", "chain"} <= set(table.columns.keys())
