"""
Table definitions for lexicon databases.

A lexicon database holds one table per domain. Word-like domains
(words, prefixes, starts, ...) share one shape; suffix rules have their
own. Tables are built on demand because domain names come from the
lexicon definition.
"""

from typing import Iterable, List, Tuple

from sqlalchemy import Boolean, Column, Index, Integer, MetaData, String, Table
from sqlalchemy.engine import Engine

SUFFIX_DOMAIN = "suffixes"


def word_table(metadata: MetaData, name: str) -> Table:
    """A word-like table: one row per word, keyed case-insensitively."""
    return Table(
        name, metadata,
        Column("word", String(collation="NOCASE"), primary_key=True),
        Column("flags", String, default=""),
        Column("pos", String),
        Column("stop", Boolean, default=False),
    )


def suffix_table(metadata: MetaData, name: str) -> Table:
    """
    A suffix rule table.

    Columns mirror the lexicon text format: matchpos is the stem
    category the rule applies to, match the pattern the stem must end
    with, stem the text appended to the stripped stem, suffix the
    literal ending and pos the feature delta.
    """
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("flag", String, default=""),
        Column("matchpos", String, default=""),
        Column("match", String, default=""),
        Column("stem", String, default=""),
        Column("suffix", String, nullable=False),
        Column("pos", String, default=""),
        Column("chain", String, default=""),
        Index(f"ix_{name}_suffix", "suffix"),
    )


def create_tables(engine: Engine, domains: Iterable[Tuple[str, str]]) -> List[Table]:
    """
    Create the tables for a set of domains.

    Args:
        engine: Target database.
        domains: (domain, table name) pairs; the "suffixes" domain gets
            the suffix rule shape, everything else the word shape.

    Returns:
        The created tables, in the order given.
    """
    metadata = MetaData()
    tables = []
    for domain, name in domains:
        factory = suffix_table if domain == SUFFIX_DOMAIN else word_table
        tables.append(factory(metadata, name))
    metadata.create_all(engine)
    return tables
