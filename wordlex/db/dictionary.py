"""
SQLite-backed dictionary provider.

Tables are reflected rather than declared, so a database built by an
older loader (no stop column, no pos column) still works. Each lookup
is one statement; matching and ordering happen in SQL:

- exact words compare under NOCASE;
- prefixes and compound starts match the leading substring of the
  word, longest first;
- suffixes match the trailing substring, longest suffix first and then
  shortest substitution first.
"""

import logging
from typing import Iterator, List, Optional, Sequence

from sqlalchemy import MetaData, Table, func, inspect, literal, select
from sqlalchemy.orm import Session

from wordlex.errors import LexiconConfigError
from wordlex.provider import DictionaryProvider
from wordlex.tokens import AffixCandidate, SuffixRule, WordRecord

logger = logging.getLogger(__name__)


def _col(row, name: str, default=None):
    value = row.get(name, default)
    return default if value is None else value


class SqlDictionary(DictionaryProvider):
    """
    Dictionary provider over the tables of a lexicon database.

    Args:
        session: SQLAlchemy session bound to the database.
        word_tables: Word tables, in lookup order.
        prefix_table: Prefix table; skipped if the database lacks it.
        start_table: Compound-start table; skipped if missing.
        suffix_table: Suffix rule table; skipped if missing.

    Raises:
        LexiconConfigError: If a word table doesn't exist.
    """

    def __init__(
        self,
        session: Session,
        word_tables: Sequence[str] = ("words",),
        prefix_table: Optional[str] = "prefixes",
        start_table: Optional[str] = "starts",
        suffix_table: Optional[str] = "suffixes",
    ):
        if isinstance(word_tables, str):
            word_tables = [word_tables]
        if not word_tables:
            raise LexiconConfigError("SqlDictionary needs at least one word table")
        self.session = session
        bind = session.get_bind()
        self._present = set(inspect(bind).get_table_names())

        self.word_tables: List[Table] = []
        for name in word_tables:
            if name not in self._present:
                raise LexiconConfigError(f"Word table {name!r} not found in {bind.url}")
            self.word_tables.append(self._reflect(name))

        self.prefix_table = self._optional(prefix_table)
        self.start_table = self._optional(start_table)
        self.suffix_table = self._optional(suffix_table)

    def _reflect(self, name: str) -> Table:
        return Table(name, MetaData(), autoload_with=self.session.get_bind())

    def _optional(self, name: Optional[str]) -> Optional[Table]:
        if not name:
            return None
        if name not in self._present:
            logger.debug(f"No {name} table; that decomposition step is off")
            return None
        return self._reflect(name)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup_exact(self, word: str) -> Iterator[WordRecord]:
        for table in self.word_tables:
            stmt = select(table).where(table.c.word.collate("NOCASE") == word).limit(1)
            row = self.session.execute(stmt).mappings().first()
            if row is not None:
                yield WordRecord(
                    word=row["word"],
                    tag=_col(row, "pos") or None,
                    flags=_col(row, "flags", ""),
                    stop=bool(_col(row, "stop", False)),
                )

    def _starting(self, table: Optional[Table], word: str) -> List[AffixCandidate]:
        if table is None:
            return []
        length = func.length(table.c.word)
        stmt = (
            select(table)
            .where(table.c.word.collate("NOCASE") == func.substr(literal(word), 1, length))
            .order_by(length.desc())
        )
        return [
            AffixCandidate(
                fragment=row["word"],
                tag=_col(row, "pos") or None,
                flags=_col(row, "flags", ""),
            )
            for row in self.session.execute(stmt).mappings()
        ]

    def lookup_prefixes(self, word: str) -> List[AffixCandidate]:
        return self._starting(self.prefix_table, word)

    def lookup_compound_starts(self, word: str) -> List[AffixCandidate]:
        return self._starting(self.start_table, word)

    def lookup_suffixes(self, word: str) -> List[SuffixRule]:
        table = self.suffix_table
        if table is None:
            return []
        suffix_length = func.length(table.c.suffix)
        stmt = (
            select(table)
            .where(table.c.suffix == func.substr(literal(word), len(word) + 1 - suffix_length, suffix_length))
            .order_by(suffix_length.desc(), func.length(table.c.stem).asc())
        )
        return [
            SuffixRule(
                category=_col(row, "flag", ""),
                stem_pos=_col(row, "matchpos", ""),
                constraint=_col(row, "match", ""),
                substitution=_col(row, "stem", ""),
                suffix=row["suffix"],
                tag_delta=_col(row, "pos", ""),
                chain=_col(row, "chain", ""),
            )
            for row in self.session.execute(stmt).mappings()
        ]
