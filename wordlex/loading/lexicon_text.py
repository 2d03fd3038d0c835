"""
Lexicon definition loading for wordlex.

A lexicon definition is a plain text file divided into domains:

    words:
    the      art+def
    a        art+indef
    child/R  n

    starts:
    news

    suffixes:
    R: irregular verb plural
    n   .   .   ren   +p   .

Each domain goes into a table named after it; "words: german <
extra.txt" stores the words domain in a table called german and loads
extra.txt into it as well. Single-letter headers ("R:") set the flag
recorded with the suffix rules that follow. Everything after # is a
comment.

Word-like lines are "word[/flags] [pos]". Suffix lines are "matchpos
match stem suffix pos chain", with "." for an empty field.

Lexica typed on an ASCII keyboard may use digraphs, expanded on load:
A" O" U" a" o" u" for umlauts, sS for ß, e' for é and -- for a slash.
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from sqlalchemy import MetaData, Table
from sqlalchemy.orm import Session

from wordlex.db.models import SUFFIX_DOMAIN, suffix_table, word_table
from wordlex.errors import LexiconLoadError
from wordlex.provider import MemoryDictionary, nocase
from wordlex.tokens import SuffixRule

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

WORDS_DOMAIN = "words"
PREFIX_DOMAIN = "prefixes"
START_DOMAIN = "starts"

DIGRAPHS = [
    ('A"', "Ä"),
    ('O"', "Ö"),
    ('U"', "Ü"),
    ('a"', "ä"),
    ('o"', "ö"),
    ('u"', "ü"),
    ("sS", "ß"),
    ("e'", "é"),
    ("--", "/"),
]

_HEADER = re.compile(r'^(\w+):\s*(.*?)\s*$')
_IMPORT_SEP = re.compile(r'\s*<\s*')

SUFFIX_FIELDS = ("stem_pos", "constraint", "substitution", "suffix", "tag_delta", "chain")


def expand_digraphs(text: str) -> str:
    """
    Replace ASCII digraphs with the characters they stand for.

    Example:
        >>> expand_digraphs('Gru"sS')
        'Grüß'
    """
    for digraph, char in DIGRAPHS:
        text = text.replace(digraph, char)
    return text


# ============================================================================
# Parsed Entries
# ============================================================================

@dataclass
class WordEntry:
    """One word-like line, ready to store."""
    word: str
    flags: str = ""
    pos: str = ""


@dataclass
class DomainContent:
    """Everything loaded into one domain."""
    domain: str
    table: str
    words: List[WordEntry] = field(default_factory=list)
    rules: List[SuffixRule] = field(default_factory=list)


def parse_word_line(line: str) -> WordEntry:
    """Parse "word[/flags] [pos]"; fields after the tag are ignored."""
    fields = line.split()
    word, _, flags = fields[0].partition('/')
    if not word:
        raise ValueError("missing word")
    pos = fields[1] if len(fields) > 1 else ""
    return WordEntry(word=word, flags=flags, pos=pos)


def parse_suffix_line(line: str, flag: str) -> SuffixRule:
    fields = line.split()
    if len(fields) > len(SUFFIX_FIELDS):
        raise ValueError(f"a suffix rule has at most {len(SUFFIX_FIELDS)} fields, got {len(fields)}")
    values = {name: ("" if value == "." else value) for name, value in zip(SUFFIX_FIELDS, fields)}
    return SuffixRule(category=flag, **values)


class LexiconParser:
    """
    Parses a lexicon definition into per-domain content.

    Args:
        base_dir: Directory that relative import paths are resolved against.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or Path.cwd()
        self.domains: Dict[str, DomainContent] = {}
        self._seen: Dict[str, Set[str]] = defaultdict(set)

    def parse(self, lines: Iterable[str], source: str = "<string>") -> Dict[str, DomainContent]:
        domain: Optional[DomainContent] = None
        flag = ""
        for line_no, raw in enumerate(lines, 1):
            line = raw.rstrip("\r\n")
            line = line.split('#', 1)[0]
            if not line.strip():
                continue

            header = _HEADER.match(line)
            if header:
                name, after = header.groups()
                if len(name) == 1:
                    flag = name
                    continue
                domain = self._open_domain(name, after, line_no, line)
                continue

            if domain is None:
                raise LexiconLoadError(f"{source}: entry before any domain header", line_no, line)
            self._load_line(domain, flag, line, source, line_no)
        return self.domains

    def _open_domain(self, name: str, after: str, line_no: int, line: str) -> DomainContent:
        if name in self.domains:
            return self.domains[name]
        table, import_file = _split_header(after)
        content = DomainContent(domain=name, table=table or name)
        self.domains[name] = content
        logger.debug(f"Domain {name} -> table {content.table}")
        if import_file:
            path = Path(import_file)
            if not path.is_absolute():
                path = self.base_dir / path
            if not path.is_file():
                raise LexiconLoadError(f"Can't find {import_file} to load domain {name}", line_no, line)
            self._import(content, path)
        return content

    def _import(self, content: DomainContent, path: Path) -> None:
        logger.info(f" {content.domain} <-- {path.name}")
        flag = ""
        with open(path, encoding='utf-8') as f:
            for line_no, raw in enumerate(f, 1):
                line = raw.rstrip("\r\n").split('#', 1)[0]
                if not line.strip():
                    continue
                header = _HEADER.match(line)
                if header and len(header.group(1)) == 1:
                    flag = header.group(1)
                    continue
                self._load_line(content, flag, line, path.name, line_no)

    def _load_line(self, content: DomainContent, flag: str, line: str, source: str, line_no: int) -> None:
        try:
            if content.domain == SUFFIX_DOMAIN:
                content.rules.append(parse_suffix_line(expand_digraphs(line), flag))
                return
            entry = parse_word_line(line)
        except ValueError as e:
            raise LexiconLoadError(f"{source}: {e}", line_no, line) from e
        # Expanded after the flags split so "and--or" stays one word
        entry.word = expand_digraphs(entry.word)
        entry.pos = expand_digraphs(entry.pos)

        key = nocase(entry.word)
        if key in self._seen[content.table]:
            raise LexiconLoadError(
                f"{source}: duplicate {entry.word!r} in {content.table}", line_no, line
            )
        self._seen[content.table].add(key)
        content.words.append(entry)


def _split_header(after: str) -> Tuple[str, str]:
    """Split "table < file" into its parts; either may be empty."""
    parts = _IMPORT_SEP.split(after, 1)
    table = parts[0].strip()
    import_file = parts[1].strip() if len(parts) > 1 else ""
    return table, import_file


def _read_source(string: Optional[str], file: Optional[PathLike]) -> Tuple[List[str], str, Optional[Path]]:
    if (string is None) == (file is None):
        raise ValueError("Pass exactly one of string= or file=")
    if string is not None:
        return string.split("\n"), "<string>", None
    path = Path(file)
    if not path.is_file():
        raise LexiconLoadError(f"Can't find input file {path}")
    return path.read_text(encoding='utf-8').split("\n"), path.name, path.parent


def parse_lexicon(string: Optional[str] = None, file: Optional[PathLike] = None) -> Dict[str, DomainContent]:
    """
    Parse a lexicon definition without storing it.

    Args:
        string: The definition itself.
        file: Path to a definition file; imports resolve relative to it.

    Returns:
        Domain name -> loaded content, in declaration order.

    Raises:
        LexiconLoadError: Malformed lines, duplicate words, missing files.
    """
    lines, source, base_dir = _read_source(string, file)
    return LexiconParser(base_dir).parse(lines, source)


# ============================================================================
# Storage
# ============================================================================

def load_lexicon(session: Session, string: Optional[str] = None, file: Optional[PathLike] = None) -> Dict[str, int]:
    """
    Load a lexicon definition into a database.

    Each domain's table is dropped and recreated, as a full load
    replaces what was there before.

    Args:
        session: Session on the target database.
        string: The definition itself.
        file: Path to a definition file.

    Returns:
        Table name -> number of rows loaded.
    """
    domains = parse_lexicon(string=string, file=file)
    conn = session.connection()
    metadata = MetaData()
    loaded: Dict[str, int] = {}

    for content in domains.values():
        factory = suffix_table if content.domain == SUFFIX_DOMAIN else word_table
        table: Table = factory(metadata, content.table)
        table.drop(conn, checkfirst=True)
        table.create(conn)
        logger.info(f"Creating and loading domain {content.domain}")

        if content.domain == SUFFIX_DOMAIN:
            rows = [_suffix_row(rule) for rule in content.rules]
        else:
            rows = [{"word": e.word, "flags": e.flags, "pos": e.pos, "stop": False} for e in content.words]
        if rows:
            session.execute(table.insert(), rows)
        loaded[content.table] = len(rows)

    session.commit()
    logger.info(f"Loaded {sum(loaded.values())} rows into {len(loaded)} tables")
    return loaded


def _suffix_row(rule: SuffixRule) -> Dict[str, str]:
    return {
        "flag": rule.category,
        "matchpos": rule.stem_pos,
        "match": rule.constraint,
        "stem": rule.substitution,
        "suffix": rule.suffix,
        "pos": rule.tag_delta,
        "chain": rule.chain,
    }


def load_into_memory(string: Optional[str] = None, file: Optional[PathLike] = None) -> MemoryDictionary:
    """
    Load a lexicon definition into a MemoryDictionary.

    Only the domains a lookup consults are kept: words, prefixes, starts
    and suffixes. Other domains (ends, middles) are parsed and dropped.
    """
    domains = parse_lexicon(string=string, file=file)
    words = domains.get(WORDS_DOMAIN)
    dictionary = MemoryDictionary(tables=(words.table if words else WORDS_DOMAIN,))

    for content in domains.values():
        if content.domain == WORDS_DOMAIN:
            for e in content.words:
                dictionary.add_word(e.word, e.pos, e.flags, table=content.table)
        elif content.domain == PREFIX_DOMAIN:
            for e in content.words:
                dictionary.add_prefix(e.word, e.pos, e.flags)
        elif content.domain == START_DOMAIN:
            for e in content.words:
                dictionary.add_compound_start(e.word, e.pos, e.flags)
        elif content.domain == SUFFIX_DOMAIN:
            for rule in content.rules:
                dictionary.add_suffix_rule(rule)
        else:
            logger.info(f"Domain {content.domain} isn't used for lookups; skipped")
    return dictionary

