"""
Command line interface for wordlex.

Usage:
    wordlex -d german.sqlt Die Kinder spielen           # one token per line
    wordlex -r NUM -r DATE --split -s "am 4.3.2004 ..."  # with recognizers
    wordlex -j -s --normalize Die rote Katze            # JSON, with statistics
    wordlex load german.txt -o german.sqlt              # build a database
"""

import argparse
import json
import logging
import sys
from collections import deque
from pathlib import Path
from typing import List, Optional

import regex
from sqlalchemy.exc import SQLAlchemyError

from wordlex import __version__, settings
from wordlex.cascade import Cascade
from wordlex.db.connection import dispose_engines, get_db_path, get_session
from wordlex.db.dictionary import SqlDictionary
from wordlex.errors import LexiconConfigError, LexiconLoadError, RecognizerSpecError
from wordlex.lexicon import Lexicon
from wordlex.models import RunReport, TokenResult
from wordlex.recognizers import Recognizer
from wordlex.run import LexiconRun
from wordlex.tokens import Token

_PUNCTUATION = regex.compile(r'[\p{P}=]')


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or settings.DEBUG else logging.WARNING
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')


def tokenize(resolver: LexiconRun, words: List[str]) -> List[Token]:
    """
    Resolve words in order, the way a simple tokenizer would.

    The pieces of a SPLIT token are fed back in as words; a piece that is
    a lone punctuation mark ends the current phrase instead.
    """
    pending = deque((word, False) for word in words)
    tokens = []
    while pending:
        word, from_split = pending.popleft()
        if from_split and _PUNCTUATION.fullmatch(word):
            resolver.stop()
            continue
        token = resolver.resolve(word)
        if token.is_split:
            pending.extendleft((piece, True) for piece in reversed(token.pieces))
        else:
            tokens.append(token)
    return tokens


def format_stats(resolver: LexiconRun, normalize: bool) -> str:
    """Format run statistics as text."""
    stats, _, unknown = resolver.stats()
    ngrams = dict(resolver.stats('ngrams'))
    if normalize:
        ngrams = resolver.normalize_ngrams(ngrams)

    lines = [f"words: {stats['count']}", f"unknown: {stats['ucount']}"]
    for word, count in unknown.most_common():
        lines.append(f"  ? {word}\t{count}")
    if ngrams:
        lines.append("phrases:")
        for phrase, count in sorted(ngrams.items(), key=lambda kv: (-kv[1], kv[0])):
            lines.append(f"  {phrase}\t{count}")
    return '\n'.join(lines)


# ============================================================================
# load subcommand
# ============================================================================

def load_command(args) -> int:
    """Build a lexicon database from a lexicon definition file."""
    from wordlex.loading.lexicon_text import load_lexicon

    source = Path(args.lexicon)
    if not source.is_file():
        print(f"Error: lexicon file not found: {source}", file=sys.stderr)
        return 1

    db_path = Path(args.output) if args.output else get_db_path()
    if db_path.exists():
        if not args.force:
            print(f"Error: database already exists: {db_path} (use --force to overwrite)", file=sys.stderr)
            return 1
        dispose_engines()
        db_path.unlink()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"Loading {source} into {db_path}")
    session = get_session(db_path)
    try:
        loaded = load_lexicon(session, file=source)
    except LexiconLoadError as e:
        print(f"Error loading lexicon: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()

    for table, rows in loaded.items():
        print(f"  {table}: {rows:,} rows")
    print(f"✅ Lexicon database written to {db_path}")
    return 0


def main_load(args: list) -> int:
    """CLI entry point for the load subcommand."""
    parser = argparse.ArgumentParser(
        description='Build a lexicon database from a lexicon definition file',
        prog='wordlex load',
    )

    parser.add_argument(
        'lexicon',
        metavar='LEXICON.txt',
        help='Lexicon definition file',
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='PATH',
        help='Output database path (default: WORDLEX_DB_PATH or data/lexicon.sqlt)',
    )

    parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Overwrite an existing database',
    )

    parsed = parser.parse_args(args)
    configure_logging(False)
    return load_command(parsed)


# ============================================================================
# Main
# ============================================================================

def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args_list = args if args is not None else sys.argv[1:]

    if args_list and args_list[0] == 'load':
        return main_load(args_list[1:])

    parser = argparse.ArgumentParser(
        description='Resolve words against a lexicon database',
        prog='wordlex',
        epilog='Subcommands:\n  wordlex load LEXICON.txt    Build a database from a lexicon definition',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        'words',
        nargs='*',
        help='Words to resolve (whitespace-separated text is split into words)',
    )

    parser.add_argument(
        '-d', '--database',
        type=str,
        default=None,
        metavar='PATH',
        help='Path to SQLite lexicon database',
    )

    parser.add_argument(
        '-r', '--recognize',
        action='append',
        default=[],
        metavar='NAME',
        help='Standard recognizer to try before the lexicon (NUM, DATE, URL, ID, SPECIALS, ...)',
    )

    parser.add_argument(
        '--split',
        action='store_true',
        help='Split unknown words at punctuation and resolve the pieces',
    )

    parser.add_argument(
        '-n', '--ngram-max',
        type=int,
        default=settings.NGRAM_MAX,
        metavar='N',
        help=f'Longest phrase to count (default: {settings.NGRAM_MAX})',
    )

    parser.add_argument(
        '-s', '--stats',
        action='store_true',
        help='Print run statistics and phrase counts',
    )

    parser.add_argument(
        '--normalize',
        action='store_true',
        help='Normalize phrase counts before printing them',
    )

    parser.add_argument(
        '-j', '--json',
        action='store_true',
        help='Output JSON',
    )

    parser.add_argument(
        '-t', '--trace',
        action='store_true',
        help='Print each decomposition step to stderr',
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging',
    )

    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version information',
    )

    parsed = parser.parse_args(args_list)

    if parsed.version:
        print(f'wordlex {__version__}')
        return 0

    words = ' '.join(parsed.words).split()
    if not words:
        parser.print_help()
        return 1

    if parsed.ngram_max < 2:
        print(f"Error: --ngram-max must be at least 2, got {parsed.ngram_max}", file=sys.stderr)
        return 1

    configure_logging(parsed.verbose)

    db_path = parsed.database or get_db_path()
    if not db_path or not Path(db_path).exists():
        print(f"Error: lexicon database not found: {db_path}", file=sys.stderr)
        print("Build one with: wordlex load LEXICON.txt -o PATH", file=sys.stderr)
        return 1

    try:
        session = get_session(db_path)
    except Exception as e:
        print(f'Error connecting to database: {e}', file=sys.stderr)
        return 1

    try:
        trace = (lambda msg: print(msg, file=sys.stderr)) if parsed.trace else None
        members = []
        if parsed.recognize:
            members.append(Recognizer(*parsed.recognize))
        members.append(Lexicon(SqlDictionary(session), trace=trace))
        if parsed.split:
            members.append(Recognizer('SPLIT'))
        resolver = Cascade(*members, ngram_max=parsed.ngram_max)

        tokens = tokenize(resolver, words)

        if parsed.json:
            if parsed.stats:
                report = RunReport.from_run(resolver, tokens, normalize=parsed.normalize)
                output = report.model_dump()
            else:
                output = [TokenResult.from_token(t).model_dump() for t in tokens]
            print(json.dumps(output, ensure_ascii=False, indent=2))
        else:
            for token in tokens:
                print('\t'.join(token.to_list()))
            if parsed.stats:
                print()
                print(format_stats(resolver, parsed.normalize))
        return 0

    except (LexiconConfigError, RecognizerSpecError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        print(f'Database error: {e}', file=sys.stderr)
        return 1
    finally:
        session.close()


if __name__ == '__main__':
    sys.exit(main())
