"""
Database connection management for wordlex.

Engines are cached per database path; sessions are cheap and made on
demand. SQLite is tuned for the read-heavy lookups a lexicon does.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from wordlex import settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_engines: Dict[str, Engine] = {}


def get_db_path() -> Path:
    """The configured database path (WORDLEX_DB_PATH or data/lexicon.sqlt)."""
    return settings.DB_PATH


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.execute("PRAGMA synchronous = NORMAL")
    cursor.execute("PRAGMA cache_size = -64000")  # 64MB cache
    cursor.close()


def get_engine(db_path: Optional[PathLike] = None) -> Engine:
    """
    Get (or create) the engine for a database file.

    Args:
        db_path: Path to the SQLite database file. Defaults to settings.DB_PATH.

    Returns:
        SQLAlchemy engine, shared by every caller asking for the same path.
    """
    path = Path(db_path) if db_path is not None else get_db_path()
    key = str(path.resolve())
    engine = _engines.get(key)
    if engine is None:
        engine = create_engine(f"sqlite:///{path}")
        event.listen(engine, "connect", _set_sqlite_pragmas)
        _engines[key] = engine
        logger.debug(f"Created engine for {path}")
    return engine


def get_session(db_path: Optional[PathLike] = None) -> Session:
    """Open a new session on a database file."""
    return sessionmaker(bind=get_engine(db_path))()


@contextmanager
def session_scope(db_path: Optional[PathLike] = None) -> Iterator[Session]:
    """
    Transactional scope: commit on success, roll back on error.

    Usage:
        with session_scope(path) as session:
            load_lexicon(session, file="german.txt")
    """
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Close all pooled connections (tests, or before deleting a database)."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
