"""
Settings and configuration for wordlex.

Every value can be overridden through a WORDLEX_* environment variable.
"""

import os
from pathlib import Path
from typing import Optional

# Data directory paths
PACKAGE_DIR = Path(__file__).parent
DATA_DIR = PACKAGE_DIR / "data"

# Database path - defaults to data/lexicon.sqlt
DEFAULT_DB_PATH = DATA_DIR / "lexicon.sqlt"

# Environment variable for custom database path
DB_PATH = Path(os.environ.get("WORDLEX_DB_PATH", DEFAULT_DB_PATH))

# Optional top-level domain list (IANA tlds-alpha-by-domain.txt format)
_tld_env = os.environ.get("WORDLEX_TLD_LIST")
TLD_LIST_PATH: Optional[Path] = Path(_tld_env) if _tld_env else None

# Longest phrase the n-gram tracker keeps in its buffer
NGRAM_MAX = int(os.environ.get("WORDLEX_NGRAM_MAX", "5"))

# Debug mode
DEBUG = os.environ.get("WORDLEX_DEBUG", "").lower() in ("1", "true", "yes")

# Shortest remainder worth looking up during decomposition
MIN_REMAINDER = 2

# Tag given to dictionary hits from tables without a pos column
DEFAULT_TAG = "word"

# Tag of the unknown token
UNKNOWN_TAG = "?"

# Tag of a splitter result; the tokenizer re-feeds its pieces
SPLIT_TAG = "SPLIT"

# Fallback TLDs used when no TLD list is configured (plus any 2-letter code)
FALLBACK_TLDS = frozenset({"com", "org", "net", "gov", "mil", "edu", "info"})


def ensure_data_dirs():
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
