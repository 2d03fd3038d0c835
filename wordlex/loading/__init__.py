"""Loaders that build lexicon databases from text definitions."""

from wordlex.loading.lexicon_text import load_into_memory, load_lexicon, parse_lexicon

__all__ = ["load_into_memory", "load_lexicon", "parse_lexicon"]
