"""Lexicon module: register-stratified dictionary data.

Provides:
- Register / LexiconEntry: the data model and plain-register fallback
- Lexicon: read-only bidirectional index
- LexiconHandle: atomic reload holder
- load_lexicon_file: JSON/TSV loading with per-record warnings
"""

from undha.lexicon.loader import (
    DEMO_LEXICON_PATH,
    LoadError,
    LoadReport,
    PerEntryLoadWarning,
    load_lexicon_file,
)
from undha.lexicon.models import LexiconEntry, Register, normalize_text
from undha.lexicon.store import Lexicon, LexiconHandle, LexiconStats

__all__ = [
    "DEMO_LEXICON_PATH",
    "Lexicon",
    "LexiconEntry",
    "LexiconHandle",
    "LexiconStats",
    "LoadError",
    "LoadReport",
    "PerEntryLoadWarning",
    "Register",
    "load_lexicon_file",
    "normalize_text",
]
