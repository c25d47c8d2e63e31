"""Translation resolution engine.

Matcher scores tokens against the lexicon; ResolutionEngine composes
token matches into phrase results and runs the table, external and
hybrid strategies.
"""

from undha.engine.errors import (
    Cancelled,
    ExternalServiceError,
    ExternalServiceTimeout,
    InvalidInput,
    NoMatchFound,
    ResolutionError,
)
from undha.engine.matcher import Matcher, normalize_token
from undha.engine.orchestrator import ResolutionEngine
from undha.engine.result import (
    Direction,
    MatchCandidate,
    Strategy,
    TranslationResult,
)
from undha.engine.tokenizer import Token, Tokenizer, WordTokenizer

__all__ = [
    "Cancelled",
    "Direction",
    "ExternalServiceError",
    "ExternalServiceTimeout",
    "InvalidInput",
    "MatchCandidate",
    "Matcher",
    "NoMatchFound",
    "ResolutionEngine",
    "ResolutionError",
    "Strategy",
    "Token",
    "Tokenizer",
    "TranslationResult",
    "WordTokenizer",
    "normalize_token",
]
