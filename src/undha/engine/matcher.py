"""Token matching against a lexicon with confidence scoring.

Two passes per token:
1. Exact: O(1) index lookup of the normalized token -> confidence 1.0
2. Partial: scan for entries whose field contains the token or is
   contained by it -> min(0.8, len(shorter) / len(longer))

The same algorithm runs in both directions; only the scanned field and
the returned text change.
"""

from __future__ import annotations

import unicodedata

from undha.config import EXACT_CONFIDENCE, PARTIAL_MATCH_CAP
from undha.engine.result import Direction, MatchCandidate
from undha.lexicon.models import LexiconEntry, Register, normalize_text
from undha.lexicon.store import Lexicon


def _is_punct(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def split_affixes(token: str) -> tuple[str, str, str]:
    """Split leading and trailing punctuation off a token.

    Returns:
        (prefix, core, suffix); core keeps the original case
    """
    token = token.strip()
    start = 0
    end = len(token)
    while start < end and _is_punct(token[start]):
        start += 1
    while end > start and _is_punct(token[end - 1]):
        end -= 1
    return token[:start], token[start:end], token[end:]


def normalize_token(token: str) -> str:
    """Lowercase and strip surrounding whitespace and punctuation."""
    return normalize_text(split_affixes(token)[1])


def partial_confidence(a: str, b: str) -> float:
    """Length-ratio confidence for a substring match, capped at 0.8."""
    longer = max(len(a), len(b))
    if longer == 0:
        return 0.0
    return min(PARTIAL_MATCH_CAP, min(len(a), len(b)) / longer)


class Matcher:
    """Finds the best lexicon entry for a token."""

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def match(
        self,
        token: str,
        register: Register,
        direction: Direction = Direction.FORWARD,
        position: int = 0,
    ) -> MatchCandidate | None:
        """Match one token.

        Args:
            token: Raw token text (punctuation and case allowed)
            register: Target register (forward) or source register (reverse)
            direction: FORWARD scans base glosses, REVERSE scans surface forms
            position: Token index, recorded on the candidate

        Returns:
            MatchCandidate, or None if nothing matches
        """
        normalized = normalize_token(token)
        if not normalized:
            return None

        entry = self._exact(normalized, register, direction)
        if entry is not None:
            return self._candidate(
                token, position, entry, register, direction, EXACT_CONFIDENCE, True
            )

        best: LexiconEntry | None = None
        best_confidence = 0.0
        for entry in self.lexicon.entries:
            field = self._scanned_field(entry, register, direction)
            if not field or not self._has_output(entry, register, direction):
                continue
            if field in normalized or normalized in field:
                confidence = partial_confidence(field, normalized)
                # strict comparison keeps the first-encountered on ties
                if confidence > best_confidence:
                    best = entry
                    best_confidence = confidence

        if best is None:
            return None
        return self._candidate(
            token, position, best, register, direction, best_confidence, False
        )

    def _exact(
        self, normalized: str, register: Register, direction: Direction
    ) -> LexiconEntry | None:
        if direction is Direction.REVERSE:
            return self.lexicon.entry_for_form(normalized, register)
        return self.lexicon.entry_for_base(normalized, register)

    @staticmethod
    def _scanned_field(
        entry: LexiconEntry, register: Register, direction: Direction
    ) -> str:
        if direction is Direction.REVERSE:
            return normalize_text(entry.form(register))
        return normalize_text(entry.base)

    @staticmethod
    def _has_output(
        entry: LexiconEntry, register: Register, direction: Direction
    ) -> bool:
        if direction is Direction.REVERSE:
            return True
        return bool(entry.form(register))

    @staticmethod
    def _candidate(
        token: str,
        position: int,
        entry: LexiconEntry,
        register: Register,
        direction: Direction,
        confidence: float,
        exact: bool,
    ) -> MatchCandidate:
        return MatchCandidate(
            token=token,
            position=position,
            surface_form=entry.form(register),
            lemma=entry.base,
            register=register,
            confidence=confidence,
            exact=exact,
            direction=direction,
        )
