"""Result model for translation resolution.

Stable, immutable records describing what was translated, how, and with
what evidence. Forward-compatible `to_dict()` for CLI and API output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from undha.lexicon.models import Register


class Strategy(Enum):
    """Resolution strategy, and the method that produced a result."""

    TABLE = "table"
    """Lexicon only."""

    EXTERNAL = "external"
    """External responder only."""

    HYBRID = "hybrid"
    """Lexicon first, escalate to the responder below threshold."""

    @classmethod
    def parse(cls, value: "str | Strategy") -> "Strategy":
        if isinstance(value, Strategy):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown strategy: {value!r}") from None


class Direction(Enum):
    """Translation direction."""

    FORWARD = "forward"
    """Base language -> register surface form."""

    REVERSE = "reverse"
    """Register surface form -> base language."""


@dataclass(frozen=True)
class MatchCandidate:
    """Best lexicon match for one input token."""

    token: str
    """Input token as it appeared in the source text."""

    position: int
    """Index of the token in the source text."""

    surface_form: str
    """Register surface form of the matched entry."""

    lemma: str
    """Base gloss of the matched entry."""

    register: Register
    confidence: float
    exact: bool
    direction: Direction = Direction.FORWARD

    @property
    def output(self) -> str:
        """Text substituted for the token."""
        if self.direction is Direction.REVERSE:
            return self.lemma
        return self.surface_form

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "position": self.position,
            "surface_form": self.surface_form,
            "lemma": self.lemma,
            "register": self.register.value,
            "confidence": round(self.confidence, 3),
            "exact": self.exact,
        }


@dataclass(frozen=True)
class TranslationResult:
    """Outcome of one resolve call.

    `method` names the component that produced `translated_text`
    (TABLE or EXTERNAL); `strategy` is what the caller asked for.
    `matches` holds the lexicon evidence whenever the table ran.
    """

    original_text: str
    translated_text: str
    confidence: float
    method: Strategy
    register: Register
    matches: tuple[MatchCandidate, ...] = ()
    untranslated: tuple[str, ...] = ()
    direction: Direction = Direction.FORWARD
    strategy: Strategy | None = None
    degraded: bool = False
    """True when hybrid fell back to a below-threshold table answer."""

    external_error: str | None = None
    """Why the external responder failed, if it was tried and failed."""

    processing_time: float = field(default=0.0, compare=False)
    """Wall-clock seconds; not part of value equality."""

    @property
    def requested_strategy(self) -> Strategy:
        return self.strategy or self.method

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "original_text": self.original_text,
            "translated_text": self.translated_text,
            "confidence": round(self.confidence, 3),
            "method": self.method.value,
            "strategy": self.requested_strategy.value,
            "register": self.register.value,
            "direction": self.direction.value,
            "matches": [m.to_dict() for m in self.matches],
            "untranslated": list(self.untranslated),
            "degraded": self.degraded,
            "external_error": self.external_error,
            "processing_time": round(self.processing_time, 4),
        }
