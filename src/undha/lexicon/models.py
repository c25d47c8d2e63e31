"""Lexicon data model: registers and entries.

A LexiconEntry maps one base-language gloss (Indonesian) to one surface
form per Javanese speech register. Register fields may be empty; the
effective form of an empty register is the plain (ngoko) form.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from enum import Enum


class Register(Enum):
    """Closed set of speech registers, from casual to most formal."""

    PLAIN = "plain"
    """Ngoko: informal, everyday language."""

    POLITE = "polite"
    """Krama alus: polite, respectful language."""

    HONORIFIC = "honorific"
    """Krama inggil: high-respect language."""

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: "str | Register") -> "Register":
        """Parse a register from its value, name, or source-data alias.

        Raises:
            ValueError: If the value names no register
        """
        if isinstance(value, Register):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown register: {value!r}")


_DISPLAY_NAMES = {
    Register.PLAIN: "Ngoko",
    Register.POLITE: "Krama Alus",
    Register.HONORIFIC: "Krama Inggil",
}

_DESCRIPTIONS = {
    Register.PLAIN: "Ngoko (informal, everyday language)",
    Register.POLITE: "Krama Alus (polite, respectful language)",
    Register.HONORIFIC: "Krama Inggil (very formal, high respect language)",
}

_ALIASES = {
    "plain": Register.PLAIN,
    "ngoko": Register.PLAIN,
    "polite": Register.POLITE,
    "kramaalus": Register.POLITE,
    "krama_alus": Register.POLITE,
    "honorific": Register.HONORIFIC,
    "kramainggil": Register.HONORIFIC,
    "krama_inggil": Register.HONORIFIC,
}

# Field names accepted for the base gloss in source records
BASE_FIELD_ALIASES = ("base", "indonesia", "gloss")


def normalize_text(text: str) -> str:
    """Normalize text for lexicon lookup.

    NFC-normalizes, trims whitespace and lowercases. Interior
    punctuation is kept so multi-word glosses stay distinct.
    """
    return unicodedata.normalize("NFC", text).strip().lower()


@dataclass(frozen=True)
class LexiconEntry:
    """A single lexicon entry.

    Immutable once loaded. `forms` holds the raw per-register fields as
    found in the source; use `form()` for the effective surface form.
    """

    entry_id: str
    base: str
    forms: dict[Register, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.base or not self.base.strip():
            raise ValueError(f"Entry {self.entry_id!r} has an empty base gloss")

    def raw_form(self, register: Register) -> str:
        """Surface form exactly as recorded (may be empty)."""
        return self.forms.get(register, "").strip()

    def form(self, register: Register) -> str:
        """Effective surface form for a register.

        Empty register fields fall back to the plain form. Returns "" if
        the plain form is empty as well.
        """
        value = self.raw_form(register)
        if value:
            return value
        return self.raw_form(Register.PLAIN)

    def is_fallback(self, register: Register) -> bool:
        """True if `form(register)` comes from the plain-register fallback."""
        return not self.raw_form(register) and bool(self.raw_form(Register.PLAIN))

    def has_forms(self) -> bool:
        return any(self.form(r) for r in Register)

    def forms_text(self) -> str:
        """Distinct effective forms as "plain / polite / honorific"."""
        seen: list[str] = []
        for register in Register:
            value = self.form(register)
            if value and value not in seen:
                seen.append(value)
        return " / ".join(seen)

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "id": self.entry_id,
            "base": self.base,
            **{r.value: self.form(r) for r in Register},
        }
