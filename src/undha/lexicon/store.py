"""In-memory lexicon with bidirectional exact-lookup indexes.

A Lexicon is built once from validated entries and never mutated.
Reloading builds a fresh Lexicon and swaps it into a LexiconHandle.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from undha.lexicon.loader import LoadReport, parse_records
from undha.lexicon.models import LexiconEntry, Register, normalize_text

logger = logging.getLogger(__name__)


@dataclass
class LexiconStats:
    """Summary counts for a loaded lexicon."""

    total_entries: int
    forms_per_register: dict[str, int] = field(default_factory=dict)
    fallbacks_per_register: dict[str, int] = field(default_factory=dict)
    skipped_records: int = 0

    @property
    def registers(self) -> list[str]:
        return [r.value for r in Register]

    def to_dict(self) -> dict:
        return {
            "total_entries": self.total_entries,
            "registers": self.registers,
            "forms_per_register": dict(self.forms_per_register),
            "fallbacks_per_register": dict(self.fallbacks_per_register),
            "skipped_records": self.skipped_records,
        }


class Lexicon:
    """Read-only set of LexiconEntry indexed in both directions.

    Indexes map normalized text to the first entry (insertion order)
    carrying it, so duplicate glosses or forms resolve deterministically.
    """

    def __init__(
        self,
        entries: list[LexiconEntry],
        load_report: LoadReport | None = None,
    ):
        self._entries: tuple[LexiconEntry, ...] = tuple(entries)
        self.load_report = load_report or LoadReport(accepted=len(self._entries))

        self._by_base: dict[str, LexiconEntry] = {}
        # per register, only entries with an effective form for it
        self._by_base_with_form: dict[Register, dict[str, LexiconEntry]] = {
            r: {} for r in Register
        }
        self._by_form: dict[Register, dict[str, LexiconEntry]] = {
            r: {} for r in Register
        }
        for entry in self._entries:
            self._by_base.setdefault(normalize_text(entry.base), entry)
            for register in Register:
                value = entry.form(register)
                if value:
                    self._by_base_with_form[register].setdefault(
                        normalize_text(entry.base), entry
                    )
                    self._by_form[register].setdefault(normalize_text(value), entry)

    @classmethod
    def load(cls, raw_entries, source: str = "<memory>") -> "Lexicon":
        """Build a Lexicon from raw records.

        Malformed records are skipped and listed in `load_report`.

        Raises:
            LoadError: If the source is empty or no record is usable
        """
        entries, report = parse_records(raw_entries, source=source)
        return cls(entries, load_report=report)

    @property
    def entries(self) -> tuple[LexiconEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def entry_for_base(
        self, text: str, register: Register | None = None
    ) -> LexiconEntry | None:
        """First entry with this gloss.

        With a register, entries lacking an effective form for it are
        passed over in favour of a later entry with the same gloss.
        """
        if register is not None:
            return self._by_base_with_form[register].get(normalize_text(text))
        return self._by_base.get(normalize_text(text))

    def entry_for_form(self, text: str, register: Register) -> LexiconEntry | None:
        return self._by_form[register].get(normalize_text(text))

    def lookup_by_base(self, text: str, register: Register) -> str | None:
        """Translate a base gloss to its effective surface form.

        Returns:
            Surface form, or None if no entry with this gloss has a form
            for the register
        """
        entry = self.entry_for_base(text, register)
        if entry is None:
            return None
        return entry.form(register)

    def lookup_by_register_form(
        self, text: str, register: Register | None = None
    ) -> tuple[str, Register] | None:
        """Translate a surface form back to its base gloss.

        Args:
            text: Surface form in any case
            register: Restrict to one register; None searches all in
                plain, polite, honorific order

        Returns:
            (base gloss, register matched), or None
        """
        registers = [register] if register is not None else list(Register)
        for reg in registers:
            entry = self.entry_for_form(text, reg)
            if entry is not None:
                return entry.base, reg
        return None

    def search(self, query: str) -> list[LexiconEntry]:
        """Case-insensitive containment search over glosses and forms.

        Returns:
            Matching entries, each once, in insertion order
        """
        needle = normalize_text(query)
        results: list[LexiconEntry] = []
        for entry in self._entries:
            haystacks = [entry.base] + [entry.form(r) for r in Register]
            if any(needle in normalize_text(h) for h in haystacks if h):
                results.append(entry)
        return results

    def stats(self) -> LexiconStats:
        forms = {r.value: 0 for r in Register}
        fallbacks = {r.value: 0 for r in Register}
        for entry in self._entries:
            for register in Register:
                if entry.raw_form(register):
                    forms[register.value] += 1
                elif entry.is_fallback(register):
                    fallbacks[register.value] += 1
        return LexiconStats(
            total_entries=len(self._entries),
            forms_per_register=forms,
            fallbacks_per_register=fallbacks,
            skipped_records=self.load_report.skipped,
        )


class LexiconHandle:
    """Holder for the current Lexicon, replaced atomically on reload.

    Readers take `current` once per operation and keep using that
    snapshot; a reload never mutates a Lexicon in place.
    """

    def __init__(self, lexicon: Lexicon):
        self._current = lexicon
        self._lock = threading.Lock()

    @property
    def current(self) -> Lexicon:
        return self._current

    def swap(self, lexicon: Lexicon) -> Lexicon:
        """Replace the current lexicon, returning the previous one."""
        with self._lock:
            previous = self._current
            self._current = lexicon
        logger.info(f"Lexicon swapped: {len(previous)} -> {len(lexicon)} entries")
        return previous

    def reload(self, raw_entries, source: str = "<memory>") -> Lexicon:
        """Build a new Lexicon from raw records and swap it in.

        The previous lexicon stays current if loading fails.

        Raises:
            LoadError: If the new source is unusable
        """
        lexicon = Lexicon.load(raw_entries, source=source)
        self.swap(lexicon)
        return lexicon
