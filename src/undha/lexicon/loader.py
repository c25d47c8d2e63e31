"""Lexicon source loading.

Turns raw records into LexiconEntry objects with per-record validation.
Malformed records are reported and skipped; only an unreadable or
entirely unusable source is fatal.

Supported files:
  - .json: list of records, or mapping of id -> record, optionally
    wrapped in an "employees" or "entries" key
  - .tsv: header row naming base and register columns

Record fields (canonical name or source alias):
  - base | indonesia | gloss   (required)
  - plain | ngoko
  - polite | kramaalus
  - honorific | kramainggil
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Mapping

from undha.lexicon.models import (
    BASE_FIELD_ALIASES,
    LexiconEntry,
    Register,
)

if TYPE_CHECKING:
    from undha.lexicon.store import Lexicon

logger = logging.getLogger(__name__)

WRAPPER_KEYS = ("employees", "entries")

# Bundled sample lexicon, used when no lexicon file is configured
DEMO_LEXICON_PATH = (
    Path(__file__).resolve().parent.parent / "data" / "demo_lexicon.json"
)


class LoadError(Exception):
    """Raised when a lexicon source is unreadable or yields no entries."""

    def __init__(
        self, message: str, warnings: list["PerEntryLoadWarning"] | None = None
    ):
        self.warnings = warnings or []
        super().__init__(message)


@dataclass
class PerEntryLoadWarning:
    """A malformed source record that was skipped."""

    index: int
    """Position of the record in the source."""

    entry_id: str
    """Record id (mapping key or generated)."""

    reason: str

    def __str__(self) -> str:
        return f"record {self.index} ({self.entry_id}): {self.reason}"


@dataclass
class LoadReport:
    """Receipt for a lexicon load."""

    source: str = "<memory>"
    accepted: int = 0
    skipped: int = 0
    warnings: list[PerEntryLoadWarning] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "accepted": self.accepted,
            "skipped": self.skipped,
            "warnings": [str(w) for w in self.warnings],
        }


def _iter_records(raw_entries) -> Iterable[tuple[str, object]]:
    """Yield (entry_id, record) pairs from a list or id-keyed mapping."""
    if isinstance(raw_entries, Mapping):
        for key, value in raw_entries.items():
            yield str(key), value
    else:
        for i, value in enumerate(raw_entries):
            entry_id = ""
            if isinstance(value, Mapping):
                entry_id = str(value.get("id", "") or "")
            yield entry_id or f"entry-{i}", value


def parse_record(entry_id: str, record: object) -> LexiconEntry:
    """Build a LexiconEntry from one raw record.

    Raises:
        ValueError: With the reason the record is unusable
    """
    if not isinstance(record, Mapping):
        raise ValueError(f"expected a mapping, got {type(record).__name__}")

    base = ""
    for name in BASE_FIELD_ALIASES:
        value = record.get(name)
        if isinstance(value, str) and value.strip():
            base = value.strip()
            break
    if not base:
        raise ValueError("missing base gloss")

    forms: dict[Register, str] = {}
    for key, value in record.items():
        if key in BASE_FIELD_ALIASES or key == "id":
            continue
        try:
            register = Register.parse(key)
        except ValueError:
            continue
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"field {key!r} is not a string")
        forms[register] = value.strip()

    entry = LexiconEntry(entry_id=entry_id, base=base, forms=forms)
    if not entry.has_forms():
        raise ValueError("no register forms")
    return entry


def parse_records(
    raw_entries, source: str = "<memory>"
) -> tuple[list[LexiconEntry], LoadReport]:
    """Validate raw records, skipping malformed ones.

    Args:
        raw_entries: Iterable of mappings, or mapping of id -> mapping
        source: Label for the load report

    Returns:
        Tuple of (entries in source order, LoadReport)

    Raises:
        LoadError: If the source is empty or no record is usable
    """
    if raw_entries is None:
        raise LoadError(f"Lexicon source {source} is empty")

    report = LoadReport(source=source)
    entries: list[LexiconEntry] = []

    for index, (entry_id, record) in enumerate(_iter_records(raw_entries)):
        try:
            entries.append(parse_record(entry_id, record))
        except ValueError as e:
            warning = PerEntryLoadWarning(index=index, entry_id=entry_id, reason=str(e))
            report.warnings.append(warning)
            logger.warning(f"Skipping lexicon {warning}")

    report.accepted = len(entries)
    report.skipped = len(report.warnings)

    if not entries:
        if report.skipped:
            raise LoadError(
                f"No usable entries in {source} ({report.skipped} skipped)",
                warnings=report.warnings,
            )
        raise LoadError(f"Lexicon source {source} is empty")

    return entries, report


def read_source(path: Path) -> object:
    """Read raw records from a lexicon file.

    Raises:
        LoadError: If the file is missing, unparseable, or unsupported
    """
    if not path.exists():
        raise LoadError(f"Lexicon file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                for key in WRAPPER_KEYS:
                    if key in data and isinstance(data[key], (dict, list)):
                        return data[key]
            return data
        if suffix in (".tsv", ".tab"):
            with open(path, "r", encoding="utf-8", newline="") as f:
                return list(csv.DictReader(f, delimiter="\t"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, csv.Error) as e:
        raise LoadError(f"Cannot read lexicon file {path}: {e}") from e

    raise LoadError(f"Unsupported lexicon format: {path.suffix or path.name}")


def load_lexicon_file(path: Path | str) -> "Lexicon":
    """Load a Lexicon from a JSON or TSV file.

    Raises:
        LoadError: If the file cannot be read or yields no entries
    """
    # Import here to avoid circular dependency
    from undha.lexicon.store import Lexicon

    path = Path(path)
    raw = read_source(path)
    if not isinstance(raw, (list, dict)):
        raise LoadError(f"Lexicon file {path} must hold a list or mapping of records")
    lexicon = Lexicon.load(raw, source=str(path))
    logger.info(
        f"Loaded lexicon from {path}: {lexicon.load_report.accepted} entries, "
        f"{lexicon.load_report.skipped} skipped"
    )
    return lexicon
