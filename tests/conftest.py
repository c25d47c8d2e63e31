"""Shared fixtures for Undha tests."""

import pytest

from undha.config import Settings
from undha.engine import ResolutionEngine
from undha.lexicon import Lexicon

# Indonesian glosses with ngoko / krama alus / krama inggil forms
RAW_ENTRIES = [
    {
        "id": "makan",
        "indonesia": "makan",
        "ngoko": "mangan",
        "kramaalus": "nedha",
        "kramainggil": "dhahar",
    },
    {
        "id": "pergi",
        "indonesia": "pergi",
        "ngoko": "lunga",
        "kramaalus": "kesah",
        "kramainggil": "tindak",
    },
    {
        "id": "rumah",
        "indonesia": "rumah",
        "ngoko": "omah",
        "kramaalus": "griya",
        "kramainggil": "dalem",
    },
    {
        "id": "mandi",
        "indonesia": "mandi",
        "ngoko": "adus",
        "kramaalus": "",
        "kramainggil": "siram",
    },
    {
        "id": "nasi",
        "indonesia": "nasi",
        "ngoko": "sega",
        "kramaalus": "sekul",
        "kramainggil": "",
    },
]

# Single English gloss, for the table and hybrid scenarios
EAT_ENTRIES = [
    {
        "id": "eat",
        "base": "eat",
        "plain": "mangan",
        "polite": "nedha",
        "honorific": "dhahar",
    }
]


@pytest.fixture
def raw_entries():
    """Fresh copy of the raw Indonesian records."""
    return [dict(record) for record in RAW_ENTRIES]


@pytest.fixture
def lexicon(raw_entries):
    """Indonesian -> Javanese lexicon."""
    return Lexicon.load(raw_entries, source="fixture")


@pytest.fixture
def eat_lexicon():
    """Lexicon with the single "eat" entry."""
    return Lexicon.load([dict(r) for r in EAT_ENTRIES], source="eat")


@pytest.fixture
def settings(tmp_path):
    """Default settings isolated from the user's home directory."""
    return Settings(data_dir=tmp_path / "undha")


@pytest.fixture
def engine(lexicon, settings):
    """Table-only engine over the Indonesian lexicon."""
    return ResolutionEngine(lexicon, settings=settings)
