"""Tests for glossary hints."""

from undha.lexicon.glossary import (
    MISSING_ENTRY,
    glossary_lookup,
    glossary_pairs,
    known_terms,
    split_terms,
)


class TestSplitTerms:
    def test_split_and_dedupe(self):
        assert split_terms(" Makan, pergi,,makan ") == ["makan", "pergi"]

    def test_empty(self):
        assert split_terms("") == []


class TestGlossaryLookup:
    """Tests for rendered glossary lines."""

    def test_known_terms(self, lexicon):
        assert glossary_lookup(lexicon, "makan, pergi") == (
            "Glossary: makan=mangan / nedha / dhahar; pergi=lunga / kesah / tindak"
        )

    def test_fallback_forms_collapse(self, lexicon):
        """A fallback form repeats ngoko and is listed once."""
        assert glossary_lookup(lexicon, "mandi") == "Glossary: mandi=adus / siram"

    def test_missing_term(self, lexicon):
        expected = f"Glossary: terbang={MISSING_ENTRY}"
        assert glossary_lookup(lexicon, "terbang") == expected

    def test_pairs(self, lexicon):
        assert glossary_pairs(lexicon, ["nasi", "xyz"]) == [
            ("nasi", "sega / sekul"),
            ("xyz", None),
        ]


class TestKnownTerms:
    def test_filters_unknown_and_duplicates(self, lexicon):
        words = ["Ibu", "makan", "nasi", "MAKAN"]
        assert known_terms(lexicon, words) == ["makan", "nasi"]
