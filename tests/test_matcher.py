"""Tests for token matching and confidence scoring."""

import pytest

from undha.engine import Direction, Matcher, normalize_token
from undha.engine.matcher import partial_confidence, split_affixes
from undha.lexicon import Lexicon, Register


@pytest.fixture
def matcher(lexicon):
    return Matcher(lexicon)


class TestSplitAffixes:
    """Tests for punctuation handling around tokens."""

    def test_plain_word(self):
        assert split_affixes("makan") == ("", "makan", "")

    def test_surrounding_punctuation(self):
        assert split_affixes('"Makan!"') == ('"', "Makan", '!"')

    def test_interior_punctuation_kept(self):
        assert split_affixes("rumah-rumah,") == ("", "rumah-rumah", ",")

    def test_only_punctuation(self):
        assert split_affixes("...") == ("...", "", "")

    def test_normalize_token(self):
        assert normalize_token("  (MAKAN). ") == "makan"


class TestPartialConfidence:
    """Tests for the length-ratio score."""

    def test_ratio(self):
        assert partial_confidence("eat", "eating") == 0.5

    def test_capped(self):
        """Near-identical lengths never reach exact-match confidence."""
        assert partial_confidence("makanan", "makana") == 0.8

    def test_empty(self):
        assert partial_confidence("", "") == 0.0


class TestExactMatch:
    """Exact matches score exactly 1.0."""

    def test_forward_exact(self, matcher):
        candidate = matcher.match("makan", Register.HONORIFIC)
        assert candidate.confidence == 1.0
        assert candidate.exact
        assert candidate.surface_form == "dhahar"
        assert candidate.lemma == "makan"
        assert candidate.output == "dhahar"

    def test_exact_ignores_case_and_punctuation(self, matcher):
        candidate = matcher.match("Makan,", Register.POLITE, position=3)
        assert candidate.confidence == 1.0
        assert candidate.token == "Makan,"
        assert candidate.position == 3

    def test_exact_every_entry(self, lexicon, matcher):
        """Every base gloss matches itself exactly in every register."""
        for entry in lexicon:
            for register in Register:
                candidate = matcher.match(entry.base, register)
                assert candidate.confidence == 1.0
                assert candidate.surface_form == entry.form(register)

    def test_reverse_exact(self, matcher):
        candidate = matcher.match("griya", Register.POLITE, Direction.REVERSE)
        assert candidate.confidence == 1.0
        assert candidate.output == "rumah"
        assert candidate.direction is Direction.REVERSE

    def test_reverse_register_restricted(self, matcher):
        """A krama inggil form does not match exactly as ngoko."""
        candidate = matcher.match("dhahar", Register.PLAIN, Direction.REVERSE)
        assert candidate is None or not candidate.exact

    def test_duplicate_gloss_first_with_form_wins(self):
        """A later entry with the same gloss supplies a form the first lacks."""
        lexicon = Lexicon.load(
            [
                {"base": "raja", "honorific": "nata"},
                {"base": "raja", "plain": "ratu"},
            ]
        )
        matcher = Matcher(lexicon)

        candidate = matcher.match("raja", Register.PLAIN)
        assert candidate.surface_form == "ratu"
        assert candidate.confidence == 1.0
        assert candidate.exact
        assert matcher.match("raja", Register.HONORIFIC).surface_form == "nata"
        assert lexicon.lookup_by_base("raja", Register.PLAIN) == "ratu"


class TestPartialMatch:
    """Partial matches score in (0, 0.8]."""

    def test_token_contains_base(self, matcher):
        candidate = matcher.match("makanan", Register.PLAIN)
        assert not candidate.exact
        assert candidate.surface_form == "mangan"
        assert candidate.confidence == pytest.approx(5 / 7)

    def test_base_contains_token(self, matcher):
        candidate = matcher.match("pergi", Register.PLAIN)
        assert candidate.exact
        candidate = matcher.match("perg", Register.PLAIN)
        assert not candidate.exact
        assert candidate.confidence == 0.8
        assert candidate.surface_form == "lunga"

    def test_partial_bounds(self, lexicon, matcher):
        for token in ["makanannya", "rumahku", "mandikan", "nasinya", "ma"]:
            candidate = matcher.match(token, Register.POLITE)
            if candidate is not None and not candidate.exact:
                assert 0 < candidate.confidence <= 0.8

    def test_best_ratio_wins(self):
        lexicon = Lexicon.load(
            [
                {"base": "rum", "plain": "a"},
                {"base": "rumah", "plain": "omah"},
            ]
        )
        candidate = Matcher(lexicon).match("rumahnya", Register.PLAIN)
        assert candidate.surface_form == "omah"

    def test_tie_first_wins(self):
        """Equal scores keep the first entry in load order."""
        lexicon = Lexicon.load(
            [
                {"base": "abc", "plain": "first"},
                {"base": "bcd", "plain": "second"},
            ]
        )
        candidate = Matcher(lexicon).match("abcd", Register.PLAIN)
        assert candidate.surface_form == "first"
        assert candidate.confidence == 0.75

    def test_reverse_partial(self, matcher):
        candidate = matcher.match("dhaharipun", Register.HONORIFIC, Direction.REVERSE)
        assert candidate.output == "makan"
        assert not candidate.exact
        assert candidate.confidence == pytest.approx(6 / 10)


class TestNoMatch:
    """Misses return None rather than raising."""

    def test_unknown_token(self, matcher):
        assert matcher.match("xyz", Register.PLAIN) is None

    def test_punctuation_only(self, matcher):
        assert matcher.match("?!", Register.PLAIN) is None

    def test_entry_without_form_for_register(self):
        """Entries with no effective form for the register are skipped."""
        lexicon = Lexicon.load([{"base": "raja", "honorific": "nata"}])
        matcher = Matcher(lexicon)
        assert matcher.match("raja", Register.PLAIN) is None
        assert matcher.match("raja", Register.HONORIFIC).surface_form == "nata"
