"""Glossary hints for prompting an external model.

Looks up preferred register forms for key base-language terms so a
generative responder can be steered towards lexicon vocabulary.
"""

from __future__ import annotations

from undha.lexicon.store import Lexicon

MISSING_ENTRY = "(no entry)"


def split_terms(terms: str) -> list[str]:
    """Split a comma-separated term list, dropping blanks and duplicates."""
    seen: list[str] = []
    for part in terms.split(","):
        term = part.strip().lower()
        if term and term not in seen:
            seen.append(term)
    return seen


def glossary_pairs(lexicon: Lexicon, terms: list[str]) -> list[tuple[str, str | None]]:
    """Map each term to its "plain / polite / honorific" forms, or None."""
    pairs = []
    for term in terms:
        entry = lexicon.entry_for_base(term)
        pairs.append((term, entry.forms_text() if entry is not None else None))
    return pairs


def glossary_lookup(lexicon: Lexicon, terms: str) -> str:
    """Render glossary hints for comma-separated terms.

    Example:
        >>> glossary_lookup(lexicon, "makan, pergi")
        'Glossary: makan=mangan / nedha / dhahar; pergi=lunga / kesah / tindak'
    """
    pairs = glossary_pairs(lexicon, split_terms(terms))
    rendered = [f"{term}={forms or MISSING_ENTRY}" for term, forms in pairs]
    return "Glossary: " + "; ".join(rendered)


def known_terms(lexicon: Lexicon, words: list[str]) -> list[str]:
    """Words (lowercased, deduplicated) that have a lexicon entry."""
    found: list[str] = []
    for word in words:
        term = word.strip().lower()
        if term and term not in found and lexicon.entry_for_base(term) is not None:
            found.append(term)
    return found
