"""Tokenizer adapter.

The engine consumes token text only; character ranges are carried for
callers that highlight source spans.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Token:
    """A word token with its source range [start, end)."""

    text: str
    start: int
    end: int


class Tokenizer(Protocol):
    """Segments free text into ordered word tokens."""

    def tokenize(self, text: str) -> list[Token]:
        ...


class WordTokenizer:
    """Whitespace tokenizer.

    Punctuation stays attached to its word; the matcher strips it.
    """

    _WORD = re.compile(r"\S+")

    def tokenize(self, text: str) -> list[Token]:
        return [Token(m.group(), m.start(), m.end()) for m in self._WORD.finditer(text)]
