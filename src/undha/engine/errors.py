"""Typed failures of the resolution engine."""

from __future__ import annotations

import asyncio


class ResolutionError(Exception):
    """Base class for failures surfaced by ResolutionEngine.resolve."""

    def __init__(self, message: str, text: str = "", strategy: str = ""):
        self.text = text
        self.strategy = strategy
        super().__init__(message)


class InvalidInput(ResolutionError):
    """Input text is empty or whitespace only."""

    pass


class NoMatchFound(ResolutionError):
    """No strategy produced any translated content."""

    pass


class ExternalServiceError(ResolutionError):
    """External responder was unavailable, failed, or answered badly."""

    def __init__(
        self,
        message: str,
        text: str = "",
        strategy: str = "",
        cause: str | None = None,
    ):
        self.cause = cause
        super().__init__(message, text=text, strategy=strategy)


class ExternalServiceTimeout(ExternalServiceError):
    """External responder did not answer within the timeout."""

    pass


class Cancelled(asyncio.CancelledError):
    """Caller cancelled a resolve call while it awaited the responder.

    Not a ResolutionError: the hybrid strategy never degrades on it.
    """

    def __init__(self, text: str = "", strategy: str = ""):
        self.text = text
        self.strategy = strategy
        super().__init__(f"Resolution cancelled ({strategy or 'unknown'} strategy)")
