"""External responders: generative translation backends.

The engine treats a responder as `translate(text, register, direction) -> str`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from undha.responders.base import ExternalResponder, FakeResponder

if TYPE_CHECKING:
    from undha.config import Settings
    from undha.lexicon.store import Lexicon

__all__ = ["ExternalResponder", "FakeResponder", "get_responder"]


def get_responder(
    kind: str = "none",
    settings: "Settings | None" = None,
    lexicon: "Lexicon | None" = None,
    api_key: str | None = None,
    scenario: str = "echo",
) -> ExternalResponder | None:
    """Factory function to get the configured responder.

    Args:
        kind: "none", "fake", or "http"
        settings: Endpoint, model and sampling settings (for http)
        lexicon: Glossary source for prompt hints (for http)
        api_key: Override for the stored API key (for http)
        scenario: Scenario for FakeResponder

    Returns:
        Responder instance, or None for "none"
    """
    if kind == "none":
        return None
    if kind == "fake":
        return FakeResponder(scenario=scenario)
    if kind == "http":
        # Import here to avoid circular dependency
        from undha.config import Settings
        from undha.responders.credentials import get_api_key
        from undha.responders.http import HttpResponder

        settings = settings or Settings()
        return HttpResponder(
            endpoint_url=settings.endpoint_url,
            model=settings.model,
            api_key=api_key or get_api_key(),
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            lexicon=lexicon,
        )
    raise ValueError(f"Unknown responder kind: {kind}")
