"""External responder protocol and deterministic implementations.

Provides:
- ExternalResponder: Protocol for generative translation backends
- FakeResponder: Deterministic output for testing and offline demos
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

from undha.lexicon.models import Register

if TYPE_CHECKING:
    from undha.engine.result import Direction


class ExternalResponder(Protocol):
    """Protocol for external translation backends.

    Implementations return the translated text as a plain string or
    raise. Any structural unwrapping of a model response happens inside
    the implementation, never in the engine.
    """

    async def translate(
        self,
        text: str,
        register: Register,
        direction: "Direction",
    ) -> str:
        """Translate text for a register.

        Args:
            text: Source text
            register: Target register (forward) or source register (reverse)
            direction: Translation direction

        Returns:
            Translated text
        """
        ...


class FakeResponder:
    """Deterministic responder for testing.

    Scenarios:
    - echo: "[register] text" (default)
    - fixed: always returns `reply`
    - fail: raises RuntimeError
    - slow: sleeps `delay` seconds, then echoes
    - malformed: returns an empty string
    """

    SCENARIOS = ("echo", "fixed", "fail", "slow", "malformed")

    def __init__(self, scenario: str = "echo", reply: str = "", delay: float = 0.0):
        if scenario not in self.SCENARIOS:
            raise ValueError(f"Unknown FakeResponder scenario: {scenario}")
        self.scenario = scenario
        self.reply = reply
        self.delay = delay
        self.calls: list[tuple[str, Register]] = []

    async def translate(
        self,
        text: str,
        register: Register,
        direction: "Direction",
    ) -> str:
        self.calls.append((text, register))
        if self.delay or self.scenario == "slow":
            await asyncio.sleep(self.delay or 1.0)
        if self.scenario == "fail":
            raise RuntimeError("FakeResponder configured to fail")
        if self.scenario == "malformed":
            return ""
        if self.scenario == "fixed":
            return self.reply
        return f"[{register.value}] {text}"
