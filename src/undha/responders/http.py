"""HTTP responder for OpenAI-compatible chat completion endpoints.

Prompt text and response unwrapping live here. The engine only sees
`translate() -> str` or an ExternalServiceError.
"""

from __future__ import annotations

import logging
import re

import httpx

from undha.engine.errors import ExternalServiceError, ExternalServiceTimeout
from undha.engine.matcher import normalize_token
from undha.engine.result import Direction
from undha.lexicon.glossary import glossary_lookup, known_terms
from undha.lexicon.models import Register
from undha.lexicon.store import Lexicon
from undha.responders.credentials import scrub_secrets

logger = logging.getLogger(__name__)

BASE_LANGUAGE = "Indonesian"
TARGET_LANGUAGE = "Javanese"

_TRANSLATION_LINE = re.compile(
    r"^\s*Translation\s*:\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE
)


def build_system_prompt(register: Register, direction: Direction) -> str:
    if direction is Direction.REVERSE:
        return (
            f"You are an expert {TARGET_LANGUAGE}-{BASE_LANGUAGE} translator. "
            f"Translate from {TARGET_LANGUAGE} ({register.description}) to "
            f"natural, fluent {BASE_LANGUAGE}. Keep named entities unchanged."
        )
    return (
        f"You are an expert {BASE_LANGUAGE}-{TARGET_LANGUAGE} translator. "
        f"Translate from {BASE_LANGUAGE} to {TARGET_LANGUAGE} strictly in the "
        f"{register.description} register. Do not mix registers. "
        f"Keep named entities unchanged."
    )


def build_user_prompt(
    text: str,
    register: Register,
    direction: Direction,
    glossary: str | None = None,
) -> str:
    source = TARGET_LANGUAGE if direction is Direction.REVERSE else BASE_LANGUAGE
    lines = [
        f"Translate the following {source} text:",
        "",
        f'{source} text: "{text}"',
        "",
    ]
    if glossary:
        lines += [f"Preferred vocabulary ({glossary}).", ""]
    lines += ["Format your response as:", "Translation: [translated text]"]
    return "\n".join(lines)


def extract_translation(content: str) -> str:
    """Pull the translated text out of a model reply.

    Uses the "Translation:" line when present, otherwise the whole
    reply. Surrounding quotes are removed.
    """
    match = _TRANSLATION_LINE.search(content)
    text = match.group(1) if match else content
    return text.strip().strip('"').strip()


class HttpResponder:
    """Async responder backed by an OpenAI-compatible endpoint.

    Args:
        endpoint_url: Full chat completions URL
        model: Model name sent in the payload
        api_key: Bearer token (optional for local servers)
        temperature: Sampling temperature
        max_tokens: Response token limit
        lexicon: If given, glossary hints for known words are added to
            forward prompts
        timeout: Seconds for the HTTP request; None leaves the bound to
            the engine's own timeout
        client: Pre-built httpx.AsyncClient (tests inject a MockTransport)
    """

    def __init__(
        self,
        endpoint_url: str,
        model: str = "default",
        api_key: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        lexicon: Lexicon | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint_url = endpoint_url
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.lexicon = lexicon
        self.timeout = timeout
        self._client = client

    def build_payload(
        self, text: str, register: Register, direction: Direction
    ) -> dict:
        glossary = None
        if self.lexicon is not None and direction is Direction.FORWARD:
            terms = known_terms(
                self.lexicon, [normalize_token(word) for word in text.split()]
            )
            if terms:
                glossary = glossary_lookup(self.lexicon, ", ".join(terms))
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "system",
                    "content": build_system_prompt(register, direction),
                },
                {
                    "role": "user",
                    "content": build_user_prompt(text, register, direction, glossary),
                },
            ],
        }

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def translate(
        self,
        text: str,
        register: Register,
        direction: Direction = Direction.FORWARD,
    ) -> str:
        payload = self.build_payload(text, register, direction)
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.endpoint_url, json=payload, headers=self._headers()
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        self.endpoint_url, json=payload, headers=self._headers()
                    )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                f"Responder returned HTTP {e.response.status_code}",
                text=text,
                cause="http_status",
            ) from e
        except httpx.TimeoutException as e:
            raise ExternalServiceTimeout(
                f"Responder timed out: {type(e).__name__}",
                text=text,
                cause="timeout",
            ) from e
        except httpx.RequestError as e:
            detail = str(e) or type(e).__name__
            raise ExternalServiceError(
                scrub_secrets(f"Responder unreachable: {detail}"),
                text=text,
                cause="network",
            ) from e
        except ValueError as e:
            raise ExternalServiceError(
                "Responder returned invalid JSON", text=text, cause="parsing"
            ) from e

        content = self._unwrap(data)
        if content is None:
            raise ExternalServiceError(
                "Responder payload has no message content", text=text, cause="parsing"
            )
        translated = extract_translation(content)
        logger.debug(f"Responder translated {text!r} -> {translated!r}")
        return translated

    @staticmethod
    def _unwrap(data: object) -> str | None:
        """Get choices[0].message.content from a completion payload."""
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]
        if isinstance(first.get("text"), str):
            return first["text"]
        return None
