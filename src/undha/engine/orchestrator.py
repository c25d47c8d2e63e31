"""Resolution orchestrator: table, external and hybrid strategies.

Escalation order for hybrid:
1. Lexicon table (local, never suspends)
2. External responder, only if the table confidence is not above the
   threshold (one awaited call, bounded by a timeout)
3. Degrade to the below-threshold table answer if the responder fails

The engine holds no mutable state of its own. Each call takes one
lexicon snapshot from the handle and uses it throughout.
"""

from __future__ import annotations

import asyncio
import logging
import time

from undha.config import Settings
from undha.engine.errors import (
    Cancelled,
    ExternalServiceError,
    ExternalServiceTimeout,
    InvalidInput,
    NoMatchFound,
)
from undha.engine.matcher import Matcher, split_affixes
from undha.engine.result import (
    Direction,
    MatchCandidate,
    Strategy,
    TranslationResult,
)
from undha.engine.tokenizer import Tokenizer, WordTokenizer
from undha.lexicon.models import Register
from undha.lexicon.store import Lexicon, LexiconHandle
from undha.responders.base import ExternalResponder

logger = logging.getLogger(__name__)

_UNSET = object()


class ResolutionEngine:
    """Resolves phrases to translations and reports how.

    Args:
        lexicon: Lexicon, or LexiconHandle for reloadable deployments
        responder: External responder used by external/hybrid strategies
        tokenizer: Word segmenter (default: WordTokenizer)
        settings: Thresholds, external confidence and default timeout
    """

    def __init__(
        self,
        lexicon: Lexicon | LexiconHandle,
        responder: ExternalResponder | None = None,
        tokenizer: Tokenizer | None = None,
        settings: Settings | None = None,
    ):
        if isinstance(lexicon, Lexicon):
            lexicon = LexiconHandle(lexicon)
        self.handle = lexicon
        self.responder = responder
        self.tokenizer = tokenizer or WordTokenizer()
        self.settings = settings or Settings()

    @property
    def lexicon(self) -> Lexicon:
        return self.handle.current

    async def resolve(
        self,
        text: str,
        register: Register | str,
        strategy: Strategy | str = Strategy.HYBRID,
        *,
        direction: Direction = Direction.FORWARD,
        timeout: float | None = _UNSET,  # type: ignore[assignment]
    ) -> TranslationResult:
        """Resolve text with the given strategy.

        Args:
            text: Source text
            register: Target register (forward) or source register (reverse)
            strategy: table, external or hybrid
            direction: FORWARD (base -> register) or REVERSE
            timeout: Seconds allowed for the external call; defaults to
                settings.external_timeout, None means unbounded

        Returns:
            TranslationResult

        Raises:
            InvalidInput: If text is blank
            NoMatchFound: If no strategy produced translated content
            ExternalServiceError: If the external-only strategy failed
            Cancelled: If the call was cancelled while awaiting the responder
        """
        register = Register.parse(register)
        strategy = Strategy.parse(strategy)
        if timeout is _UNSET:
            timeout = self.settings.external_timeout
        self._check_input(text, strategy)

        started = time.perf_counter()
        logger.debug(f"Resolving {text!r} ({strategy.value}, {register.value})")

        if strategy is Strategy.TABLE:
            return self.resolve_table(text, register, direction=direction)

        if strategy is Strategy.EXTERNAL:
            translated = await self._call_external(
                text, register, direction, timeout, strategy
            )
            return self._external_result(
                text, translated, register, direction, strategy, (), started
            )

        return await self._resolve_hybrid(text, register, direction, timeout, started)

    def resolve_table(
        self,
        text: str,
        register: Register | str,
        *,
        direction: Direction = Direction.FORWARD,
    ) -> TranslationResult:
        """Resolve text from the lexicon only. Never suspends.

        Raises:
            InvalidInput: If text is blank
            NoMatchFound: If no token matched
        """
        register = Register.parse(register)
        self._check_input(text, Strategy.TABLE)
        started = time.perf_counter()
        result = self._table(text, register, direction, Strategy.TABLE, started)
        if result is None:
            raise NoMatchFound(
                f"No lexicon match for any token in {text!r}",
                text=text,
                strategy=Strategy.TABLE.value,
            )
        return result

    async def _resolve_hybrid(
        self,
        text: str,
        register: Register,
        direction: Direction,
        timeout: float | None,
        started: float,
    ) -> TranslationResult:
        strategy = Strategy.HYBRID
        table = self._table(text, register, direction, strategy, started)

        if table is not None and table.confidence > self.settings.hybrid_threshold:
            logger.debug(
                f"Hybrid: table confidence {table.confidence:.2f}, no escalation"
            )
            return table

        if table is None:
            logger.info(f"Hybrid: no table match for {text!r}, escalating")
        else:
            logger.info(
                f"Hybrid: table confidence {table.confidence:.2f} <= "
                f"{self.settings.hybrid_threshold:.2f}, escalating"
            )

        evidence = table.matches if table is not None else ()
        try:
            translated = await self._call_external(
                text, register, direction, timeout, strategy
            )
        except ExternalServiceError as e:
            if table is None:
                raise NoMatchFound(
                    f"No lexicon match for {text!r} and external responder failed: {e}",
                    text=text,
                    strategy=strategy.value,
                ) from e
            logger.warning(
                f"Hybrid: external responder failed ({e}), using table result"
            )
            return TranslationResult(
                original_text=table.original_text,
                translated_text=table.translated_text,
                confidence=table.confidence,
                method=Strategy.TABLE,
                register=register,
                matches=table.matches,
                untranslated=table.untranslated,
                direction=direction,
                strategy=strategy,
                degraded=True,
                external_error=str(e),
                processing_time=time.perf_counter() - started,
            )

        return self._external_result(
            text, translated, register, direction, strategy, evidence, started
        )

    def _table(
        self,
        text: str,
        register: Register,
        direction: Direction,
        strategy: Strategy,
        started: float,
    ) -> TranslationResult | None:
        """Run the table strategy; None when every token misses."""
        matcher = Matcher(self.handle.current)
        tokens = self.tokenizer.tokenize(text)

        pieces: list[str] = []
        matches: list[MatchCandidate] = []
        untranslated: list[str] = []
        for position, token in enumerate(tokens):
            candidate = matcher.match(token.text, register, direction, position)
            if candidate is None:
                pieces.append(token.text)
                untranslated.append(token.text)
                continue
            prefix, _, suffix = split_affixes(token.text)
            pieces.append(f"{prefix}{candidate.output}{suffix}")
            matches.append(candidate)

        if not matches:
            return None

        confidence = sum(m.confidence for m in matches) / len(matches)
        return TranslationResult(
            original_text=text,
            translated_text=" ".join(pieces),
            confidence=confidence,
            method=Strategy.TABLE,
            register=register,
            matches=tuple(matches),
            untranslated=tuple(untranslated),
            direction=direction,
            strategy=strategy,
            processing_time=time.perf_counter() - started,
        )

    async def _call_external(
        self,
        text: str,
        register: Register,
        direction: Direction,
        timeout: float | None,
        strategy: Strategy,
    ) -> str:
        """Invoke the responder once; the only suspension point."""
        if self.responder is None:
            raise ExternalServiceError(
                "No external responder configured",
                text=text,
                strategy=strategy.value,
            )

        try:
            translated = await asyncio.wait_for(
                self.responder.translate(text, register, direction),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExternalServiceTimeout(
                f"External responder timed out after {timeout}s",
                text=text,
                strategy=strategy.value,
                cause="timeout",
            ) from e
        except asyncio.CancelledError as e:
            logger.info(f"Resolution of {text!r} cancelled")
            raise Cancelled(text=text, strategy=strategy.value) from e
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                f"External responder failed: {e}",
                text=text,
                strategy=strategy.value,
                cause=type(e).__name__,
            ) from e

        if not isinstance(translated, str) or not translated.strip():
            raise ExternalServiceError(
                "External responder returned an empty or malformed response",
                text=text,
                strategy=strategy.value,
                cause="malformed",
            )
        return translated.strip()

    def _external_result(
        self,
        text: str,
        translated: str,
        register: Register,
        direction: Direction,
        strategy: Strategy,
        evidence: tuple[MatchCandidate, ...],
        started: float,
    ) -> TranslationResult:
        return TranslationResult(
            original_text=text,
            translated_text=translated,
            confidence=self.settings.external_confidence,
            method=Strategy.EXTERNAL,
            register=register,
            matches=evidence,
            direction=direction,
            strategy=strategy,
            processing_time=time.perf_counter() - started,
        )

    @staticmethod
    def _check_input(text: str, strategy: Strategy) -> None:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput(
                "Input text is empty", text=text or "", strategy=strategy.value
            )
