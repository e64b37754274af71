"""Turn a raw ``assessmentQuestions`` string into structured quiz questions.

The format is never announced, so :class:`QuizTextParser` tries its
strategies in order (JSON, Markdown-like, plain paragraphs) and keeps the
first one that finds anything. An optional :class:`TextExtractor` can be
consulted before or after the rule-based chain. Whatever wins goes through
:func:`validate_questions`.

The parser never raises for bad content; an empty list means "no quiz".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..core import load_client
from .config import ParserConfig
from .extractor import OpenAIExtractor, TextExtractor
from .models import QuizQuestion
from .strategies import parse_json, parse_markdown, parse_plain_text
from .validation import validate_questions

__all__ = [
    "EXTRACTION_MODES",
    "RULE_BASED_STRATEGIES",
    "QuizTextParser",
    "parse_assessment",
    "parser_from_config",
]

log = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[List[QuizQuestion]]]

RULE_BASED_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("json", parse_json),
    ("markdown", parse_markdown),
    ("plain_text", parse_plain_text),
)

EXTRACTION_MODES = ("fallback", "first", "off")


class QuizTextParser:
    """Ordered strategy chain with optional generative extraction.

    ``extraction_mode`` decides where the extractor sits: ``"fallback"``
    runs it only when every rule-based strategy came up empty, ``"first"``
    runs it ahead of them, ``"off"`` never calls it. ``timeout`` bounds the
    extractor call made from :meth:`aparse`.
    """

    def __init__(
        self,
        extractor: Optional[TextExtractor] = None,
        *,
        extraction_mode: str = "fallback",
        strategies: Sequence[Tuple[str, Strategy]] = RULE_BASED_STRATEGIES,
        timeout: Optional[float] = None,
    ) -> None:
        if extraction_mode not in EXTRACTION_MODES:
            raise ValueError(
                f"extraction_mode must be one of {', '.join(EXTRACTION_MODES)}"
            )
        self.extractor = extractor
        self.extraction_mode = (
            extraction_mode if extractor is not None else "off"
        )
        self.strategies = tuple(strategies)
        self.timeout = timeout

    def parse(self, raw_text: str) -> List[QuizQuestion]:
        text = _prepare(raw_text)
        if text is None:
            return []
        if self.extraction_mode == "first":
            extracted = self._extract(text)
            if extracted:
                return validate_questions(extracted)
        found = self._run_rules(text)
        if not found and self.extraction_mode == "fallback":
            found = self._extract(text)
        return validate_questions(found or [])

    async def aparse(
        self, raw_text: str, *, timeout: Optional[float] = None
    ) -> List[QuizQuestion]:
        """Async :meth:`parse`; the extractor call is the only await point.

        Cancelling the awaiting task propagates ``CancelledError`` and a
        timeout counts as an extraction failure. Only an extractor with its
        own ``aextract`` coroutine is actually cancelled. A synchronous
        ``extract`` runs in a worker thread that keeps going after the
        deadline, so its request is bounded by the client timeout
        (``extraction.timeout_seconds``), not by ``timeout``.
        """
        text = _prepare(raw_text)
        if text is None:
            return []
        deadline = timeout if timeout is not None else self.timeout
        if self.extraction_mode == "first":
            extracted = await self._aextract(text, deadline)
            if extracted:
                return validate_questions(extracted)
        found = self._run_rules(text)
        if not found and self.extraction_mode == "fallback":
            found = await self._aextract(text, deadline)
        return validate_questions(found or [])

    def _run_rules(self, text: str) -> Optional[List[QuizQuestion]]:
        for name, strategy in self.strategies:
            try:
                found = strategy(text)
            except Exception:  # noqa: BLE001 - a broken strategy is a miss
                log.exception("Strategy %s failed", name)
                continue
            if found:
                log.debug("Strategy %s produced %d question(s)", name, len(found))
                return found
        log.debug("No rule-based strategy matched")
        return None

    def _extract(self, text: str) -> Optional[List[QuizQuestion]]:
        if self.extractor is None:
            return None
        try:
            return self.extractor.extract(text)
        except Exception:  # noqa: BLE001
            log.warning("Extractor raised; ignoring its result", exc_info=True)
            return None

    async def _aextract(
        self, text: str, timeout: Optional[float]
    ) -> Optional[List[QuizQuestion]]:
        if self.extractor is None:
            return None
        aextract = getattr(self.extractor, "aextract", None)
        if aextract is not None:
            pending = aextract(text)
        else:
            pending = asyncio.to_thread(self.extractor.extract, text)
        try:
            return await asyncio.wait_for(pending, timeout)
        except asyncio.TimeoutError:
            log.warning("Extraction timed out after %ss", timeout)
            return None
        except Exception:  # noqa: BLE001
            log.warning("Extractor raised; ignoring its result", exc_info=True)
            return None


def _prepare(raw_text: object) -> Optional[str]:
    if not isinstance(raw_text, str) or not raw_text.strip():
        return None
    return raw_text.replace("\r\n", "\n").replace("\r", "\n")


def parse_assessment(
    raw_text: str, extractor: Optional[TextExtractor] = None
) -> List[QuizQuestion]:
    """Parse ``raw_text`` with a fresh default parser."""
    return QuizTextParser(extractor).parse(raw_text)


def parser_from_config(
    config: ParserConfig, *, client: object = None
) -> QuizTextParser:
    """Build a parser wired to an OpenAI extractor when the config enables it."""
    if config.extraction_mode == "off":
        return QuizTextParser()
    settings = config.extraction
    extractor = OpenAIExtractor(
        client,
        model=settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        client_factory=lambda: load_client(
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
        ),
    )
    return QuizTextParser(
        extractor,
        extraction_mode=settings.mode,
        timeout=settings.timeout_seconds,
    )
