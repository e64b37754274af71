"""Generative extraction of quiz questions through a chat-completion model.

The extractor is an optional last (or first) step of the parser chain. It
only ever reports questions or ``None``; unavailable clients, API errors and
undecodable responses are logged and absorbed here.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..core import load_client
from .models import QuizQuestion
from .strategies import questions_from_json_payload

__all__ = [
    "TextExtractor",
    "NullExtractor",
    "OpenAIExtractor",
    "build_extraction_prompts",
]

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

_FENCED_RE = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)

SYSTEM_PROMPT = (
    "You convert instructor-written assessment text into structured quiz "
    "questions. Respond with a JSON array only, no prose."
)

EXTRACTION_RULES = """\
Schema for each array element:
{"question": str, "options": [str], "correctAnswer": int, "explanation": str or null}

Rules:
- Keep the questions in the order they appear in the text.
- A question is multiple-choice only when the text lists at least two
  answer choices for it. Put the choice texts in "options" without their
  letter or number markers.
- "correctAnswer" is the zero-based index of the correct option. Convert
  answer keys such as "Answer: C", "(b)" or the text of the right choice
  into that index. If no key is given, use 0.
- Prompts that ask the student to explain, describe, discuss, write, list,
  give examples or answer in their own words are open-ended: use
  "options": [] and "correctAnswer": -1, and put the model or sample answer
  in "explanation" when the text provides one.
- Put any rationale for a multiple-choice answer in "explanation".
- Do not invent questions that are not in the text."""


class TextExtractor(Protocol):
    """Anything able to pull questions out of free text."""

    def extract(self, text: str) -> Optional[List[QuizQuestion]]:
        ...


class NullExtractor:
    """Extractor used when no generative capability is configured."""

    def extract(self, text: str) -> Optional[List[QuizQuestion]]:
        return None


def build_extraction_prompts(text: str) -> Tuple[str, str]:
    user_prompt = (
        "Extract every quiz question from the assessment below.\n\n"
        f"{EXTRACTION_RULES}\n\n"
        "Assessment:\n"
        f"{text.strip()}"
    )
    return SYSTEM_PROMPT, user_prompt


class OpenAIExtractor:
    """Extract questions with an OpenAI chat-completions client.

    ``client`` may be injected (anything exposing
    ``chat.completions.create``); otherwise one is created lazily from
    ``OPENAI_API_KEY`` on first use. A client that cannot be created makes
    every call return ``None``.
    """

    def __init__(
        self,
        client: object = None,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 1500,
        client_factory: Optional[Callable[[], object]] = None,
    ) -> None:
        self._client = client
        self._client_factory = client_factory or load_client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _resolve_client(self) -> Optional[object]:
        if self._client is not None:
            return self._client
        try:
            self._client = self._client_factory()
        except RuntimeError as exc:
            log.info("Generative extraction unavailable: %s", exc)
            return None
        return self._client

    def extract(self, text: str) -> Optional[List[QuizQuestion]]:
        client = self._resolve_client()
        if client is None:
            return None
        system_prompt, user_prompt = build_extraction_prompts(text)
        content = _chat_completion_content(
            client,
            model=self.model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not content:
            return None
        records = _extract_json_array(content)
        if not records:
            log.warning("Extraction response did not contain a JSON array")
            return None
        questions = questions_from_json_payload(
            [_normalize_record(rec) for rec in records]
        )
        log.debug(
            "Extraction produced %d question(s) from %d record(s)",
            len(questions),
            len(records),
        )
        return questions or None


def _chat_completion_content(
    client: object,
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    try:
        resp = client.chat.completions.create(  # type: ignore[attr-defined]
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        raw_content = resp.choices[0].message.content  # type: ignore[index]
    except Exception:  # noqa: BLE001 - any client failure means no result
        log.warning("Extraction request failed", exc_info=True)
        return ""
    return (raw_content or "").strip()


def _extract_json_array(content: str) -> List[Any]:
    fenced = _FENCED_RE.search(content)
    payload = fenced.group(1) if fenced else content
    try:
        data = json.loads(payload)
    except ValueError:
        return []
    if isinstance(data, dict):
        data = data.get("questions")
    return data if isinstance(data, list) else []


def _normalize_record(record: Any) -> Any:
    """Coerce letter or option-text answer keys into a zero-based index."""
    if not isinstance(record, dict):
        return record
    answer = record.get("correctAnswer")
    if not isinstance(answer, str):
        return record
    options = record.get("options")
    options = options if isinstance(options, list) else []
    fixed: Dict[str, Any] = dict(record)
    fixed["correctAnswer"] = _resolve_answer_index(answer, options)
    return fixed


def _resolve_answer_index(answer: str, options: List[Any]) -> Any:
    candidate = answer.strip()
    if not options:
        return -1
    if candidate.lstrip("-").isdigit():
        return int(candidate)
    texts = [o.strip() if isinstance(o, str) else None for o in options]
    if candidate in texts:
        return texts.index(candidate)
    key = candidate.strip("().").upper()
    if len(key) == 1 and key.isalpha():
        index = ord(key) - ord("A")
        if index < len(options):
            return index
    lowered = candidate.lower()
    for index, option in enumerate(options):
        if isinstance(option, str) and option.strip().lower() == lowered:
            return index
    return answer
