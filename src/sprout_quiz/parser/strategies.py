"""Rule-based strategies that turn assessment text into quiz questions.

Every strategy takes the raw text and returns a list of questions, or
``None`` when the text is not in the format it understands. None of them
raise for malformed content.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from .models import QuestionFormatError, QuizQuestion

__all__ = [
    "parse_json",
    "parse_markdown",
    "parse_plain_text",
    "questions_from_json_payload",
]

log = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)

QUESTION_NUMBER_RE = re.compile(r"^\d+\.?\s*")
OPTION_RE = re.compile(r"^[A-D][\)\.]\s*")
ANSWER_RE = re.compile(r"^(?:answer|correct):\s*", re.IGNORECASE)
EXPLANATION_RE = re.compile(r"^explanation:\s*", re.IGNORECASE)

CORRECT_MARKERS = ("[CORRECT]", "*", "✓")
_EDGE_MARKER_RE = re.compile(
    r"^(?:\s*(?:\[CORRECT\]|✓|\*))+\s*|\s*(?:(?:\[CORRECT\]|✓|\*)\s*)+$"
)
ANSWER_LETTERS = "ABCD"

MIN_PLAIN_BLOCK_LINES = 3
MAX_PLAIN_OPTIONS = 3


# -----------------------------
# JSON
# -----------------------------


def parse_json(text: str) -> Optional[List[QuizQuestion]]:
    """Decode a JSON array of questions or a ``{"questions": [...]}`` wrapper.

    A document that fails to decode as a whole yields ``None``. Individual
    entries missing required fields are dropped and the rest kept.
    """
    fenced = _FENCED_RE.match(text)
    payload = fenced.group(1) if fenced else text
    try:
        data = json.loads(payload)
    except ValueError:
        return None
    questions = questions_from_json_payload(data)
    return questions or None


def questions_from_json_payload(data: Any) -> List[QuizQuestion]:
    """Convert an already-decoded JSON value into questions."""
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        return []
    out: List[QuizQuestion] = []
    for position, entry in enumerate(data):
        try:
            out.append(QuizQuestion.from_mapping(entry))
        except QuestionFormatError as exc:
            log.debug("Dropping JSON entry %d: %s", position, exc)
    return out


# -----------------------------
# Markdown-like text
# -----------------------------


class _Draft:
    """Question being accumulated while scanning lines."""

    def __init__(self, question: str) -> None:
        self.question = question
        self.options: List[str] = []
        self.correct_answer = 0
        self.explanation: Optional[str] = None

    def build(self) -> Optional[QuizQuestion]:
        if not self.options:
            return None
        return QuizQuestion(
            question=self.question,
            options=tuple(self.options),
            correct_answer=self.correct_answer,
            explanation=self.explanation,
        )


def _is_question_line(line: str) -> bool:
    return (
        QUESTION_NUMBER_RE.match(line) is not None
        or line.lower().startswith("q")
        or line.endswith("?")
    )


def _strip_correct_markers(option: str) -> tuple[str, bool]:
    # A marker anywhere flags the option; only edge markers leave the text.
    marked = any(marker in option for marker in CORRECT_MARKERS)
    stripped = _EDGE_MARKER_RE.sub("", option).strip()
    return (stripped or option.strip()), marked


def parse_markdown(text: str) -> Optional[List[QuizQuestion]]:
    """Scan numbered questions, lettered options and answer/explanation keys.

    Recognised lines, in priority order:

    - question: leading number, leading ``Q``/``q``, or trailing ``?``
    - option: ``A)``/``A.`` through ``D)``/``D.``; ``*``, ``✓`` or
      ``[CORRECT]`` on the line marks it as the answer
    - ``Answer: B`` / ``Correct: b``
    - ``Explanation: ...``

    Questions without any option are discarded.
    """
    questions: List[QuizQuestion] = []
    draft: Optional[_Draft] = None

    def flush() -> None:
        if draft is None:
            return
        built = draft.build()
        if built is not None:
            questions.append(built)

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        if _is_question_line(line):
            flush()
            draft = _Draft(QUESTION_NUMBER_RE.sub("", line, count=1))
            continue

        if draft is None:
            continue

        if OPTION_RE.match(line):
            option, marked = _strip_correct_markers(
                OPTION_RE.sub("", line, count=1)
            )
            draft.options.append(option)
            if marked:
                draft.correct_answer = len(draft.options) - 1
        elif ANSWER_RE.match(line):
            key = ANSWER_RE.sub("", line, count=1)[:1].upper()
            if key and key in ANSWER_LETTERS:
                draft.correct_answer = ANSWER_LETTERS.index(key)
        elif EXPLANATION_RE.match(line):
            draft.explanation = EXPLANATION_RE.sub("", line, count=1)

    flush()
    return questions or None


# -----------------------------
# Plain paragraphs
# -----------------------------


def parse_plain_text(text: str) -> Optional[List[QuizQuestion]]:
    """Treat each blank-line separated block as question + up to 3 options.

    No answer key can be inferred, so the first option is marked correct.
    """
    questions: List[QuizQuestion] = []
    for block in text.split("\n\n"):
        lines = [ln.strip() for ln in block.splitlines()]
        lines = [ln for ln in lines if ln]
        if len(lines) < MIN_PLAIN_BLOCK_LINES:
            continue
        questions.append(
            QuizQuestion(
                question=lines[0],
                options=tuple(lines[1 : 1 + MAX_PLAIN_OPTIONS]),
                correct_answer=0,
                explanation=None,
            )
        )
    return questions or None
