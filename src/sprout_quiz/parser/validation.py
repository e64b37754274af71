"""Post-parse corrections applied to every question regardless of source."""

from __future__ import annotations

import logging
from typing import Iterable, List

from .models import NO_ANSWER, QuizQuestion

__all__ = [
    "OPEN_ENDED_KEYWORDS",
    "looks_open_ended",
    "validate_question",
    "validate_questions",
]

log = logging.getLogger(__name__)

OPEN_ENDED_KEYWORDS = (
    "explain",
    "describe",
    "discuss",
    "write",
    "list",
    "give examples",
    "in your own words",
    "what do you think",
    "how would you",
    "short answer",
    "long answer",
    "essay",
    "paragraph",
)


def looks_open_ended(question_text: str) -> bool:
    lowered = question_text.lower()
    return any(keyword in lowered for keyword in OPEN_ENDED_KEYWORDS)


def validate_question(question: QuizQuestion) -> QuizQuestion:
    """Return ``question`` with its shape made consistent.

    A question with at most one option becomes open-ended when its prompt
    reads like one; a question with exactly one option always does. Open
    questions carry ``NO_ANSWER``, and a multiple-choice index outside the
    option range falls back to the first option.
    """
    count = len(question.options)
    if count <= 1 and looks_open_ended(question.question):
        return question.as_open_ended()
    if count == 1:
        log.debug("Single-option question treated as open-ended")
        return question.as_open_ended()
    if count == 0:
        if question.correct_answer != NO_ANSWER:
            return question.as_open_ended()
        return question
    if not 0 <= question.correct_answer < count:
        log.debug(
            "Correct answer %d out of range for %d options; using 0",
            question.correct_answer,
            count,
        )
        return QuizQuestion(
            question=question.question,
            options=question.options,
            correct_answer=0,
            explanation=question.explanation,
        )
    return question


def validate_questions(questions: Iterable[QuizQuestion]) -> List[QuizQuestion]:
    """Validate in order, dropping questions whose prompt is blank."""
    return [
        validate_question(question)
        for question in questions
        if question.question.strip()
    ]
