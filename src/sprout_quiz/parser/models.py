"""Structured quiz question produced by the assessment parser."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Sequence

__all__ = [
    "NO_ANSWER",
    "QuestionFormatError",
    "QuizQuestion",
    "option_letter",
]

NO_ANSWER = -1


class QuestionFormatError(ValueError):
    """Raised when a mapping does not describe a valid quiz question."""


def option_letter(index: int) -> str:
    """Return the display letter for an option index (0 -> ``A``)."""
    if index < 0:
        return ""
    return chr(ord("A") + index)


@dataclass(frozen=True)
class QuizQuestion:
    """One multiple-choice or open-ended question.

    ``options`` empty means open-ended, in which case ``correct_answer`` is
    ``NO_ANSWER`` and ``explanation`` carries the reference answer.
    """

    question: str
    options: tuple[str, ...] = ()
    correct_answer: int = NO_ANSWER
    explanation: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))

    @property
    def is_open_ended(self) -> bool:
        return not self.options

    @property
    def is_multiple_choice(self) -> bool:
        return len(self.options) >= 2

    @property
    def correct_option(self) -> str | None:
        if 0 <= self.correct_answer < len(self.options):
            return self.options[self.correct_answer]
        return None

    def as_open_ended(self) -> "QuizQuestion":
        return replace(self, options=(), correct_answer=NO_ANSWER)

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "QuizQuestion":
        """Build a question from the ``{question, options, correctAnswer,
        explanation}`` wire shape.

        ``question``, ``options`` and ``correctAnswer`` are required;
        ``explanation`` may be missing or null.
        """
        if not isinstance(data, Mapping):
            raise QuestionFormatError("question entry must be an object")
        text = data.get("question")
        if not isinstance(text, str) or not text.strip():
            raise QuestionFormatError("'question' must be a non-empty string")
        options = _require_options(data.get("options"))
        answer = data.get("correctAnswer")
        # bool is an int subclass; JSON true/false is not an index.
        if not isinstance(answer, int) or isinstance(answer, bool):
            raise QuestionFormatError("'correctAnswer' must be an integer")
        explanation = data.get("explanation")
        if explanation is not None and not isinstance(explanation, str):
            raise QuestionFormatError("'explanation' must be a string")
        return cls(
            question=text,
            options=options,
            correct_answer=answer,
            explanation=explanation,
        )


def _require_options(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise QuestionFormatError("'options' must be a list of strings")
    if not all(isinstance(item, str) for item in raw):
        raise QuestionFormatError("'options' must be a list of strings")
    return tuple(raw)
