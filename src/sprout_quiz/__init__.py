"""Parse instructor-authored assessment text into structured quiz questions."""

from .parser import (
    NO_ANSWER,
    QuizQuestion,
    QuizTextParser,
    TextExtractor,
    parse_assessment,
)

__all__ = [
    "NO_ANSWER",
    "QuizQuestion",
    "QuizTextParser",
    "TextExtractor",
    "parse_assessment",
]
