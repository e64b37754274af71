"""Assessment text parsing: strategies, validation and extraction."""

from .config import ConfigError, ParserConfig, default_config, load_config
from .extractor import NullExtractor, OpenAIExtractor, TextExtractor
from .models import NO_ANSWER, QuestionFormatError, QuizQuestion, option_letter
from .quiz_parser import (
    QuizTextParser,
    parse_assessment,
    parser_from_config,
)
from .strategies import parse_json, parse_markdown, parse_plain_text
from .validation import OPEN_ENDED_KEYWORDS, validate_question, validate_questions

__all__ = [
    "ConfigError",
    "ParserConfig",
    "default_config",
    "load_config",
    "NullExtractor",
    "OpenAIExtractor",
    "TextExtractor",
    "NO_ANSWER",
    "QuestionFormatError",
    "QuizQuestion",
    "option_letter",
    "QuizTextParser",
    "parse_assessment",
    "parser_from_config",
    "parse_json",
    "parse_markdown",
    "parse_plain_text",
    "OPEN_ENDED_KEYWORDS",
    "validate_question",
    "validate_questions",
]
