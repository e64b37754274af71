from .quiz import (
    NO_QUIZ_MESSAGE,
    QuestionResponse,
    QuizSessionResult,
    QuizSessionState,
    QuizSummary,
    SessionCommand,
    parse_session_command,
    run_quiz_session,
    summarize,
)

__all__ = [
    "NO_QUIZ_MESSAGE",
    "QuestionResponse",
    "QuizSessionResult",
    "QuizSessionState",
    "QuizSummary",
    "SessionCommand",
    "parse_session_command",
    "run_quiz_session",
    "summarize",
]
