from __future__ import annotations

from rich.console import Console

from sprout_quiz.parser.models import QuizQuestion
from sprout_quiz.session import (
    NO_QUIZ_MESSAGE,
    QuizSessionResult,
    QuizSessionState,
    SessionCommand,
    parse_session_command,
    run_quiz_session,
    summarize,
)


QUESTIONS = [
    QuizQuestion(
        "What is the capital of France?",
        ("London", "Paris"),
        1,
        "Paris is the capital city of France.",
    ),
    QuizQuestion(
        "Describe the water cycle.",
        (),
        -1,
        "Evaporation, condensation, precipitation.",
    ),
    QuizQuestion("Select the even number.", ("3", "4", "5"), 1),
]


def make_provider(commands: list[str]):
    iterator = iter(commands)

    def _provider() -> str:
        return next(iterator)

    return _provider


def test_parse_session_command_variants() -> None:
    assert parse_session_command("b") == SessionCommand("select", 1)
    assert parse_session_command("  Next ") == SessionCommand("next")
    assert parse_session_command("p") == SessionCommand("prev")
    assert parse_session_command("submit") == SessionCommand("submit")
    assert parse_session_command("quit") == SessionCommand("quit")
    assert parse_session_command(None) is None
    assert parse_session_command("") is None
    assert parse_session_command("?") is None
    assert parse_session_command("ab") is None


def test_state_rejects_selection_on_open_ended_and_out_of_range() -> None:
    state = QuizSessionState(list(QUESTIONS))
    assert not state.select(5)
    assert state.select(0)
    state.next()
    assert not state.select(0)
    state.next()
    state.next()
    assert state.index == 2
    state.previous()
    assert state.index == 1
    assert state.selections == {0: 0}


def test_summarize_scores_multiple_choice_only() -> None:
    responses, summary = summarize(QUESTIONS, {0: 1, 1: 0, 2: 0})
    assert summary.total_questions == 3
    assert summary.total_multiple_choice == 2
    assert summary.open_ended_questions == 1
    assert summary.answered_questions == 2
    assert summary.correct_answers == 1
    assert summary.accuracy == 0.5
    assert responses[1].selected is None
    assert not responses[1].is_correct
    assert responses[0].selected_letter == "B"
    assert responses[2].correct_letter == "B"


def test_run_quiz_session_submit_flow() -> None:
    console = Console(record=True, width=100, force_terminal=True)
    provider = make_provider(["b", "n", "a", "n", "?", "a", "submit"])

    result = run_quiz_session(QUESTIONS, console, provider)

    assert isinstance(result, QuizSessionResult)
    assert result.exit_action == "submitted"
    assert result.summary.correct_answers == 1
    assert result.summary.answered_questions == 2
    rendered = console.export_text()
    assert "Reference answer" in rendered
    assert "Open-ended question: nothing to select." in rendered
    assert "Unrecognized command" in rendered
    assert "Quiz Summary" in rendered
    assert "Paris is the capital city of France." in rendered


def test_run_quiz_session_quit_and_interrupt() -> None:
    console = Console(record=True, width=80)
    result = run_quiz_session(QUESTIONS, console, make_provider(["quit"]))
    assert result.exit_action == "quit"
    assert "Quiz Summary" not in console.export_text()

    result = run_quiz_session(QUESTIONS, console, make_provider([]))
    assert result.exit_action == "quit"
    assert "Session interrupted." in console.export_text()


def test_run_quiz_session_empty() -> None:
    console = Console(record=True, width=80)
    result = run_quiz_session([], console, make_provider([]))
    assert result.exit_action == "empty"
    assert result.summary.total_questions == 0
    assert NO_QUIZ_MESSAGE in console.export_text()


def test_hidden_explanations() -> None:
    console = Console(record=True, width=100)
    run_quiz_session(
        QUESTIONS,
        console,
        make_provider(["n", "submit"]),
        show_explanations=False,
    )
    rendered = console.export_text()
    assert "Reference answer" not in rendered
    assert "Paris is the capital city of France." not in rendered
