"""Rich-powered quiz session over parsed assessment questions.

The loop renders one question at a time, reads commands from an injectable
input provider and returns a :class:`QuizSessionResult`. Only
multiple-choice questions are scored; open-ended ones are shown with their
reference answer and never count toward the score.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..parser.models import QuizQuestion, option_letter

InputProvider = Callable[[], str]
ExitAction = Literal["submitted", "quit", "empty"]

NO_QUIZ_MESSAGE = "No quiz available"


@dataclass(frozen=True)
class QuestionResponse:
    """Outcome for a single question once the session ends."""

    number: int
    question: str
    selected: int | None
    correct_answer: int
    is_open_ended: bool
    is_correct: bool
    explanation: str | None = None

    @property
    def selected_letter(self) -> str:
        return option_letter(self.selected) if self.selected is not None else ""

    @property
    def correct_letter(self) -> str:
        return option_letter(self.correct_answer)


@dataclass(frozen=True)
class QuizSummary:
    """Score over the multiple-choice questions of a session."""

    total_questions: int
    total_multiple_choice: int
    open_ended_questions: int
    answered_questions: int
    correct_answers: int

    @property
    def accuracy(self) -> float:
        if self.total_multiple_choice == 0:
            return 0.0
        return self.correct_answers / self.total_multiple_choice


@dataclass(frozen=True)
class QuizSessionResult:
    responses: list[QuestionResponse]
    summary: QuizSummary
    exit_action: ExitAction


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "prev", "submit", "quit", "select"]
    choice: int | None = None


@dataclass
class QuizSessionState:
    """Mutable cursor and selections for one session."""

    questions: list[QuizQuestion]
    show_explanations: bool = True
    index: int = 0
    selections: dict[int, int] = field(default_factory=dict)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> QuizQuestion:
        return self.questions[self.index]

    def answered_count(self) -> int:
        return len(self.selections)

    def select(self, choice: int) -> bool:
        question = self.current
        if question.is_open_ended or not 0 <= choice < len(question.options):
            return False
        self.selections[self.index] = choice
        return True

    def next(self) -> None:
        if self.index + 1 < self.total_questions:
            self.index += 1

    def previous(self) -> None:
        if self.index > 0:
            self.index -= 1


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw console input; option letters map to zero-based indices."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"s", "submit"}:
        return SessionCommand("submit")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if len(text) == 1 and text.isalpha():
        return SessionCommand("select", ord(text.upper()) - ord("A"))
    return None


def summarize(
    questions: Sequence[QuizQuestion], selections: dict[int, int]
) -> tuple[list[QuestionResponse], QuizSummary]:
    """Score ``selections`` (question index -> option index)."""

    responses: list[QuestionResponse] = []
    for index, question in enumerate(questions):
        selected = None if question.is_open_ended else selections.get(index)
        responses.append(
            QuestionResponse(
                number=index + 1,
                question=question.question,
                selected=selected,
                correct_answer=question.correct_answer,
                is_open_ended=question.is_open_ended,
                is_correct=(
                    selected is not None
                    and selected == question.correct_answer
                ),
                explanation=question.explanation,
            )
        )
    scored = [r for r in responses if not r.is_open_ended]
    summary = QuizSummary(
        total_questions=len(responses),
        total_multiple_choice=len(scored),
        open_ended_questions=len(responses) - len(scored),
        answered_questions=sum(1 for r in scored if r.selected is not None),
        correct_answers=sum(1 for r in scored if r.is_correct),
    )
    return responses, summary


def run_quiz_session(
    questions: Sequence[QuizQuestion],
    console: Console,
    input_provider: InputProvider,
    *,
    show_explanations: bool = True,
) -> QuizSessionResult:
    """Run an interactive quiz session using Rich-rendered prompts."""

    state = QuizSessionState(list(questions), show_explanations=show_explanations)

    if not state.questions:
        console.print(
            Panel(NO_QUIZ_MESSAGE, title="Quiz", border_style="yellow")
        )
        responses, summary = summarize([], {})
        return QuizSessionResult(responses, summary, "empty")

    exit_action: ExitAction = "quit"
    while True:
        _render_question(console, state)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            break
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        outcome = _apply_command(command, state, console)
        if outcome:
            exit_action = outcome
            break

    responses, summary = summarize(state.questions, state.selections)
    result = QuizSessionResult(responses, summary, exit_action)
    if exit_action == "submitted":
        _render_summary(console, result, show_explanations=show_explanations)
    return result


def _apply_command(
    command: SessionCommand,
    state: QuizSessionState,
    console: Console,
) -> ExitAction | None:
    if command.type == "select" and command.choice is not None:
        letter = option_letter(command.choice)
        if state.current.is_open_ended:
            console.print(
                "[yellow]Open-ended question: nothing to select.[/yellow]"
            )
        elif state.select(command.choice):
            console.print(f"Selected [bold]{letter}[/].")
        else:
            console.print(
                f"[red]'{letter}' is not a valid choice for this question.[/red]"
            )
        return None
    if command.type == "next":
        state.next()
        return None
    if command.type == "prev":
        state.previous()
        return None
    if command.type == "quit":
        console.print("\n[bold yellow]Ending session without submission.[/]")
        return "quit"
    if command.type == "submit":
        return "submitted"
    return None


def _render_question(console: Console, state: QuizSessionState) -> None:
    question = state.current
    header = Text.assemble(
        (f"Question {state.index + 1}", "bold cyan"),
        (f" / {state.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.question, style="bold"))

    if question.is_open_ended:
        if state.show_explanations and question.explanation:
            console.print(
                Panel(
                    question.explanation,
                    title="Reference answer",
                    border_style="blue",
                )
            )
        else:
            console.print(Text("Open-ended question.", style="dim"))
    else:
        table = Table(show_header=False, box=box.SIMPLE, expand=True)
        table.add_column("Key", justify="center", style="cyan")
        table.add_column("Choice")
        selected = state.selections.get(state.index)
        for index, option in enumerate(question.options):
            marker = "•" if index == selected else " "
            row = Text(marker + " ")
            option_text = Text(option)
            if index == selected:
                option_text.stylize("bold green")
            row += option_text
            table.add_row(option_letter(index), row)
        console.print(table)

    console.print(
        Text(
            f"Answered {state.answered_count()}/{state.total_questions} | "
            "Commands: option letter, n (next), p (prev), submit, quit",
            style="dim",
        )
    )


def _render_summary(
    console: Console,
    result: QuizSessionResult,
    *,
    show_explanations: bool,
) -> None:
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))

    summary = result.summary
    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Scored questions", str(summary.total_multiple_choice))
    overview.add_row("Answered", str(summary.answered_questions))
    overview.add_row("Correct", str(summary.correct_answers))
    overview.add_row("Accuracy", f"{summary.accuracy * 100:.1f}%")
    if summary.open_ended_questions:
        overview.add_row("Open-ended (not scored)", str(summary.open_ended_questions))
    console.print(overview)

    table = Table(title="Responses", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")
    for response in result.responses:
        if response.is_open_ended:
            table.add_row(
                str(response.number), response.question, "—", "—", "open"
            )
            continue
        table.add_row(
            str(response.number),
            response.question,
            response.selected_letter or "—",
            response.correct_letter,
            "✅" if response.is_correct else "❌",
        )
    console.print(table)

    if not show_explanations:
        return
    for response in result.responses:
        if not response.explanation or response.is_open_ended:
            continue
        console.print(
            Panel(
                response.explanation,
                title=f"Explanation: question {response.number}",
                border_style="green" if response.is_correct else "red",
            )
        )
