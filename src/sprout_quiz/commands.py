"""Implementations of the ``sprout-quiz`` subcommands."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from .core import (
    ConfigTemplateError,
    WorkspaceError,
    WorkspaceLayout,
    configure_logger,
    ensure_workspace,
    get_template,
    read_assessment_text,
)
from .parser import (
    ConfigError,
    ParserConfig,
    QuizQuestion,
    load_config,
    option_letter,
    parser_from_config,
)
from .parser.config import CONFIG_FILENAME, EXTRACTION_MODES
from .session import NO_QUIZ_MESSAGE, run_quiz_session

LOGGER_NAME = "sprout_quiz"

log = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source",
        nargs="?",
        default="-",
        help="Assessment text file, or '-' for stdin",
    )
    parser.add_argument("--config", help="Path to sprout-quiz.toml")
    parser.add_argument(
        "--use-ai",
        action="store_true",
        help="Enable generative extraction regardless of config",
    )
    parser.add_argument(
        "--mode",
        choices=EXTRACTION_MODES,
        help="Where generative extraction runs in the strategy chain",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log to the console as well"
    )


def _error(message: str) -> None:
    sys.stderr.write(message + "\n")


def _bootstrap(
    args: argparse.Namespace,
) -> Tuple[ParserConfig, WorkspaceLayout]:
    layout = ensure_workspace()
    config = load_config(getattr(args, "config", None), layout=layout)
    extraction = config.extraction
    if getattr(args, "use_ai", False):
        extraction = replace(extraction, enabled=True)
    if getattr(args, "mode", None):
        extraction = replace(extraction, mode=args.mode)
    config = replace(config, extraction=extraction)
    _, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=bool(getattr(args, "verbose", False)) or config.logging.verbose,
    )
    log.debug(
        "Configured sprout-quiz",
        extra={
            "config_source": config.source,
            "extraction_mode": config.extraction_mode,
            "log_path": log_path,
        },
    )
    return config, layout


def _load_questions(
    args: argparse.Namespace,
) -> Tuple[Optional[List[QuizQuestion]], int]:
    try:
        config, _ = _bootstrap(args)
    except (ConfigError, WorkspaceError) as exc:
        _error(f"Error: {exc}")
        return None, 2
    try:
        text = read_assessment_text(args.source)
    except OSError as exc:
        _error(f"Error: cannot read {args.source}: {exc}")
        return None, 2
    questions = parser_from_config(config).parse(text)
    log.info(
        "Parsed assessment",
        extra={"source": args.source, "questions": len(questions)},
    )
    return questions, 0


def _render_table(console: Console, questions: Sequence[QuizQuestion]) -> None:
    table = Table(title="Parsed questions", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Options", overflow="fold")
    table.add_column("Answer", justify="center")
    table.add_column("Explanation", overflow="fold")
    for number, question in enumerate(questions, start=1):
        options = "\n".join(
            f"{option_letter(i)}) {text}"
            for i, text in enumerate(question.options)
        )
        table.add_row(
            str(number),
            question.question,
            options or "(open-ended)",
            option_letter(question.correct_answer) or "—",
            question.explanation or "",
        )
    console.print(table)


def build_parse_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprout-quiz parse",
        description="Parse assessment text into structured quiz questions.",
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--format",
        choices=("json", "table"),
        default="json",
        help="Output format",
    )
    return parser


def parse_main(argv: Sequence[str]) -> int:
    args = build_parse_parser().parse_args(list(argv))
    questions, code = _load_questions(args)
    if questions is None:
        return code
    if not questions:
        _error(NO_QUIZ_MESSAGE)
        return 1
    if args.format == "table":
        _render_table(Console(), questions)
    else:
        payload = [question.to_dict() for question in questions]
        sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False))
        sys.stdout.write("\n")
    return 0


def build_take_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprout-quiz take",
        description="Take a parsed quiz interactively in the terminal.",
    )
    _add_common_arguments(parser)
    parser.add_argument("--explain", dest="explain", action="store_true")
    parser.add_argument("--no-explain", dest="explain", action="store_false")
    parser.set_defaults(explain=True)
    return parser


def take_main(argv: Sequence[str], *, console: Optional[Console] = None) -> int:
    args = build_take_parser().parse_args(list(argv))
    if args.source == "-":
        _error("Error: 'take' needs a file; stdin is used for answers.")
        return 2
    questions, code = _load_questions(args)
    if questions is None:
        return code
    console = console or Console()
    result = run_quiz_session(
        questions,
        console,
        lambda: console.input("[bold]> [/]"),
        show_explanations=args.explain,
    )
    return 1 if result.exit_action == "empty" else 0


def build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprout-quiz init",
        description=f"Write a {CONFIG_FILENAME} template into the workspace.",
    )
    parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing config"
    )
    return parser


def init_main(argv: Sequence[str]) -> int:
    args = build_init_parser().parse_args(list(argv))
    try:
        layout = ensure_workspace()
        written = get_template("parser").install(layout, overwrite=args.force)
    except (ConfigTemplateError, WorkspaceError) as exc:
        _error(f"Error: {exc}")
        return 2
    sys.stdout.write(f"Wrote {written}\n")
    return 0
