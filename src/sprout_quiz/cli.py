"""Unified CLI entry point for sprout-quiz."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]

DIST_NAME = "sprout-quiz"


@dataclass(frozen=True)
class CommandSpec:
    """A ``sprout-quiz`` subcommand and the function that runs it."""

    name: str
    summary: str
    target: str
    is_tui: bool = False

    def run(self, argv: Sequence[str]) -> int:
        module_name, func_name = self.target.split(":")
        handler = getattr(import_module(module_name), func_name)
        try:
            return _normalize_return(handler(list(argv)))
        except SystemExit as exc:
            return _normalize_system_exit(exc)


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="parse",
        summary="Parse assessment text into structured quiz questions.",
        target="sprout_quiz.commands:parse_main",
    ),
    CommandSpec(
        name="take",
        summary="Take a parsed quiz in the terminal.",
        target="sprout_quiz.commands:take_main",
        is_tui=True,
    ),
    CommandSpec(
        name="init",
        summary="Write a sprout-quiz.toml template into the workspace.",
        target="sprout_quiz.commands:init_main",
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (interactive)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: sprout-quiz <command> [args...]",
            "Run `sprout-quiz help <name>` for details on a command.",
            "",
            format_command_table(),
        ]
    )


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if not spec:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2
    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `sprout-quiz {spec.name} --help` for options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])
    if not args:
        _print(format_usage())
        return 2

    head, *tail = args
    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec is None:
        _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2
    return spec.run(tail)


def _normalize_return(result: object) -> int:
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
