"""Per-user data directory holding sprout-quiz config and logs."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


WORKSPACE_ENV = "SPROUT_QUIZ_HOME"
DEFAULT_WORKSPACE = Path.home() / ".sprout-quiz"

_SUBDIRS = {
    "config": "config",
    "logs": "logs",
}


class WorkspaceError(RuntimeError):
    """Raised when the workspace directories cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace home and its named subdirectories."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise WorkspaceError(f"Unknown workspace directory '{key}'.") from exc


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve the workspace and create its directories when ``create``.

    The default location falls back to the temp directory when the home
    directory is not writable. An explicit ``path`` or ``SPROUT_QUIZ_HOME``
    never falls back.
    """

    env_map = os.environ if env is None else env
    base, explicit = _resolve_home(env_map, path)
    candidates = [base]
    if create and not explicit:
        candidates.append(Path(tempfile.gettempdir()) / "sprout-quiz-data")

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            return _layout_for(candidate, create=create)
        except PermissionError as exc:
            last_error = exc
    raise WorkspaceError(
        f"Unable to prepare workspace at {base}"
    ) from last_error


def _resolve_home(
    env: Mapping[str, str], override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _layout_for(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )
    directories = {key: base / name for key, name in _SUBDIRS.items()}
    if create:
        for directory in (base, *directories.values()):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except FileExistsError as exc:
                raise WorkspaceError(
                    f"Expected directory but found a file: {directory}"
                ) from exc
            try:
                directory.chmod(0o700)
            except (PermissionError, NotImplementedError):
                pass
    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(directories),
    )
