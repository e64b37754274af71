from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import ChatClientStub  # noqa: E402
from sprout_quiz.core import workspace as workspace_mod  # noqa: E402
from sprout_quiz.parser import config as config_mod  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Keep config lookups and log files inside the per-test tmp dir."""

    home = tmp_path / "sprout-home"
    monkeypatch.setenv(workspace_mod.WORKSPACE_ENV, str(home))
    monkeypatch.delenv(config_mod.CONFIG_PATH_ENV, raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    yield home


@pytest.fixture
def chat_client() -> ChatClientStub:
    """Chat-completions client stub that replays queued responses."""

    return ChatClientStub()
