"""Input helpers for reading assessment text."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

__all__ = ["read_assessment_text"]

STDIN_MARKER = "-"


def read_assessment_text(
    source: str | Path | None, *, stdin: TextIO | None = None
) -> str:
    """Read assessment text from a file path, or stdin for ``-``/``None``.

    Undecodable bytes are replaced rather than rejected, for files and for
    byte-backed stdin alike; the parser treats whatever survives as
    ordinary text.
    """
    if source is None or str(source) == STDIN_MARKER:
        stream = stdin if stdin is not None else sys.stdin
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            return stream.read()
        return buffer.read().decode("utf-8", errors="replace")
    with Path(source).open("r", encoding="utf-8", errors="replace") as fh:
        return fh.read()
