"""OpenAI client bootstrap for the generative extraction step."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

try:  # Allow module import even when the OpenAI dependency is absent.
    from openai import OpenAI  # type: ignore
except ImportError:  # pragma: no cover - optional dependency guard
    OpenAI = None  # type: ignore

__all__ = ["API_KEY_ENV", "load_client"]

API_KEY_ENV = "OPENAI_API_KEY"


def load_client(
    *, timeout: float | None = None, max_retries: int | None = None
) -> Any:
    """Build the chat client used by :class:`OpenAIExtractor`.

    ``.env`` is consulted before the environment lookup. ``timeout`` and
    ``max_retries`` are forwarded only when given, so the client keeps its
    own defaults otherwise. Missing credentials raise ``RuntimeError``,
    which the extractor treats as "no generative capability".
    """
    if OpenAI is None:
        raise RuntimeError(
            "Generative extraction needs the 'openai' package; install it "
            "or leave extraction disabled."
        )
    api_key = _api_key()
    if api_key is None:
        raise RuntimeError(
            f"{API_KEY_ENV} is not set; export it or add it to .env to "
            "enable extraction."
        )
    options: Dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        options["timeout"] = timeout
    if max_retries is not None:
        options["max_retries"] = max_retries
    return OpenAI(**options)


def _api_key() -> Optional[str]:
    load_dotenv()
    return (os.getenv(API_KEY_ENV) or "").strip() or None
