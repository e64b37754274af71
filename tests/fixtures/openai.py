"""Chat-completion client stand-ins injected into the extractor.

Production code only touches ``client.chat.completions.create`` and reads
``resp.choices[0].message.content``; the stub mirrors that surface so tests
run offline while recording every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional


@dataclass
class Choice:
    """Represents a single completion choice returned by the stub."""

    content: Optional[str]

    @property
    def message(self) -> SimpleNamespace:
        return SimpleNamespace(content=self.content)


class ChatClientStub:
    """Lightweight stand-in for an OpenAI chat completion client."""

    def __init__(
        self, *, side_effect: Optional[Callable[[Dict[str, Any]], Any]] = None
    ) -> None:
        self.side_effect = side_effect
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Optional[str]] = []
        self.chat = SimpleNamespace(
            completions=SimpleNamespace(create=self._create_completion)
        )

    def queue_response(self, content: Optional[str]) -> None:
        """Append a response returned by the next call."""

        self.responses.append(content)

    def _create_completion(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.side_effect:
            result = self.side_effect(kwargs)
            if result is not None:
                return result
        content = self.responses.pop(0) if self.responses else ""
        return SimpleNamespace(choices=[Choice(content)])

    @property
    def last_user_prompt(self) -> str:
        if not self.calls:
            return ""
        messages = self.calls[-1].get("messages", [])
        return "\n".join(
            m.get("content", "") for m in messages if m.get("role") == "user"
        )


class RecordingExtractor:
    """Extractor returning a fixed result and counting invocations."""

    def __init__(self, result: Any = None, *, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: List[str] = []

    def extract(self, text: str) -> Any:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result
