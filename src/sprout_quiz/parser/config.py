"""Configuration for the quiz parser and its generative extraction step.

Settings live in ``sprout-quiz.toml``. Every key has a default, so a missing
file is equivalent to an empty one; unknown keys and bad values are rejected
with :class:`ConfigError`.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..core.config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    resolve_config_path,
)
from ..core.workspace import WorkspaceLayout

CONFIG_FILENAME = "sprout-quiz.toml"
CONFIG_PATH_ENV = "SPROUT_QUIZ_CONFIG"

EXTRACTION_MODES = ("fallback", "first")

_DEFAULTS: Dict[str, Any] = {
    "extraction": {
        "enabled": False,
        "mode": "fallback",
        "model": "gpt-4o-mini",
        "temperature": 0.0,
        "max_tokens": 1500,
        "timeout_seconds": 30.0,
        "max_retries": 2,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class ExtractionConfig:
    enabled: bool
    mode: str
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float
    max_retries: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class ParserConfig:
    extraction: ExtractionConfig
    logging: LoggingConfig
    source: Optional[Path] = None

    @property
    def extraction_mode(self) -> str:
        """Mode handed to the parser, ``off`` when extraction is disabled."""

        return self.extraction.mode if self.extraction.enabled else "off"


def default_config() -> ParserConfig:
    return config_from_mapping({})


def config_from_mapping(
    overrides: Mapping[str, Any], *, source: Optional[Path] = None
) -> ParserConfig:
    data = copy.deepcopy(_DEFAULTS)
    try:
        merge_defaults(data, overrides)
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc
    ext = data["extraction"]
    logs = data["logging"]
    return ParserConfig(
        extraction=ExtractionConfig(
            enabled=_require_bool(ext["enabled"], field="extraction.enabled"),
            mode=_require_choice(
                ext["mode"], field="extraction.mode", choices=EXTRACTION_MODES
            ),
            model=_require_string(ext["model"], field="extraction.model"),
            temperature=_require_float_range(
                ext["temperature"],
                field="extraction.temperature",
                min_value=0.0,
                max_value=2.0,
            ),
            max_tokens=_require_positive_int(
                ext["max_tokens"], field="extraction.max_tokens"
            ),
            timeout_seconds=_require_positive_float(
                ext["timeout_seconds"], field="extraction.timeout_seconds"
            ),
            max_retries=_require_non_negative_int(
                ext["max_retries"], field="extraction.max_retries"
            ),
        ),
        logging=LoggingConfig(
            level=_require_string(logs["level"], field="logging.level").upper(),
            verbose=_require_bool(logs["verbose"], field="logging.verbose"),
        ),
        source=source,
    )


def load_config(
    explicit: Optional[str | Path] = None,
    *,
    layout: Optional[WorkspaceLayout] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ParserConfig:
    """Locate and load ``sprout-quiz.toml``, falling back to defaults.

    Lookup order: ``explicit``, ``$SPROUT_QUIZ_CONFIG``, the workspace
    ``config/`` directory, then the current directory.
    """

    candidates = []
    if layout is not None:
        candidates.append(layout.path_for("config") / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    try:
        path = resolve_config_path(
            explicit,
            env_var=CONFIG_PATH_ENV,
            candidates=candidates,
            env=env,
        )
        if path is None:
            return default_config()
        raw = load_toml(path)
    except TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc
    return config_from_mapping(raw, source=path)


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _require_choice(value: Any, *, field: str, choices: tuple) -> str:
    text = _require_string(value, field=field).lower()
    if text not in choices:
        raise ConfigError(
            f"'{field}' must be one of: {', '.join(choices)}."
        )
    return text


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_non_negative_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'{field}' must be a non-negative integer.")
    return value


def _require_positive_float(value: Any, *, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    if value <= 0:
        raise ConfigError(f"'{field}' must be greater than zero.")
    return float(value)


def _require_float_range(
    value: Any, *, field: str, min_value: float, max_value: float
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    number = float(value)
    if not (min_value <= number <= max_value):
        raise ConfigError(
            f"'{field}' must be between {min_value} and {max_value}."
        )
    return number
