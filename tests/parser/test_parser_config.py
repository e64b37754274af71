from __future__ import annotations

from pathlib import Path

import pytest

from sprout_quiz.core.config_templates import get_template
from sprout_quiz.core.workspace import ensure_workspace
from sprout_quiz.parser import config as config_mod
from sprout_quiz.parser.config import (
    ConfigError,
    config_from_mapping,
    default_config,
    load_config,
)


def test_defaults():
    config = default_config()
    assert config.extraction.enabled is False
    assert config.extraction.mode == "fallback"
    assert config.extraction_mode == "off"
    assert config.extraction.max_tokens == 1500
    assert config.extraction.max_retries == 2
    assert config.logging.level == "INFO"
    assert config.source is None


def test_overrides_are_merged():
    config = config_from_mapping(
        {
            "extraction": {"enabled": True, "mode": "FIRST", "timeout_seconds": 5},
            "logging": {"level": "debug"},
        }
    )
    assert config.extraction_mode == "first"
    assert config.extraction.timeout_seconds == 5.0
    assert config.extraction.model == "gpt-4o-mini"
    assert config.logging.level == "DEBUG"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"extraction": {"colour": "red"}}, "extraction.colour"),
        ({"extraction": "yes"}, "Expected table"),
        ({"extraction": {"enabled": "yes"}}, "extraction.enabled"),
        ({"extraction": {"mode": "sometimes"}}, "extraction.mode"),
        ({"extraction": {"temperature": 3}}, "extraction.temperature"),
        ({"extraction": {"max_tokens": 0}}, "extraction.max_tokens"),
        ({"extraction": {"max_tokens": True}}, "extraction.max_tokens"),
        ({"extraction": {"timeout_seconds": -1}}, "extraction.timeout_seconds"),
        ({"extraction": {"max_retries": -1}}, "extraction.max_retries"),
        ({"extraction": {"max_retries": 1.5}}, "extraction.max_retries"),
        ({"logging": {"level": " "}}, "logging.level"),
    ],
)
def test_invalid_values_raise(overrides, message):
    with pytest.raises(ConfigError) as exc:
        config_from_mapping(overrides)
    assert message in str(exc.value)


def test_load_config_without_file_uses_defaults():
    assert load_config() == default_config()


def test_load_config_from_workspace(tmp_path: Path):
    layout = ensure_workspace()
    path = layout.path_for("config") / config_mod.CONFIG_FILENAME
    path.write_text('[extraction]\nenabled = true\n', encoding="utf-8")
    config = load_config(layout=layout)
    assert config.extraction.enabled is True
    assert config.source == path.resolve()


def test_load_config_from_cwd_and_env(tmp_path: Path, monkeypatch):
    (tmp_path / config_mod.CONFIG_FILENAME).write_text(
        '[logging]\nverbose = true\n', encoding="utf-8"
    )
    assert load_config().logging.verbose is True

    other = tmp_path / "other.toml"
    other.write_text('[extraction]\nmodel = "gpt-test"\n', encoding="utf-8")
    monkeypatch.setenv(config_mod.CONFIG_PATH_ENV, str(other))
    config = load_config()
    assert config.extraction.model == "gpt-test"
    assert config.logging.verbose is False


def test_load_config_errors(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.toml")
    broken = tmp_path / "broken.toml"
    broken.write_text("[extraction\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(broken)


def test_packaged_template_matches_defaults(tmp_path: Path):
    target = get_template("parser").write(tmp_path / "sprout-quiz.toml")
    assert load_config(target) == config_from_mapping({}, source=target.resolve())
