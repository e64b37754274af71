"""Config files shipped with the package and installed by ``sprout-quiz init``."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from .config import TomlConfigError, write_toml_template
from .workspace import WorkspaceLayout

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
]


class ConfigTemplateError(RuntimeError):
    """Raised when a template is unknown, missing, broken or cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A TOML file packaged under ``package`` that belongs in a workspace dir."""

    name: str
    filename: str
    package: str
    workspace_dir: str = "config"

    def read_text(self) -> str:
        try:
            text = (
                resources.files(self.package)
                .joinpath(self.filename)
                .read_text(encoding="utf-8")
            )
        except (FileNotFoundError, ModuleNotFoundError) as exc:
            raise ConfigTemplateError(
                f"Template '{self.name}' is missing from {self.package}."
            ) from exc
        try:
            tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigTemplateError(
                f"Template '{self.name}' is not valid TOML: {exc}"
            ) from exc
        return text

    def destination(self, layout: WorkspaceLayout) -> Path:
        return layout.path_for(self.workspace_dir) / self.filename

    def write(self, path: Path, *, overwrite: bool = False) -> Path:
        try:
            return write_toml_template(
                path, template=self.read_text(), overwrite=overwrite
            )
        except TomlConfigError as exc:
            raise ConfigTemplateError(str(exc)) from exc

    def install(
        self, layout: WorkspaceLayout, *, overwrite: bool = False
    ) -> Path:
        """Copy the template to its place inside ``layout``."""

        return self.write(self.destination(layout), overwrite=overwrite)


_TEMPLATES = {
    "parser": ConfigTemplate(
        name="parser",
        filename="sprout-quiz.toml",
        package="sprout_quiz.parser",
    ),
}


def get_template(name: str) -> ConfigTemplate:
    try:
        return _TEMPLATES[name]
    except KeyError as exc:
        raise ConfigTemplateError(f"Unknown config template '{name}'.") from exc
