"""Commented config templates shipped inside the stem-quiz package."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from .config import TomlConfigError, write_toml_template

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
]


class ConfigTemplateError(RuntimeError):
    """Raised when a template is unknown, missing, or cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A packaged TOML resource and the file name it is installed under."""

    name: str
    package: str
    resource: str
    target_name: str

    def read_text(self) -> str:
        try:
            return (
                resources.files(self.package)
                .joinpath(self.resource)
                .read_text(encoding="utf-8")
            )
        except (FileNotFoundError, ModuleNotFoundError) as exc:
            raise ConfigTemplateError(
                f"Template '{self.name}' resource not found."
            ) from exc

    def install_path(self, config_dir: Path) -> Path:
        return config_dir / self.target_name

    def write(self, path: Path, *, overwrite: bool = False) -> Path:
        try:
            return write_toml_template(
                path, template=self.read_text(), overwrite=overwrite
            )
        except TomlConfigError as exc:
            raise ConfigTemplateError(str(exc)) from exc


_TEMPLATES: dict[str, ConfigTemplate] = {
    "quizzer": ConfigTemplate(
        name="quizzer",
        package="stem_quiz.quizzer",
        resource="template.toml",
        target_name="stem_quiz.toml",
    ),
}


def get_template(name: str) -> ConfigTemplate:
    try:
        return _TEMPLATES[name]
    except KeyError as exc:
        raise ConfigTemplateError(f"Unknown config template '{name}'.") from exc
