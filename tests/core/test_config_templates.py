from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from stem_quiz.core import config_templates
from stem_quiz.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)
from stem_quiz.quizzer.config import CONFIG_FILENAME


def test_quizzer_template_round_trip(tmp_path: Path) -> None:
    template = config_templates.get_template("quizzer")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    parsed = tomllib.loads(contents)
    assert set(parsed) == {"display", "validation", "export", "logging"}
    assert parsed["display"]["math_delimiter"] == "$"

    target = template.install_path(tmp_path / "config")
    written = template.write(target)
    assert written == tmp_path / "config" / CONFIG_FILENAME
    assert target.read_text(encoding="utf-8") == contents
    assert sorted(p.name for p in target.parent.iterdir()) == [CONFIG_FILENAME]

    with pytest.raises(ConfigTemplateError, match="already exists"):
        template.write(target)

    assert template.write(target, overwrite=True) == target


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)


def test_missing_resource_raises() -> None:
    template = ConfigTemplate(
        name="ghost",
        package="stem_quiz.quizzer",
        resource="ghost.toml",
        target_name="ghost.toml",
    )

    with pytest.raises(ConfigTemplateError, match="ghost"):
        template.read_text()
