"""Configuration loader for quiz sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from stem_quiz.core import config as core_config
from stem_quiz.core import workspace as workspace_mod

from .export import DEFAULT_FILENAME
from .segmenter import DEFAULT_DELIMITER

CONFIG_FILENAME = "stem_quiz.toml"
CONFIG_ENV = "STEM_QUIZ_CONFIG"
ENV_PREFIX = "STEM_QUIZ_"

_DEFAULT_LOG_LEVEL = "INFO"


class QuizzerConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizzerConfig:
    """Fully resolved settings for a quiz run."""

    math_delimiter: str
    chart_width: int
    chart_height: int
    allow_duplicate_ids: bool
    output_dir: Path
    export_filename: str
    log_level: str

    @property
    def export_path(self) -> Path:
        return self.output_dir / self.export_filename


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values that win over env and file settings."""

    log_level: Optional[str] = None
    allow_duplicate_ids: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizzerConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load settings with precedence CLI > env > TOML > defaults.

    A missing default config file is fine; a missing file that was asked for
    explicitly (``config_path`` or ``$STEM_QUIZ_CONFIG``) is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizzerConfigError(str(exc)) from exc

    explicit = config_path is not None or bool(
        (env_map.get(CONFIG_ENV) or "").strip()
    )
    requested = _resolve_config_path(
        config_path, env_map, layout.path_for("config") / CONFIG_FILENAME
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizzerConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit:
        raise QuizzerConfigError(f"Config file not found: {requested}")

    display = table["display"]
    delimiter = _pick_first(
        _env(env_map, "MATH_DELIMITER"), display["math_delimiter"]
    )
    output_dir = _pick_first(
        _env_path(env_map, "OUTPUT_DIR"),
        _optional_path(table["export"]["output_dir"], "export.output_dir"),
    )
    config = QuizzerConfig(
        math_delimiter=_delimiter(delimiter),
        chart_width=_positive_int(
            display["chart_width"], "display.chart_width"
        ),
        chart_height=_positive_int(
            display["chart_height"], "display.chart_height"
        ),
        allow_duplicate_ids=_bool(
            _pick_first(
                overrides.allow_duplicate_ids,
                table["validation"]["allow_duplicate_ids"],
            ),
            "validation.allow_duplicate_ids",
        ),
        output_dir=_resolve_output_dir(output_dir, layout),
        export_filename=_filename(table["export"]["filename"]),
        log_level=_log_level(
            _pick_first(
                overrides.log_level,
                _env(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            )
        ),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "display": {
            "math_delimiter": DEFAULT_DELIMITER,
            "chart_width": 40,
            "chart_height": 10,
        },
        "validation": {"allow_duplicate_ids": False},
        "export": {"output_dir": "", "filename": DEFAULT_FILENAME},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if candidate:
        return Path(candidate).expanduser()
    return default_path


def _resolve_output_dir(
    candidate: object, layout: workspace_mod.WorkspaceLayout
) -> Path:
    if candidate is None:
        return layout.path_for("results")
    path = Path(candidate).expanduser()
    if not path.is_absolute():
        return (layout.home / path).resolve()
    return path.resolve()


def _delimiter(value: object) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise QuizzerConfigError(
            "display.math_delimiter must be a single character."
        )
    return value


def _positive_int(value: object, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise QuizzerConfigError(f"{key} must be a positive integer.")
    return value


def _bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise QuizzerConfigError(f"{key} must be true or false.")
    return value


def _optional_path(value: object, key: str) -> Optional[Path]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise QuizzerConfigError(f"{key} must be a string when provided.")
    stripped = value.strip()
    return Path(stripped) if stripped else None


def _filename(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizzerConfigError("export.filename must be a non-empty string.")
    name = value.strip()
    if Path(name).name != name:
        raise QuizzerConfigError(
            "export.filename must be a bare file name, not a path."
        )
    return name


def _log_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizzerConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _env(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw.strip() or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env(env_map, key)
    return Path(raw).expanduser() if raw is not None else None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
