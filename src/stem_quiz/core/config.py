"""TOML reading and template writing for stem-quiz config files."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when a config file cannot be read or does not fit defaults."""


def load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise TomlConfigError(f"Config file is not UTF-8: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc
    except OSError as exc:
        raise TomlConfigError(
            f"Cannot read config file {path}: {exc.strerror or exc}"
        ) from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
) -> None:
    """Overlay ``override`` onto the defaults table ``base`` in place.

    Every unknown key and every value given where a table is expected is
    reported together, one problem per line, so a config file can be fixed
    in a single edit. ``base`` is left untouched when anything is wrong.
    """

    problems: list[str] = []
    _collect_problems(base, override, "", problems)
    if problems:
        raise TomlConfigError("\n".join(problems))
    _overlay(base, override)


def _collect_problems(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    prefix: str,
    problems: list[str],
) -> None:
    for key, value in override.items():
        dotted = f"{prefix}{key}"
        if key not in base:
            problems.append(f"Unknown configuration key '{dotted}'.")
        elif isinstance(base[key], Mapping):
            if isinstance(value, Mapping):
                _collect_problems(base[key], value, f"{dotted}.", problems)
            else:
                problems.append(
                    f"Expected table for '{dotted}', "
                    f"found {type(value).__name__}."
                )


def _overlay(
    base: MutableMapping[str, Any], override: Mapping[str, Any]
) -> None:
    for key, value in override.items():
        if isinstance(base[key], MutableMapping):
            _overlay(base[key], value)
        else:
            base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` without ever leaving a partial file.

    The text goes to a sibling temp file first and is moved into place once
    complete. An existing file is kept unless ``overwrite`` is set.
    """

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.tmp")
    staging.write_text(template, encoding="utf-8")
    try:
        staging.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    os.replace(staging, path)
    return path
