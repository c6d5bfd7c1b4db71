"""``stem-quiz init``: create the workspace and report its layout."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from stem_quiz.core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stem-quiz init",
        description=(
            "Create the stem-quiz workspace with its config, logs and "
            "results directories."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Workspace root (defaults to STEM_QUIZ_DATA_HOME or "
            "~/.stem-quiz-data)."
        ),
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing on success.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(
        list(argv) if argv is not None else None
    )
    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    if args.quiet:
        return 0

    def status(key: str) -> str:
        return "created" if layout.created.get(key) else "exists"

    lines = [f"Workspace ready at {layout.home} ({status('home')})"]
    width = max((len(name) for name in layout.directories), default=0)
    for name, directory in layout.items():
        lines.append(f"  {name.ljust(width)}  {directory} ({status(name)})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
