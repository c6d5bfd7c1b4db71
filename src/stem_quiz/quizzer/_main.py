"""CLI for validating, previewing and taking a quiz from a JSON question set."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from stem_quiz.core import config_templates
from stem_quiz.core import workspace as workspace_mod
from stem_quiz.core.config_templates import ConfigTemplateError
from stem_quiz.core.logging import configure_logger, log_event
from stem_quiz.core.workspace import WorkspaceError

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    QuizzerConfigError,
    load_config,
)
from .export import write_results
from .models import Question
from .schema import (
    MalformedInputError,
    SchemaViolationError,
    read_question_set,
)
from .session import InputProvider, run_quiz_session
from .stats import aggregate
from .view.panels import render_stats


def build_arg_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("path", type=Path, help="Question set JSON file.")
    common.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config (defaults to the workspace config dir).",
    )
    common.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config, logs and results.",
    )
    common.add_argument(
        "--allow-duplicate-ids",
        action="store_const",
        const=True,
        default=None,
        help="Accept question sets where two questions share an id.",
    )
    common.add_argument("--log-level", help="Log level for the run log file.")
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )

    parser = argparse.ArgumentParser(
        prog="stem-quiz quiz",
        description="Validate, preview and take timed multiple-choice quizzes.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser(
        "validate",
        parents=[common],
        help="Check a question set and list every problem found.",
    )
    sub.add_parser(
        "preview",
        parents=[common],
        help="Show topic and concept statistics for a question set.",
    )
    sp_start = sub.add_parser(
        "start",
        parents=[common],
        help="Take the quiz and export a CSV transcript.",
    )
    sp_start.add_argument(
        "--output",
        type=Path,
        help="CSV destination (file or directory); overrides the config.",
    )
    sp_start.add_argument(
        "--no-export",
        action="store_true",
        help="Do not write the CSV transcript.",
    )

    sp_config = sub.add_parser("config", help="Manage the config file.")
    config_sub = sp_config.add_subparsers(dest="action", required=True)
    sp_init = config_sub.add_parser(
        "init", help=f"Write the default {CONFIG_FILENAME} template."
    )
    sp_init.add_argument(
        "--path",
        type=Path,
        help="Destination (defaults to the workspace config directory).",
    )
    sp_init.add_argument("--workspace", type=Path)
    sp_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.command == "config":
        return _cmd_config_init(args)

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(
                log_level=args.log_level,
                allow_duplicate_ids=args.allow_duplicate_ids,
            ),
            workspace_path=args.workspace,
        )
    except QuizzerConfigError as exc:
        parser.error(str(exc))

    logger, _ = configure_logger(
        "stem_quiz.quizzer",
        log_dir=load_result.layout.path_for("logs"),
        level=load_result.config.log_level,
        verbose=args.verbose,
    )
    log_event(
        logger,
        "quiz CLI invoked",
        event="cli_invoked",
        level=logging.DEBUG,
        command=args.command,
        path=args.path,
    )

    console = console or Console()
    questions = _load_questions(args.path, load_result, logger)
    if questions is None:
        return 1

    if args.command == "validate":
        console.print(
            f"[green]Question set is valid:[/] {len(questions)} question(s)."
        )
        return 0

    render_stats(
        console,
        aggregate(questions),
        chart_width=load_result.config.chart_width,
    )
    if args.command == "preview":
        return 0
    return _cmd_start(
        args, questions, load_result, console, input_provider, logger
    )


def _load_questions(
    path: Path, load_result: LoadResult, logger: logging.Logger
) -> Optional[tuple[Question, ...]]:
    try:
        return read_question_set(
            path,
            allow_duplicate_ids=load_result.config.allow_duplicate_ids,
            logger=logger,
        )
    except OSError as exc:
        sys.stderr.write(f"Error: cannot read {path}: {exc.strerror or exc}\n")
    except MalformedInputError as exc:
        sys.stderr.write(f"Error: {exc}\n")
    except SchemaViolationError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        for violation in exc.violations:
            sys.stderr.write(f"  - {violation}\n")
    return None


def _cmd_start(
    args: argparse.Namespace,
    questions: tuple[Question, ...],
    load_result: LoadResult,
    console: Console,
    input_provider: Optional[InputProvider],
    logger: logging.Logger,
) -> int:
    config = load_result.config
    provider = input_provider or (lambda: console.input("[bold]Answer:[/] "))
    result = run_quiz_session(
        questions,
        console,
        provider,
        delimiter=config.math_delimiter,
        chart_width=config.chart_width,
        chart_height=config.chart_height,
        logger=logger,
    )
    if result.transcript is None or args.no_export:
        return 0

    target = args.output if args.output is not None else config.export_path
    written = write_results(target, result.transcript)
    log_event(
        logger,
        "Results exported",
        event="results_exported",
        path=written,
        rows=len(result.transcript),
    )
    console.print(f"Results written to {escape(str(written))}")
    return 0


def _cmd_config_init(args: argparse.Namespace) -> int:
    template = config_templates.get_template("quizzer")
    try:
        target = _resolve_config_target(args, template)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _resolve_config_target(
    args: argparse.Namespace, template: config_templates.ConfigTemplate
) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return template.install_path(layout.path_for("config"))


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
