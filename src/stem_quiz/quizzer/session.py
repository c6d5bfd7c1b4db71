"""Rich-powered console session driving a :class:`QuizEngine`.

The loop renders one question at a time, reads a line from an input
provider, and forwards only well-formed option numbers to the engine. Bad
input is answered with a hint and a re-prompt, so every
:class:`InvalidTransitionError` that escapes from here is a real bug.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich.console import Console

from ..core.logging import log_event
from .engine import Clock, QuizEngine
from .models import AnswerRecord, Question
from .segmenter import DEFAULT_DELIMITER
from .stats import TranscriptSummary, summarize_transcript
from .view.panels import render_question, render_summary

InputProvider = Callable[[], str]
ExitAction = Literal["completed", "quit", "empty"]

QUIT_COMMANDS = frozenset({"q", "quit", "exit"})


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["answer", "quit"]
    index: Optional[int] = None


@dataclass(frozen=True)
class QuizSessionResult:
    """Return value from :func:`run_quiz_session`.

    ``transcript`` is ``None`` when the session was abandoned.
    """

    transcript: Optional[tuple[AnswerRecord, ...]]
    summary: Optional[TranscriptSummary]
    exit_action: ExitAction


def parse_session_command(
    raw: Optional[str], option_count: int
) -> Optional[SessionCommand]:
    """Turn a 1-based option number or quit word into a command."""

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text in QUIT_COMMANDS:
        return SessionCommand("quit")
    if not text.isdigit():
        return None
    number = int(text)
    if not 1 <= number <= option_count:
        return None
    return SessionCommand("answer", number - 1)


def run_quiz_session(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
    *,
    clock: Clock = time.monotonic,
    delimiter: str = DEFAULT_DELIMITER,
    chart_width: int = 40,
    chart_height: int = 10,
    logger: Optional[logging.Logger] = None,
) -> QuizSessionResult:
    """Run an interactive quiz over ``questions`` and return its outcome."""

    engine = QuizEngine(questions, clock=clock, logger=logger)
    engine.start()

    if engine.is_complete:
        console.print("[yellow]Question set is empty; nothing to answer.[/]")
        transcript = engine.transcript()
        return QuizSessionResult(
            transcript, summarize_transcript(transcript), "empty"
        )

    total = len(engine.questions)
    while not engine.is_complete:
        question = engine.current_question
        number = engine.current_index + 1
        render_question(
            console,
            question,
            number=number,
            total=total,
            delimiter=delimiter,
            chart_width=chart_width,
            chart_height=chart_height,
        )
        command = _read_command(console, input_provider, len(question.options))
        if command is None or command.type == "quit":
            console.print("\n[bold yellow]Quiz abandoned; no results kept.[/]")
            engine.abandon()
            return QuizSessionResult(None, None, "quit")
        engine.submit_answer(command.index)

    transcript = engine.transcript()
    summary = summarize_transcript(transcript)
    log_event(
        logger,
        "Quiz finished",
        event="session_summary",
        correct=summary.correct_answers,
        total=summary.total_questions,
        average_time_seconds=summary.average_time_seconds,
    )
    render_summary(console, summary, chart_height=chart_height)
    return QuizSessionResult(transcript, summary, "completed")


def _read_command(
    console: Console, input_provider: InputProvider, option_count: int
) -> Optional[SessionCommand]:
    """Prompt until a usable command arrives; ``None`` means input ended."""

    while True:
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            return None
        command = parse_session_command(raw, option_count)
        if command is not None:
            return command
        console.print(
            f"[red]Enter a number from 1 to {option_count}, or q to quit.[/]"
        )
