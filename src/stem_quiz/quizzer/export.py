"""CSV export of a completed session transcript."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from .models import AnswerRecord

DEFAULT_FILENAME = "quiz_results.csv"

CSV_HEADER: tuple[str, ...] = (
    "Question ID",
    "Topic",
    "Concept",
    "Time Spent (s)",
    "Correct",
    "User Answer",
)

_CENTS = Decimal("0.01")


def format_seconds(value: float) -> str:
    """Render ``value`` with two decimals, rounding halves away from zero.

    Rounding goes through the shortest decimal repr, so ``1.005`` becomes
    ``1.01`` even though the binary float sits just below it.
    """

    return str(Decimal(repr(float(value))).quantize(_CENTS, ROUND_HALF_UP))


def export_csv(answers: Sequence[AnswerRecord]) -> str:
    """Return the transcript as CSV text, one row per answer in order.

    Rows are separated by ``\\n`` without a trailing newline. Values holding
    a comma or quote are quoted; everything else is written verbatim.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for answer in answers:
        writer.writerow(
            (
                answer.question_id,
                answer.topic,
                answer.concept,
                format_seconds(answer.time_spent_seconds),
                "true" if answer.is_correct else "false",
                answer.selected_index,
            )
        )
    return buffer.getvalue().removesuffix("\n")


def write_results(path: Path, answers: Sequence[AnswerRecord]) -> Path:
    """Write the CSV to ``path``; a directory gets the default file name."""

    target = Path(path)
    if target.is_dir():
        target = target / DEFAULT_FILENAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export_csv(answers) + "\n", encoding="utf-8")
    return target
