"""Question-set decoding and validation.

A question set is a JSON array of objects shaped like::

    {
      "id": 1,
      "question": "What is $x^2$ at $x = 2$?",
      "options": ["2", "4", "6", "8"],
      "correct": 1,
      "topic": "Functions",
      "concept": "Evaluation",
      "graph": {"type": "line", "data": [{"x": 0, "y": 0}, {"x": 1, "y": 1}]}
    }

`validate` walks :data:`QUESTION_SCHEMA` for every question and collects all
violations in one pass instead of stopping at the first bad question, so a
user can fix an uploaded file in a single round trip.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..core.logging import log_event
from .models import GraphKind, GraphSpec, Question, QuizError


class MalformedInputError(QuizError):
    """Raised when the payload is not UTF-8 JSON."""


class SchemaViolationError(QuizError):
    """Raised when a decoded payload breaks one or more schema rules."""

    def __init__(self, violations: Sequence[str]):
        self.violations = tuple(violations)
        count = len(self.violations)
        noun = "violation" if count == 1 else "violations"
        super().__init__(f"Question set has {count} schema {noun}")


class FieldKind(Enum):
    """What a required field must hold beyond being present.

    ``ANY`` fields are only checked for presence; display fields such as
    ``question`` and ``topic`` accept any JSON value and are shown as text.
    """

    ANY = "any"
    OPTIONS = "options"
    INDEX = "index"


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: FieldKind


QUESTION_SCHEMA: tuple[FieldRule, ...] = (
    FieldRule("id", FieldKind.ANY),
    FieldRule("question", FieldKind.ANY),
    FieldRule("options", FieldKind.OPTIONS),
    FieldRule("correct", FieldKind.INDEX),
    FieldRule("topic", FieldKind.ANY),
    FieldRule("concept", FieldKind.ANY),
)

MIN_OPTIONS = 2


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    violations: tuple[str, ...]
    questions: tuple[Question, ...] = ()


def validate(
    raw: Any,
    *,
    allow_duplicate_ids: bool = False,
    logger: Optional[logging.Logger] = None,
) -> ValidationReport:
    """Check ``raw`` against the question-set contract.

    Returns a report holding either the typed questions or every violation
    found. Duplicate ids are reported unless ``allow_duplicate_ids`` is set.
    """

    if not isinstance(raw, list):
        return _reject(["Question set must be an array"], logger)

    violations: list[str] = []
    questions: list[Question] = []
    seen_ids: set[object] = set()
    for number, item in enumerate(raw, start=1):
        problems = _check_question(number, item)
        if problems:
            violations.extend(problems)
            continue
        qid = item["id"]
        if not allow_duplicate_ids:
            key = _id_key(qid)
            if key in seen_ids:
                violations.append(
                    f"Question {number} has a duplicate id {qid!r}"
                )
                continue
            seen_ids.add(key)
        questions.append(_build_question(item, logger))

    if violations:
        return _reject(violations, logger)
    log_event(
        logger,
        "Question set validated",
        event="validation_passed",
        question_count=len(questions),
    )
    return ValidationReport(True, (), tuple(questions))


def decode_payload(payload: bytes | str) -> Any:
    """Decode UTF-8 JSON text, mapping any failure to one user message."""

    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        return json.loads(text)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedInputError("Invalid JSON format") from exc


def load_question_set(
    payload: bytes | str,
    *,
    allow_duplicate_ids: bool = False,
    logger: Optional[logging.Logger] = None,
) -> tuple[Question, ...]:
    """Decode and validate ``payload``; raise instead of returning a report."""

    report = validate(
        decode_payload(payload),
        allow_duplicate_ids=allow_duplicate_ids,
        logger=logger,
    )
    if not report.valid:
        raise SchemaViolationError(report.violations)
    return report.questions


def read_question_set(
    path: Path,
    *,
    allow_duplicate_ids: bool = False,
    logger: Optional[logging.Logger] = None,
) -> tuple[Question, ...]:
    log_event(
        logger,
        "Reading question set",
        event="question_set_read",
        level=logging.DEBUG,
        path=path,
    )
    return load_question_set(
        Path(path).read_bytes(),
        allow_duplicate_ids=allow_duplicate_ids,
        logger=logger,
    )


def _reject(
    violations: list[str], logger: Optional[logging.Logger]
) -> ValidationReport:
    log_event(
        logger,
        "Question set rejected",
        event="validation_failed",
        level=logging.WARNING,
        violations=violations,
    )
    return ValidationReport(False, tuple(violations))


def _check_question(number: int, item: object) -> list[str]:
    if not isinstance(item, Mapping):
        return [f"Question {number} must be an object"]
    problems: list[str] = []
    # Set once ``options`` is an array; INDEX checks are skipped until then.
    option_count: Optional[int] = None
    for rule in QUESTION_SCHEMA:
        if rule.name not in item:
            problems.append(
                f"Question {number} is missing the {rule.name} field"
            )
            continue
        value = item[rule.name]
        if rule.kind is FieldKind.OPTIONS:
            if isinstance(value, list):
                option_count = len(value)
            problem = _check_options(number, value)
            if problem:
                problems.append(problem)
        elif rule.kind is FieldKind.INDEX and option_count is not None:
            if _coerce_index(value, option_count) is None:
                problems.append(
                    f"Question {number} has an invalid correct answer index"
                )
    return problems


def _check_options(number: int, value: object) -> Optional[str]:
    if not isinstance(value, list):
        return f"Question {number} options must be an array"
    if len(value) < MIN_OPTIONS:
        return f"Question {number} must have at least {MIN_OPTIONS} options"
    return None


def _coerce_index(value: object, upper: int) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    if 0 <= value < upper:
        return value
    return None


def _id_key(value: object) -> object:
    # JSON 1 and 1.0 name the same question.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return value


def _build_question(
    item: Mapping[str, Any], logger: Optional[logging.Logger]
) -> Question:
    options = tuple(_text(option) for option in item["options"])
    qid = item["id"]
    if isinstance(qid, float) and qid.is_integer():
        qid = int(qid)
    return Question(
        id=qid,
        text=_text(item["question"]),
        options=options,
        correct_index=int(item["correct"]),
        topic=_text(item["topic"]),
        concept=_text(item["concept"]),
        graph=_build_graph(qid, item.get("graph"), logger),
    )


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _build_graph(
    qid: object, raw: object, logger: Optional[logging.Logger]
) -> Optional[GraphSpec]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        _drop_graph(qid, "graph is not an object", logger)
        return None
    raw_kind = raw.get("type", raw.get("kind"))
    series = raw.get("data", raw.get("series"))
    if not isinstance(series, list) or not all(
        isinstance(row, Mapping) for row in series
    ):
        _drop_graph(qid, "graph data is not a list of records", logger)
        return None
    return GraphSpec(
        kind=GraphKind.parse(raw_kind),
        raw_kind="" if raw_kind is None else str(raw_kind),
        series=tuple(dict(row) for row in series),
    )


def _drop_graph(
    qid: object, reason: str, logger: Optional[logging.Logger]
) -> None:
    log_event(
        logger,
        "Ignoring graph payload",
        event="graph_ignored",
        level=logging.DEBUG,
        question_id=qid,
        reason=reason,
    )
