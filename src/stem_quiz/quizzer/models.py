"""Immutable records shared by the validator, engine, stats and exporter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

QuestionId = Union[int, str]


class QuizError(RuntimeError):
    """Base class for errors raised by the quizzer package."""


class GraphKind(Enum):
    """Visual kinds a question's ``graph`` payload may ask for."""

    LINE = "line"
    BAR = "bar"
    SCATTER = "scatter"
    TABLE = "table"

    @classmethod
    def parse(cls, value: object) -> Optional["GraphKind"]:
        """Return the matching kind, or ``None`` for anything unrecognized."""

        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


@dataclass(frozen=True)
class GraphSpec:
    """Chart payload passed through untouched to the renderer.

    ``kind`` is ``None`` when the input named a kind outside
    :class:`GraphKind`; such graphs produce no visual.
    """

    kind: Optional[GraphKind]
    raw_kind: str
    series: tuple[Mapping[str, object], ...]


@dataclass(frozen=True)
class Question:
    id: QuestionId
    text: str
    options: tuple[str, ...]
    correct_index: int
    topic: str
    concept: str
    graph: Optional[GraphSpec] = None


@dataclass(frozen=True)
class AnswerRecord:
    """One timed answer, created once per question in question order."""

    question_id: QuestionId
    topic: str
    concept: str
    time_spent_seconds: float
    is_correct: bool
    selected_index: int
