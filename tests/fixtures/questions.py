"""Builders for raw and validated questions plus a controllable clock."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence, Union

from stem_quiz.quizzer.models import Question


def make_raw_question(qid: Any = 1, **overrides: Any) -> dict[str, Any]:
    """Return a valid JSON-shaped question, with ``overrides`` applied.

    Pass ``None`` as an override value to drop that key entirely.
    """

    data: dict[str, Any] = {
        "id": qid,
        "question": f"Question {qid}",
        "options": ["a", "b", "c"],
        "correct": 1,
        "topic": "Algebra",
        "concept": "Linear equations",
    }
    for key, value in overrides.items():
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
    return data


def make_question(
    qid: Any = 1,
    *,
    correct_index: int = 1,
    topic: str = "Algebra",
    concept: str = "Linear equations",
    options: Sequence[str] = ("a", "b", "c"),
    text: str = "",
) -> Question:
    return Question(
        id=qid,
        text=text or f"Question {qid}",
        options=tuple(options),
        correct_index=correct_index,
        topic=topic,
        concept=concept,
    )


@dataclass
class FakeClock:
    now: float = 100.0
    calls: int = field(default=0)

    def __call__(self) -> float:
        self.calls += 1
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class QuestionSetWriter:
    """Write question-set files under ``root`` for CLI-level tests."""

    root: Path

    def write(
        self, payload: Union[Sequence[Any], str, bytes], name: str = "set.json"
    ) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            path.write_bytes(payload)
        elif isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path
