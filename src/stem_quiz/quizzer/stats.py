"""Question-set statistics and transcript summaries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Callable

from .models import AnswerRecord, Question


@dataclass(frozen=True)
class TopicCount:
    topic: str
    count: int


@dataclass(frozen=True)
class QuestionSetStats:
    """Preview of a validated question set shown before a session starts."""

    total_questions: int
    topics: tuple[str, ...]
    concepts: tuple[str, ...]
    topic_distribution: tuple[TopicCount, ...]


@dataclass(frozen=True)
class TopicSummary:
    """Aggregate performance for one topic or concept."""

    topic: str
    asked: int
    correct: int

    @property
    def accuracy(self) -> float:
        if self.asked == 0:
            return 0.0
        return self.correct / self.asked


@dataclass(frozen=True)
class TimePoint:
    label: str
    seconds: float


@dataclass(frozen=True)
class TranscriptSummary:
    """Results derived from a completed session's answer records."""

    total_questions: int
    correct_answers: int
    accuracy: float
    average_time_seconds: float
    time_series: tuple[TimePoint, ...] = ()
    per_topic: dict[str, TopicSummary] = field(default_factory=dict)
    per_concept: dict[str, TopicSummary] = field(default_factory=dict)


def aggregate(questions: Sequence[Question]) -> QuestionSetStats:
    """Count topics and concepts in first-seen order."""

    counts: dict[str, int] = {}
    concepts: dict[str, None] = {}
    for question in questions:
        counts[question.topic] = counts.get(question.topic, 0) + 1
        concepts.setdefault(question.concept, None)
    return QuestionSetStats(
        total_questions=len(questions),
        topics=tuple(counts),
        concepts=tuple(concepts),
        topic_distribution=tuple(
            TopicCount(topic, count) for topic, count in counts.items()
        ),
    )


def summarize_transcript(answers: Sequence[AnswerRecord]) -> TranscriptSummary:
    total = len(answers)
    correct = sum(1 for answer in answers if answer.is_correct)
    elapsed = sum(answer.time_spent_seconds for answer in answers)
    return TranscriptSummary(
        total_questions=total,
        correct_answers=correct,
        accuracy=(correct / total) if total else 0.0,
        average_time_seconds=(elapsed / total) if total else 0.0,
        time_series=tuple(
            TimePoint(f"Q{number}", answer.time_spent_seconds)
            for number, answer in enumerate(answers, start=1)
        ),
        per_topic=_group(answers, lambda answer: answer.topic),
        per_concept=_group(answers, lambda answer: answer.concept),
    )


def _group(
    answers: Iterable[AnswerRecord], key: Callable[[AnswerRecord], str]
) -> dict[str, TopicSummary]:
    tallies: dict[str, list[int]] = {}
    for answer in answers:
        asked_correct = tallies.setdefault(key(answer), [0, 0])
        asked_correct[0] += 1
        if answer.is_correct:
            asked_correct[1] += 1
    return {
        name: TopicSummary(name, asked, correct)
        for name, (asked, correct) in tallies.items()
    }
