"""Shared testing helpers for the stem_quiz test suite."""

from .questions import (  # noqa: F401
    FakeClock,
    QuestionSetWriter,
    make_question,
    make_raw_question,
)

__all__ = [
    "FakeClock",
    "QuestionSetWriter",
    "make_question",
    "make_raw_question",
]
