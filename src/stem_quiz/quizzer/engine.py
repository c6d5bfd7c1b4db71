"""Finite-state controller for one timed pass over a question set.

The engine knows nothing about consoles or input parsing. Front ends call
:meth:`QuizEngine.submit_answer` once per question; anything they pass that
is not a non-negative integer is treated as a caller bug and raised as
:class:`InvalidTransitionError` rather than being recovered here.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

from ..core.logging import log_event
from .models import AnswerRecord, Question, QuizError

Clock = Callable[[], float]


class InvalidTransitionError(QuizError):
    """Raised when the engine is driven outside its state machine."""


class SessionPhase(Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class SessionState:
    """Mutable state owned by a single :class:`QuizEngine`."""

    question_started_at: float
    current_index: int = 0
    answers: list[AnswerRecord] = field(default_factory=list)
    phase: SessionPhase = SessionPhase.IN_PROGRESS


class QuizEngine:
    def __init__(
        self,
        questions: Sequence[Question],
        *,
        clock: Clock = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self._questions = tuple(questions)
        self._clock = clock
        self._logger = logger
        self._state: Optional[SessionState] = None

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def state(self) -> Optional[SessionState]:
        """Detached copy of the session state; edits never reach the engine."""

        return self._snapshot()

    @property
    def phase(self) -> Optional[SessionPhase]:
        return self._state.phase if self._state else None

    @property
    def is_complete(self) -> bool:
        return self.phase is SessionPhase.COMPLETE

    @property
    def current_index(self) -> int:
        return self._require_in_progress("current_index").current_index

    @property
    def current_question(self) -> Question:
        state = self._require_in_progress("current_question")
        return self._questions[state.current_index]

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._state.answers) if self._state else ()

    def start(self) -> SessionState:
        """Begin the session at the first question.

        An empty question set has nothing to answer, so the session is
        complete as soon as it starts.
        """

        if self._state is not None:
            raise InvalidTransitionError("Session has already started")
        phase = (
            SessionPhase.IN_PROGRESS
            if self._questions
            else SessionPhase.COMPLETE
        )
        self._state = SessionState(
            question_started_at=self._clock(), phase=phase
        )
        log_event(
            self._logger,
            "Quiz session started",
            event="session_started",
            question_count=len(self._questions),
            phase=phase.value,
        )
        return self._snapshot()

    def submit_answer(self, selected_index: int) -> AnswerRecord:
        """Record ``selected_index`` for the current question and advance.

        The index is not checked against the option count; a value outside
        the options can never equal the correct index and scores as wrong.
        """

        state = self._require_in_progress("submit_answer")
        if isinstance(selected_index, bool) or not isinstance(
            selected_index, int
        ):
            raise InvalidTransitionError(
                f"Answer index must be an integer, got {selected_index!r}"
            )
        if selected_index < 0:
            raise InvalidTransitionError(
                f"Answer index must be non-negative, got {selected_index}"
            )

        question = self._questions[state.current_index]
        now = self._clock()
        record = AnswerRecord(
            question_id=question.id,
            topic=question.topic,
            concept=question.concept,
            time_spent_seconds=self._elapsed(state, question, now),
            is_correct=selected_index == question.correct_index,
            selected_index=selected_index,
        )
        state.answers.append(record)
        log_event(
            self._logger,
            "Answer recorded",
            event="answer_recorded",
            level=logging.DEBUG,
            question_id=question.id,
            selected_index=selected_index,
            is_correct=record.is_correct,
            time_spent_seconds=record.time_spent_seconds,
        )

        if state.current_index == len(self._questions) - 1:
            state.phase = SessionPhase.COMPLETE
            log_event(
                self._logger,
                "Quiz session complete",
                event="session_complete",
                answered=len(state.answers),
            )
        else:
            state.current_index += 1
            state.question_started_at = now
        return record

    def transcript(self) -> tuple[AnswerRecord, ...]:
        if not self.is_complete:
            raise InvalidTransitionError(
                "Transcript is only available once the session is complete"
            )
        return self.answers

    def abandon(self) -> None:
        """Drop the session state; answers recorded so far are discarded."""

        if self._state is not None and not self.is_complete:
            log_event(
                self._logger,
                "Quiz session abandoned",
                event="session_abandoned",
                answered=len(self._state.answers),
            )
        self._state = None

    def _snapshot(self) -> Optional[SessionState]:
        if self._state is None:
            return None
        return replace(self._state, answers=list(self._state.answers))

    def _require_in_progress(self, operation: str) -> SessionState:
        if self._state is None:
            raise InvalidTransitionError(
                f"{operation} called before the session started"
            )
        if self._state.phase is not SessionPhase.IN_PROGRESS:
            raise InvalidTransitionError(
                f"{operation} called after the session completed"
            )
        return self._state

    def _elapsed(
        self, state: SessionState, question: Question, now: float
    ) -> float:
        elapsed = now - state.question_started_at
        if elapsed >= 0:
            return elapsed
        # A clock that stepped backwards must not yield negative durations.
        log_event(
            self._logger,
            "Clock moved backwards; clamping elapsed time to zero",
            event="clock_skew",
            level=logging.WARNING,
            question_id=question.id,
            elapsed=elapsed,
        )
        return 0.0
