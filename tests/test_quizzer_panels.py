from __future__ import annotations

from rich.console import Console

from fixtures import make_question
from stem_quiz.quizzer.models import AnswerRecord
from stem_quiz.quizzer.stats import aggregate, summarize_transcript
from stem_quiz.quizzer.view.panels import (
    render_question,
    render_stats,
    render_summary,
)


def _console() -> Console:
    return Console(record=True, width=80, force_terminal=True)


def test_render_stats_lists_topics_and_concepts():
    console = _console()
    stats = aggregate(
        [
            make_question(1, topic="Algebra", concept="Factoring"),
            make_question(2, topic="Geometry", concept="Angles"),
        ]
    )

    render_stats(console, stats)

    output = console.export_text()
    assert "Question Set Overview" in output
    assert "Number of Topics" in output
    assert "• Algebra" in output
    assert "• Angles" in output


def test_render_stats_prints_topic_text_verbatim():
    console = _console()
    stats = aggregate(
        [
            make_question(1, topic="Sets [/]", concept="Intervals [a, b]"),
            make_question(2, topic="[bold]Logic", concept="C"),
        ]
    )

    render_stats(console, stats)

    output = console.export_text()
    assert "Sets [/]" in output
    assert "Intervals [a, b]" in output
    assert "[bold]Logic" in output


def test_render_question_numbers_options():
    console = _console()
    question = make_question(
        3, options=("[x]", "$y$"), text="Pick [one] of $x$"
    )

    render_question(console, question, number=2, total=5)

    output = console.export_text()
    assert "Question 2/5" in output
    assert "Pick [one] of x" in output
    assert "[x]" in output
    assert "Enter 1-2 to answer, q to quit" in output


def test_render_summary_keeps_topic_names_literal():
    console = _console()
    summary = summarize_transcript(
        [
            AnswerRecord(
                question_id=1,
                topic="Sets [/]",
                concept="c",
                time_spent_seconds=2.0,
                is_correct=True,
                selected_index=0,
            )
        ]
    )

    render_summary(console, summary)

    output = console.export_text()
    assert "Correct Answers: 1/1" in output
    assert "Sets [/]" in output
    assert "100.0%" in output
