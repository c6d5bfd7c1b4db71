"""Console screens for the quiz: set preview, question, and results."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import GraphKind, Question
from ..segmenter import DEFAULT_DELIMITER
from ..stats import QuestionSetStats, TranscriptSummary
from .render import render_chart, render_text


def render_stats(
    console: Console,
    stats: QuestionSetStats,
    *,
    chart_width: int = 40,
) -> None:
    """Print the question-set overview shown before a session starts."""

    console.print()
    console.rule(Text("Question Set Overview", style="bold magenta"))

    basics = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    basics.add_column("Metric", style="bold")
    basics.add_column("Value", justify="right")
    basics.add_row("Total Questions", str(stats.total_questions))
    basics.add_row("Number of Topics", str(len(stats.topics)))
    basics.add_row("Number of Concepts", str(len(stats.concepts)))
    console.print(basics)

    chart = render_chart(
        GraphKind.BAR,
        [
            {"x": entry.topic, "y": entry.count}
            for entry in stats.topic_distribution
        ],
        width=chart_width,
        title="Topics Distribution",
    )
    if chart is not None:
        console.print(chart)

    listing = Table(box=box.SIMPLE, expand=False)
    listing.add_column("Topics")
    listing.add_column("Concepts")
    depth = max(len(stats.topics), len(stats.concepts))
    for row in range(depth):
        listing.add_row(
            _nth(stats.topics, row),
            _nth(stats.concepts, row),
        )
    if depth:
        console.print(listing)


def _nth(items: tuple[str, ...], index: int) -> Text:
    return Text(f"• {items[index]}") if index < len(items) else Text()


def render_question(
    console: Console,
    question: Question,
    *,
    number: int,
    total: int,
    delimiter: str = DEFAULT_DELIMITER,
    chart_width: int = 40,
    chart_height: int = 10,
) -> None:
    console.print()
    console.rule(
        Text.assemble(
            (f"Question {number}", "bold cyan"),
            (f"/{total}", "dim"),
        )
    )
    console.print(render_text(question.text, delimiter), style="bold")

    if question.graph is not None:
        chart = render_chart(
            question.graph.kind,
            question.graph.series,
            width=chart_width,
            height=chart_height,
        )
        if chart is not None:
            console.print(chart)

    options = Table(show_header=False, box=box.SIMPLE, expand=True)
    options.add_column("Key", justify="center", style="cyan")
    options.add_column("Option")
    for position, option in enumerate(question.options, start=1):
        options.add_row(str(position), render_text(option, delimiter))
    console.print(options)
    console.print(
        Text(
            f"Enter 1-{len(question.options)} to answer, q to quit",
            style="dim",
        )
    )


def render_summary(
    console: Console,
    summary: TranscriptSummary,
    *,
    chart_height: int = 10,
) -> None:
    console.print()
    console.rule(Text("Quiz Results", style="bold magenta"))
    console.print(
        f"Correct Answers: {summary.correct_answers}/{summary.total_questions}"
    )
    console.print(
        "Average Time per Question: "
        f"{summary.average_time_seconds:.2f} seconds"
    )

    chart = render_chart(
        GraphKind.LINE,
        [
            {"x": point.label, "y": point.seconds}
            for point in summary.time_series
        ],
        height=chart_height,
        title="Time per Question (seconds)",
    )
    if chart is not None:
        console.print(chart)

    if summary.per_topic:
        per_topic = Table(title="Per topic", box=box.SIMPLE, expand=False)
        per_topic.add_column("Topic")
        per_topic.add_column("Asked", justify="right")
        per_topic.add_column("Correct", justify="right")
        per_topic.add_column("Accuracy", justify="right")
        for name, metrics in summary.per_topic.items():
            per_topic.add_row(
                Text(name or "(none)"),
                str(metrics.asked),
                str(metrics.correct),
                f"{metrics.accuracy * 100:.1f}%",
            )
        console.print(per_topic)
