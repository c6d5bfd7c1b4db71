from __future__ import annotations

import json

import pytest

from fixtures import make_raw_question
from stem_quiz.quizzer.models import GraphKind
from stem_quiz.quizzer.schema import (
    QUESTION_SCHEMA,
    MalformedInputError,
    SchemaViolationError,
    load_question_set,
    read_question_set,
    validate,
)


def test_validate_accepts_minimal_question():
    report = validate(
        [
            {
                "id": 1,
                "question": "Q",
                "options": ["a", "b"],
                "correct": 1,
                "topic": "T",
                "concept": "C",
            }
        ]
    )

    assert report.valid is True
    assert report.violations == ()
    assert len(report.questions) == 1
    question = report.questions[0]
    assert question.id == 1
    assert question.text == "Q"
    assert question.options == ("a", "b")
    assert question.correct_index == 1
    assert question.topic == "T"
    assert question.concept == "C"
    assert question.graph is None


@pytest.mark.parametrize("raw", [{}, "text", 3, None])
def test_validate_rejects_non_array_top_level(raw):
    report = validate(raw)

    assert report.valid is False
    assert report.violations == ("Question set must be an array",)
    assert report.questions == ()


def test_validate_empty_array_is_valid():
    report = validate([])

    assert report.valid is True
    assert report.questions == ()


@pytest.mark.parametrize("field", [rule.name for rule in QUESTION_SCHEMA])
def test_validate_reports_missing_field(field):
    report = validate([make_raw_question(1, **{field: None})])

    assert report.valid is False
    assert f"Question 1 is missing the {field} field" in report.violations


def test_validate_options_must_be_array():
    report = validate([make_raw_question(1, options="a,b")])

    assert report.violations == ("Question 1 options must be an array",)


def test_validate_requires_two_options():
    report = validate([make_raw_question(1, options=["only"], correct=0)])

    assert report.violations == ("Question 1 must have at least 2 options",)


def test_validate_checks_index_even_with_too_few_options():
    report = validate([make_raw_question(1, options=["x"], correct=7)])

    assert report.violations == (
        "Question 1 must have at least 2 options",
        "Question 1 has an invalid correct answer index",
    )


def test_validate_empty_options_still_checks_index():
    report = validate([make_raw_question(1, options=[], correct=0)])

    assert report.violations == (
        "Question 1 must have at least 2 options",
        "Question 1 has an invalid correct answer index",
    )


def test_validate_renders_non_string_display_fields_as_json():
    raw = make_raw_question(
        1, question=42, topic={"area": "Sets"}, concept=True, options=[1, 2.5]
    )

    report = validate([raw])

    question = report.questions[0]
    assert report.valid
    assert question.text == "42"
    assert question.topic == '{"area": "Sets"}'
    assert question.concept == "true"
    assert question.options == ("1", "2.5")


@pytest.mark.parametrize("correct", [-1, 3, 1.5, "1", True, [0]])
def test_validate_rejects_bad_correct_index(correct):
    report = validate([make_raw_question(1, correct=correct)])

    assert report.violations == (
        "Question 1 has an invalid correct answer index",
    )


def test_validate_accepts_integral_float_index():
    report = validate([make_raw_question(1, correct=2.0)])

    assert report.valid
    assert report.questions[0].correct_index == 2
    assert isinstance(report.questions[0].correct_index, int)


def test_validate_collects_one_violation_per_defective_question():
    raw = [
        make_raw_question(1, topic=None),
        make_raw_question(2, options="nope"),
        make_raw_question(3, options=["x"], correct=0),
        make_raw_question(4, correct=9),
        make_raw_question(5, concept=None),
    ]

    report = validate(raw)

    assert report.valid is False
    assert report.violations == (
        "Question 1 is missing the topic field",
        "Question 2 options must be an array",
        "Question 3 must have at least 2 options",
        "Question 4 has an invalid correct answer index",
        "Question 5 is missing the concept field",
    )
    assert report.questions == ()


def test_validate_skips_index_check_when_options_invalid():
    report = validate([make_raw_question(1, options=42, correct=7)])

    assert report.violations == ("Question 1 options must be an array",)


def test_validate_reports_non_object_question():
    report = validate([make_raw_question(1), "oops"])

    assert report.violations == ("Question 2 must be an object",)


def test_validate_rejects_duplicate_ids_by_default():
    raw = [make_raw_question(7), make_raw_question(8), make_raw_question(7)]

    report = validate(raw)

    assert report.valid is False
    assert report.violations == ("Question 3 has a duplicate id 7",)


def test_validate_can_allow_duplicate_ids():
    raw = [make_raw_question(7), make_raw_question(7)]

    report = validate(raw, allow_duplicate_ids=True)

    assert report.valid
    assert [q.id for q in report.questions] == [7, 7]


def test_validate_parses_graph_payload():
    graph = {"type": "bar", "data": [{"x": "a", "y": 1}, {"x": "b", "y": 2}]}

    report = validate([make_raw_question(1, graph=graph)])

    spec = report.questions[0].graph
    assert spec is not None
    assert spec.kind is GraphKind.BAR
    assert spec.raw_kind == "bar"
    assert spec.series == ({"x": "a", "y": 1}, {"x": "b", "y": 2})


def test_validate_accepts_kind_and_series_keys():
    graph = {"kind": "table", "series": [{"name": "n", "value": 1}]}

    report = validate([make_raw_question(1, graph=graph)])

    assert report.questions[0].graph.kind is GraphKind.TABLE


def test_validate_unknown_graph_kind_means_no_visual():
    graph = {"type": "pie", "data": [{"x": 1, "y": 2}]}

    report = validate([make_raw_question(1, graph=graph)])

    assert report.valid
    assert report.questions[0].graph.kind is None
    assert report.questions[0].graph.raw_kind == "pie"


@pytest.mark.parametrize("graph", ["line", {"type": "line", "data": "x"}])
def test_validate_drops_unusable_graph(graph):
    report = validate([make_raw_question(1, graph=graph)])

    assert report.valid
    assert report.questions[0].graph is None


def test_load_question_set_decodes_bytes():
    payload = json.dumps([make_raw_question(1), make_raw_question(2)])

    questions = load_question_set(payload.encode("utf-8"))

    assert [q.id for q in questions] == [1, 2]


@pytest.mark.parametrize("payload", [b"{not json", b"\xff\xfe\x00", ""])
def test_load_question_set_malformed_input(payload):
    with pytest.raises(MalformedInputError) as excinfo:
        load_question_set(payload)

    assert str(excinfo.value) == "Invalid JSON format"


def test_load_question_set_raises_with_all_violations():
    payload = json.dumps(
        [make_raw_question(1, topic=None), make_raw_question(2, correct=5)]
    )

    with pytest.raises(SchemaViolationError) as excinfo:
        load_question_set(payload)

    assert excinfo.value.violations == (
        "Question 1 is missing the topic field",
        "Question 2 has an invalid correct answer index",
    )
    assert "2 schema violations" in str(excinfo.value)


def test_read_question_set_from_file(question_files):
    path = question_files.write([make_raw_question("q-1")])

    questions = read_question_set(path)

    assert questions[0].id == "q-1"
