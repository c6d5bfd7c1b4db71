from ._main import build_arg_parser
from .config import (
    ConfigOverrides,
    LoadResult,
    QuizzerConfig,
    QuizzerConfigError,
    load_config,
)
from .engine import (
    InvalidTransitionError,
    QuizEngine,
    SessionPhase,
    SessionState,
)
from .export import CSV_HEADER, export_csv, format_seconds, write_results
from .models import AnswerRecord, GraphKind, GraphSpec, Question, QuizError
from .schema import (
    MalformedInputError,
    SchemaViolationError,
    ValidationReport,
    load_question_set,
    read_question_set,
    validate,
)
from .segmenter import Segment, SegmentKind, join_segments, segment
from .session import QuizSessionResult, run_quiz_session
from .stats import (
    QuestionSetStats,
    TopicCount,
    TopicSummary,
    TranscriptSummary,
    aggregate,
    summarize_transcript,
)

__all__ = [
    "build_arg_parser",
    "ConfigOverrides",
    "LoadResult",
    "QuizzerConfig",
    "QuizzerConfigError",
    "load_config",
    "InvalidTransitionError",
    "QuizEngine",
    "SessionPhase",
    "SessionState",
    "CSV_HEADER",
    "export_csv",
    "format_seconds",
    "write_results",
    "AnswerRecord",
    "GraphKind",
    "GraphSpec",
    "Question",
    "QuizError",
    "MalformedInputError",
    "SchemaViolationError",
    "ValidationReport",
    "load_question_set",
    "read_question_set",
    "validate",
    "Segment",
    "SegmentKind",
    "join_segments",
    "segment",
    "QuizSessionResult",
    "run_quiz_session",
    "QuestionSetStats",
    "TopicCount",
    "TopicSummary",
    "TranscriptSummary",
    "aggregate",
    "summarize_transcript",
]
