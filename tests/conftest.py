from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fixtures import FakeClock, QuestionSetWriter  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock for deterministic timing assertions."""

    return FakeClock()


@pytest.fixture
def question_files(tmp_path: Path) -> QuestionSetWriter:
    return QuestionSetWriter(tmp_path / "sets")


@pytest.fixture
def workspace_root(tmp_path: Path, monkeypatch) -> Path:
    """Point STEM_QUIZ_DATA_HOME at a per-test directory."""

    root = tmp_path / "workspace"
    monkeypatch.setenv("STEM_QUIZ_DATA_HOME", str(root))
    for suffix in ("CONFIG", "OUTPUT_DIR", "LOG_LEVEL", "MATH_DELIMITER"):
        monkeypatch.delenv(f"STEM_QUIZ_{suffix}", raising=False)
    return root


@pytest.fixture(autouse=True)
def _close_quiz_log_handlers() -> Iterator[None]:
    yield
    logger = logging.getLogger("stem_quiz.quizzer")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
