from __future__ import annotations

"""Functional test bootstrap.

Points the service at a file-backed SQLite database under tmp/ before any
application import, applies the SQL migrations once per session, and offers
fixtures for an in-process API client and an in-memory branching survey.
"""

import os
import pathlib
from typing import Dict, Iterator

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

# Use a file-backed SQLite DB so every connection sees the same schema
os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["MIGRATIONS_DIR"] = str(_ROOT / "migrations")
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
os.environ["SEED_DEMO_SURVEY"] = "0"

from survey_tool.models.question_type import QuestionType  # noqa: E402
from survey_tool.models.survey import AnswerOption, Question, Survey, VisibilityRule  # noqa: E402

_TABLES = (
    "response_item",
    "survey_response",
    "visibility_rule_option",
    "answer_option",
    "question",
    "survey",
)


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> Iterator[None]:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from survey_tool.db.base import get_engine, reset_engine
    from survey_tool.db.migrations_runner import apply_migrations

    engine = get_engine(os.environ["TEST_DATABASE_URL"])
    apply_migrations(engine, migrations_dir=os.environ["MIGRATIONS_DIR"])
    yield
    reset_engine()


@pytest.fixture()
def clean_db() -> Iterator[None]:
    """Empty every survey/response table before the test runs."""
    from sqlalchemy import text as sql_text

    from survey_tool.db.base import get_engine

    with get_engine(os.environ["TEST_DATABASE_URL"]).begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    yield


@pytest.fixture()
def client(clean_db):
    """In-process API client; the context manager runs startup hooks."""
    from fastapi.testclient import TestClient

    from survey_tool.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def ids() -> Dict[str, str]:
    return {
        "survey": "survey-1",
        "q1": "q1",
        "q1_a": "q1-a",
        "q1_b": "q1-b",
        "q2": "q2",
        "q2_x": "q2-x",
        "q2_y": "q2-y",
        "q3": "q3",
    }


@pytest.fixture()
def branching_survey(ids: Dict[str, str]) -> Survey:
    """Q1 single choice (A=3, B=1); Q2 multiple choice shown for A (X=2, Y=4);
    Q3 free text shown for B."""
    q1 = Question(
        id=ids["q1"],
        text="Q1",
        type=QuestionType.SINGLE_CHOICE,
        order=1,
        options=(
            AnswerOption(id=ids["q1_a"], text="A", weight=3),
            AnswerOption(id=ids["q1_b"], text="B", weight=1),
        ),
    )
    q2 = Question(
        id=ids["q2"],
        text="Q2",
        type=QuestionType.MULTIPLE_CHOICE,
        order=2,
        parent_question_id=ids["q1"],
        visibility_rule=VisibilityRule(
            parent_question_id=ids["q1"],
            visible_when_selected_option_ids=(ids["q1_a"],),
        ),
        options=(
            AnswerOption(id=ids["q2_x"], text="X", weight=2),
            AnswerOption(id=ids["q2_y"], text="Y", weight=4),
        ),
    )
    q3 = Question(
        id=ids["q3"],
        text="Q3",
        type=QuestionType.FREE_TEXT,
        order=3,
        parent_question_id=ids["q1"],
        visibility_rule=VisibilityRule(
            parent_question_id=ids["q1"],
            visible_when_selected_option_ids=(ids["q1_b"],),
        ),
    )
    return Survey(id=ids["survey"], title="Test", questions=(q1, q2, q3))
