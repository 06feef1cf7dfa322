"""Survey definition data access helpers.

Reads always return fully hydrated, immutable `Survey` snapshots (questions,
options and visibility rules loaded eagerly). Writes that touch more than
one table run inside a single transaction.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from survey_tool.db.base import get_engine, transaction
from survey_tool.models.question_type import QuestionType
from survey_tool.models.survey import AnswerOption, Question, Survey, VisibilityRule

logger = logging.getLogger(__name__)


def get_survey_by_id(survey_id: str) -> Optional[Survey]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT survey_id, title, description FROM survey WHERE survey_id = :id"),
            {"id": survey_id},
        ).mappings().fetchone()
        if row is None:
            return None
        question_rows = conn.execute(
            sql_text(
                """
                SELECT question_id, question_text, question_type, question_order, parent_question_id
                FROM question
                WHERE survey_id = :id
                ORDER BY position ASC
                """
            ),
            {"id": survey_id},
        ).mappings().all()
        option_rows = conn.execute(
            sql_text(
                """
                SELECT o.option_id, o.question_id, o.option_text, o.weight
                FROM answer_option o
                JOIN question q ON q.question_id = o.question_id
                WHERE q.survey_id = :id
                ORDER BY o.position ASC
                """
            ),
            {"id": survey_id},
        ).mappings().all()
        rule_rows = conn.execute(
            sql_text(
                """
                SELECT r.question_id, r.parent_question_id, r.option_id
                FROM visibility_rule_option r
                JOIN question q ON q.question_id = r.question_id
                WHERE q.survey_id = :id
                ORDER BY r.position ASC
                """
            ),
            {"id": survey_id},
        ).mappings().all()

    options_by_question: Dict[str, List[AnswerOption]] = defaultdict(list)
    for o in option_rows:
        options_by_question[str(o["question_id"])].append(
            AnswerOption(id=str(o["option_id"]), text=str(o["option_text"]), weight=int(o["weight"]))
        )

    triggers_by_question: Dict[str, List[str]] = defaultdict(list)
    rule_parent: Dict[str, str] = {}
    for r in rule_rows:
        qid = str(r["question_id"])
        triggers_by_question[qid].append(str(r["option_id"]))
        rule_parent[qid] = str(r["parent_question_id"])

    # Rows come back in insertion order; Survey.ordered_questions() applies `order`
    questions: List[Question] = []
    for q in question_rows:
        qid = str(q["question_id"])
        rule = None
        if qid in rule_parent:
            rule = VisibilityRule(
                parent_question_id=rule_parent[qid],
                visible_when_selected_option_ids=tuple(triggers_by_question[qid]),
            )
        parent = q["parent_question_id"]
        questions.append(
            Question(
                id=qid,
                text=str(q["question_text"]),
                type=QuestionType(int(q["question_type"])),
                order=int(q["question_order"]),
                parent_question_id=str(parent) if parent is not None else None,
                visibility_rule=rule,
                options=tuple(options_by_question.get(qid, [])),
            )
        )

    return Survey(
        id=str(row["survey_id"]),
        title=str(row["title"]),
        description=row["description"],
        questions=tuple(questions),
    )


def list_surveys() -> List[tuple[str, str]]:
    """Return (survey_id, title) pairs, oldest first."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text("SELECT survey_id, title FROM survey ORDER BY created_at ASC, survey_id ASC")
        ).fetchall()
    return [(str(r[0]), str(r[1])) for r in rows]


def _insert_survey(conn: Connection, survey: Survey) -> None:
    conn.execute(
        sql_text(
            "INSERT INTO survey (survey_id, title, description, created_at) "
            "VALUES (:id, :title, :description, :created_at)"
        ),
        {
            "id": survey.id,
            "title": survey.title,
            "description": survey.description,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    for position, q in enumerate(survey.questions):
        conn.execute(
            sql_text(
                """
                INSERT INTO question (question_id, survey_id, question_text, question_type,
                                      question_order, position, parent_question_id)
                VALUES (:qid, :sid, :text, :type, :ord, :pos, :parent)
                """
            ),
            {
                "qid": q.id,
                "sid": survey.id,
                "text": q.text,
                "type": int(q.type),
                "ord": q.order,
                "pos": position,
                "parent": q.parent_question_id,
            },
        )
        for opt_pos, opt in enumerate(q.options):
            conn.execute(
                sql_text(
                    "INSERT INTO answer_option (option_id, question_id, option_text, weight, position) "
                    "VALUES (:oid, :qid, :text, :weight, :pos)"
                ),
                {"oid": opt.id, "qid": q.id, "text": opt.text, "weight": opt.weight, "pos": opt_pos},
            )
        if q.visibility_rule is not None:
            for rule_pos, option_id in enumerate(q.visibility_rule.visible_when_selected_option_ids):
                conn.execute(
                    sql_text(
                        "INSERT INTO visibility_rule_option (question_id, parent_question_id, option_id, position) "
                        "VALUES (:qid, :parent, :oid, :pos)"
                    ),
                    {
                        "qid": q.id,
                        "parent": q.visibility_rule.parent_question_id,
                        "oid": option_id,
                        "pos": rule_pos,
                    },
                )


def _delete_survey_rows(conn: Connection, survey_id: str) -> bool:
    # Children first so the statements also hold under enforced foreign keys
    params = {"id": survey_id}
    conn.execute(
        sql_text(
            "DELETE FROM visibility_rule_option WHERE question_id IN "
            "(SELECT question_id FROM question WHERE survey_id = :id)"
        ),
        params,
    )
    conn.execute(
        sql_text(
            "DELETE FROM answer_option WHERE question_id IN "
            "(SELECT question_id FROM question WHERE survey_id = :id)"
        ),
        params,
    )
    conn.execute(sql_text("DELETE FROM question WHERE survey_id = :id"), params)
    result = conn.execute(sql_text("DELETE FROM survey WHERE survey_id = :id"), params)
    return (result.rowcount or 0) > 0


def add_survey(survey: Survey) -> None:
    with transaction() as conn:
        _insert_survey(conn, survey)
    logger.info("survey.persisted survey_id=%s questions=%d", survey.id, len(survey.questions))


def replace_survey(survey: Survey) -> bool:
    """Delete then recreate a survey under the same id in one transaction.

    Returns False (and writes nothing) when the survey does not exist.
    """
    with transaction() as conn:
        if not _delete_survey_rows(conn, survey.id):
            return False
        _insert_survey(conn, survey)
    logger.info("survey.replaced survey_id=%s questions=%d", survey.id, len(survey.questions))
    return True


def delete_survey(survey_id: str) -> bool:
    with transaction() as conn:
        deleted = _delete_survey_rows(conn, survey_id)
    if deleted:
        logger.info("survey.deleted survey_id=%s", survey_id)
    return deleted


__all__ = [
    "get_survey_by_id",
    "list_surveys",
    "add_survey",
    "replace_survey",
    "delete_survey",
]
