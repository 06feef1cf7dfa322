"""Append-only storage for scored survey responses."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import text as sql_text

from survey_tool.db.base import get_engine, transaction
from survey_tool.models.response import ResponseItem, SurveyResponse

logger = logging.getLogger(__name__)


def add_response(response: SurveyResponse) -> None:
    """Persist a response and all of its items as one unit.

    Any failure rolls the whole transaction back; nothing is partially written.
    """
    with transaction() as conn:
        conn.execute(
            sql_text(
                "INSERT INTO survey_response (response_id, survey_id, submitted_at, total_score) "
                "VALUES (:rid, :sid, :at, :total)"
            ),
            {
                "rid": response.id,
                "sid": response.survey_id,
                "at": response.submitted_at.isoformat(),
                "total": response.total_score,
            },
        )
        for position, item in enumerate(response.items):
            conn.execute(
                sql_text(
                    """
                    INSERT INTO response_item (item_id, response_id, question_id, selected_option_ids,
                                               free_text, item_score, position)
                    VALUES (:iid, :rid, :qid, :selected, :free_text, :score, :pos)
                    """
                ),
                {
                    "iid": item.id,
                    "rid": response.id,
                    "qid": item.question_id,
                    "selected": json.dumps(list(item.selected_option_ids)),
                    "free_text": item.free_text,
                    "score": item.item_score,
                    "pos": position,
                },
            )


def get_response_by_id(response_id: str) -> Optional[SurveyResponse]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                "SELECT response_id, survey_id, submitted_at, total_score "
                "FROM survey_response WHERE response_id = :id"
            ),
            {"id": response_id},
        ).mappings().fetchone()
        if row is None:
            return None
        item_rows = conn.execute(
            sql_text(
                """
                SELECT item_id, question_id, selected_option_ids, free_text, item_score
                FROM response_item
                WHERE response_id = :id
                ORDER BY position ASC
                """
            ),
            {"id": response_id},
        ).mappings().all()

    items: List[ResponseItem] = [
        ResponseItem(
            id=str(r["item_id"]),
            survey_response_id=str(row["response_id"]),
            question_id=str(r["question_id"]),
            selected_option_ids=tuple(json.loads(r["selected_option_ids"] or "[]")),
            free_text=r["free_text"],
            item_score=int(r["item_score"]),
        )
        for r in item_rows
    ]
    return SurveyResponse(
        id=str(row["response_id"]),
        survey_id=str(row["survey_id"]),
        submitted_at=datetime.fromisoformat(str(row["submitted_at"])),
        total_score=int(row["total_score"]),
        items=tuple(items),
    )


__all__ = ["add_response", "get_response_by_id"]
