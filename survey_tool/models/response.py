"""Pydantic models for response submission and stored responses."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SubmitAnswerItem(BaseModel):
    question_id: str
    selected_option_ids: Optional[List[str]] = None
    free_text: Optional[str] = None


class SubmitResponseRequest(BaseModel):
    answers: List[SubmitAnswerItem] = Field(default_factory=list)


class SubmitResponseResult(BaseModel):
    response_id: str
    total_score: int


class ResponseItem(BaseModel):
    """Scored record of one answered-and-visible question. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    survey_response_id: str
    question_id: str
    selected_option_ids: Tuple[str, ...] = ()
    free_text: Optional[str] = None
    item_score: int


class SurveyResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    survey_id: str
    submitted_at: datetime
    total_score: int
    items: Tuple[ResponseItem, ...] = ()


__all__ = [
    "SubmitAnswerItem",
    "SubmitResponseRequest",
    "SubmitResponseResult",
    "ResponseItem",
    "SurveyResponse",
]
