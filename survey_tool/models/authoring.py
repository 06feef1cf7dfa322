"""Authoring request and read models for survey CRUD.

Questions and options in an upsert request may carry a `ref` token. Conditional
links (`parent_question_ref`, `visible_when_selected_option_refs`) point at
those tokens; the authoring service maps them to freshly generated ids. When
editing an existing survey, clients send the stored ids as refs.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from survey_tool.models.question_type import QuestionType


class AnswerOptionUpsert(BaseModel):
    ref: Optional[str] = None
    text: str = Field(..., min_length=1)
    weight: int = 0


class QuestionUpsert(BaseModel):
    ref: Optional[str] = None
    text: str
    type: QuestionType
    order: int = 0
    parent_question_ref: Optional[str] = None
    visible_when_selected_option_refs: Optional[List[str]] = None
    options: List[AnswerOptionUpsert] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def text_must_be_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("question text must not be empty")
        return v

    @model_validator(mode="after")
    def choice_questions_need_options(self) -> "QuestionUpsert":
        if self.type.is_choice and not self.options:
            raise ValueError("Choice questions must have at least one option")
        return self


class SurveyUpsertRequest(BaseModel):
    title: str
    description: Optional[str] = None
    questions: List[QuestionUpsert] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_must_be_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must not be empty")
        return v


class SurveyCreated(BaseModel):
    id: str


class SurveySummary(BaseModel):
    id: str
    title: str


class AnswerOptionView(BaseModel):
    id: str
    text: str
    weight: int


class QuestionView(BaseModel):
    id: str
    text: str
    type: QuestionType
    order: int
    parent_question_id: Optional[str] = None
    visible_when_selected_option_ids: Optional[List[str]] = None
    options: List[AnswerOptionView] = Field(default_factory=list)


class SurveyView(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    questions: List[QuestionView] = Field(default_factory=list)


__all__ = [
    "AnswerOptionUpsert",
    "QuestionUpsert",
    "SurveyUpsertRequest",
    "SurveyCreated",
    "SurveySummary",
    "AnswerOptionView",
    "QuestionView",
    "SurveyView",
]
