"""Immutable survey definition records.

These are the read-only snapshots handed to the submission engine. Parent
links are identifier-based; a question never holds a reference to another
Question object.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from survey_tool.models.question_type import QuestionType


class AnswerOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    weight: int


class VisibilityRule(BaseModel):
    """Reveal the owning question when any trigger option of the parent is selected."""

    model_config = ConfigDict(frozen=True)

    parent_question_id: str
    visible_when_selected_option_ids: Tuple[str, ...] = Field(min_length=1)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    type: QuestionType
    order: int
    parent_question_id: Optional[str] = None
    visibility_rule: Optional[VisibilityRule] = None
    options: Tuple[AnswerOption, ...] = ()

    @model_validator(mode="after")
    def rule_must_match_parent(self) -> "Question":
        rule = self.visibility_rule
        if rule is not None and rule.parent_question_id != self.parent_question_id:
            raise ValueError("visibility_rule.parent_question_id must equal parent_question_id")
        return self


class Survey(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    questions: Tuple[Question, ...] = ()

    def ordered_questions(self) -> list[Question]:
        """Questions by `order`; sorted() is stable so ties keep insertion order."""
        return sorted(self.questions, key=lambda q: q.order)


__all__ = ["AnswerOption", "VisibilityRule", "Question", "Survey"]
