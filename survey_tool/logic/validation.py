"""Type-aware answer validation and per-item scoring.

Validation runs before scoring, so `score_answer` may assume every selected
option exists on the question.
"""

from __future__ import annotations

from survey_tool.logic.errors import (
    CHOICE_WITHOUT_OPTIONS,
    FREE_TEXT_WITH_OPTIONS,
    SINGLE_CHOICE_COUNT,
    UNKNOWN_OPTION,
    SurveyValidationError,
)
from survey_tool.models.question_type import QuestionType
from survey_tool.models.response import SubmitAnswerItem
from survey_tool.models.survey import Question


def validate_answer_for_type(question: Question, answer: SubmitAnswerItem) -> None:
    """Raise SurveyValidationError when an answer breaks its question's type rules.

    - FreeText: no selected options allowed (text content is not checked).
    - Choice: at least one option, all options known; SingleChoice exactly one.
    """
    selected = answer.selected_option_ids
    if question.type == QuestionType.FREE_TEXT:
        if selected:
            raise SurveyValidationError(FREE_TEXT_WITH_OPTIONS)
        return

    if not selected:
        raise SurveyValidationError(CHOICE_WITHOUT_OPTIONS)

    known = {opt.id for opt in question.options}
    for option_id in selected:
        if option_id not in known:
            raise SurveyValidationError(UNKNOWN_OPTION)

    if question.type == QuestionType.SINGLE_CHOICE and len(selected) != 1:
        raise SurveyValidationError(SINGLE_CHOICE_COUNT)


def score_answer(question: Question, answer: SubmitAnswerItem) -> int:
    if question.type == QuestionType.FREE_TEXT:
        return 0
    weights = {opt.id: opt.weight for opt in question.options}
    selected = answer.selected_option_ids or []
    if question.type == QuestionType.SINGLE_CHOICE:
        return weights[selected[0]]
    return sum(weights[option_id] for option_id in selected)


__all__ = ["validate_answer_for_type", "score_answer"]
