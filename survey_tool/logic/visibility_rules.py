"""Visibility rule evaluation for conditional (branching) questions.

Centralizes the option-intersection check and the visible-set computation
used by the submission engine so the two never drift apart.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional
import logging

from survey_tool.models.response import SubmitAnswerItem
from survey_tool.models.survey import Question, Survey

logger = logging.getLogger(__name__)


def is_child_visible(
    selected_option_ids: Optional[Iterable[str]],
    visible_when_selected_option_ids: Optional[Iterable[str]],
) -> bool:
    """Return True if any selected parent option is a trigger option.

    None or empty collections on either side never make a child visible.
    """
    if not selected_option_ids or not visible_when_selected_option_ids:
        return False
    triggers = set(visible_when_selected_option_ids)
    return any(opt in triggers for opt in selected_option_ids)


def is_question_visible(question: Question, answers_by_question_id: Mapping[str, SubmitAnswerItem]) -> bool:
    # Root questions are always shown
    if question.parent_question_id is None:
        return True
    rule = question.visibility_rule
    # Conditional question without a rule is a dead branch
    if rule is None:
        return False
    parent_answer = answers_by_question_id.get(rule.parent_question_id)
    if parent_answer is None:
        return False
    return is_child_visible(parent_answer.selected_option_ids or [], rule.visible_when_selected_option_ids)


def compute_visible_question_ids(
    survey: Survey,
    answers_by_question_id: Mapping[str, SubmitAnswerItem],
) -> set[str]:
    """Compute the set of visible question ids for a survey and an answer map.

    - Questions are evaluated once each in `order` sequence (single pass, no
      fixed-point iteration).
    - A child depends only on whether its parent was answered with a trigger
      option; the parent's own visibility is not consulted.
    - Pure function: identical inputs always produce an identical set.
    """
    visible: set[str] = set()
    for question in survey.ordered_questions():
        if is_question_visible(question, answers_by_question_id):
            visible.add(question.id)
    logger.debug(
        "visibility.computed survey_id=%s visible=%d total=%d",
        survey.id,
        len(visible),
        len(survey.questions),
    )
    return visible


__all__ = ["is_child_visible", "is_question_visible", "compute_visible_question_ids"]
