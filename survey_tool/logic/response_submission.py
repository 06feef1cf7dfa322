"""Answer submission engine: validate a submission, score it, persist it.

Checks run in a fixed order and stop at the first violation:
1. survey exists (NotFoundError)
2. every answer references a known question
3. every answer targets a visible question
4. every answer satisfies its question's type rules

Scoring then walks the survey's questions in `order` and emits one
ResponseItem per visible, answered question.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from survey_tool.logic.errors import (
    HIDDEN_QUESTION,
    RESPONSE_NOT_FOUND,
    SURVEY_NOT_FOUND,
    UNKNOWN_QUESTION,
    NotFoundError,
    SurveyValidationError,
)
from survey_tool.logic.validation import score_answer, validate_answer_for_type
from survey_tool.logic.visibility_rules import compute_visible_question_ids
from survey_tool.models.response import (
    ResponseItem,
    SubmitAnswerItem,
    SubmitResponseRequest,
    SubmitResponseResult,
    SurveyResponse,
)
from survey_tool.models.survey import Question, Survey

logger = logging.getLogger(__name__)

SurveyGetter = Callable[[str], Optional[Survey]]
ResponseWriter = Callable[[SurveyResponse], None]


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_submission(survey: Survey, answers: List[SubmitAnswerItem]) -> tuple[Dict[str, SubmitAnswerItem], set[str]]:
    """Validate answers against a survey snapshot.

    Returns the answer map (later duplicates win) and the visible set so the
    scoring pass reuses exactly what validation saw.
    """
    question_by_id: Dict[str, Question] = {q.id: q for q in survey.questions}
    answers_by_question_id: Dict[str, SubmitAnswerItem] = {a.question_id: a for a in answers}

    for ans in answers:
        if ans.question_id not in question_by_id:
            raise SurveyValidationError(UNKNOWN_QUESTION)

    visible = compute_visible_question_ids(survey, answers_by_question_id)

    for ans in answers:
        if ans.question_id not in visible:
            raise SurveyValidationError(HIDDEN_QUESTION)
        validate_answer_for_type(question_by_id[ans.question_id], ans)

    return answers_by_question_id, visible


def build_response(
    survey: Survey,
    answers_by_question_id: Dict[str, SubmitAnswerItem],
    visible: set[str],
) -> SurveyResponse:
    response_id = _new_id()
    items: List[ResponseItem] = []
    total = 0
    for question in survey.ordered_questions():
        if question.id not in visible:
            continue
        ans = answers_by_question_id.get(question.id)
        if ans is None:
            continue
        item_score = score_answer(question, ans)
        total += item_score
        items.append(
            ResponseItem(
                id=_new_id(),
                survey_response_id=response_id,
                question_id=question.id,
                selected_option_ids=tuple(ans.selected_option_ids or ()),
                free_text=ans.free_text,
                item_score=item_score,
            )
        )
    return SurveyResponse(
        id=response_id,
        survey_id=survey.id,
        submitted_at=datetime.now(timezone.utc),
        total_score=total,
        items=tuple(items),
    )


def submit_response(
    survey_id: str,
    request: SubmitResponseRequest,
    *,
    get_survey: Optional[SurveyGetter] = None,
    add_response: Optional[ResponseWriter] = None,
) -> SubmitResponseResult:
    """Validate, score and persist one submission.

    Collaborators default to the SQL repositories; pass in-memory callables
    to run without a database. Persistence errors propagate unchanged.
    """
    if get_survey is None or add_response is None:
        # Module imports so tests can patch the repository functions
        from survey_tool.logic import repository_responses, repository_surveys

        get_survey = get_survey or repository_surveys.get_survey_by_id
        add_response = add_response or repository_responses.add_response

    survey = get_survey(survey_id)
    if survey is None:
        raise NotFoundError(SURVEY_NOT_FOUND)

    try:
        answers_by_question_id, visible = validate_submission(survey, request.answers)
    except SurveyValidationError as exc:
        logger.info(
            "response.rejected",
            extra={"survey_id": survey_id, "reason": exc.message, "answers": len(request.answers)},
        )
        raise

    response = build_response(survey, answers_by_question_id, visible)
    add_response(response)
    logger.info(
        "response.submitted",
        extra={
            "survey_id": survey_id,
            "response_id": response.id,
            "items": len(response.items),
            "total_score": response.total_score,
        },
    )
    return SubmitResponseResult(response_id=response.id, total_score=response.total_score)


def get_response(
    survey_id: str,
    response_id: str,
    *,
    get_response_by_id: Optional[Callable[[str], Optional[SurveyResponse]]] = None,
) -> SurveyResponse:
    """Return a stored response belonging to `survey_id` or raise NotFoundError."""
    if get_response_by_id is None:
        from survey_tool.logic import repository_responses

        get_response_by_id = repository_responses.get_response_by_id
    response = get_response_by_id(response_id)
    if response is None or response.survey_id != survey_id:
        raise NotFoundError(RESPONSE_NOT_FOUND)
    return response


__all__ = ["validate_submission", "build_response", "submit_response", "get_response"]
