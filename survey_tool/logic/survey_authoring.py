"""Survey authoring: create, read, list, update and delete survey definitions.

Every save mints fresh ids for questions and options. Conditional links in the
request are expressed with client `ref` tokens and remapped onto the new ids,
so updates (delete-then-recreate under the same survey id) keep parent links
and trigger options pointing at the right records.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Dict, List, Optional

from survey_tool.logic.errors import (
    DUPLICATE_OPTION_REF,
    DUPLICATE_QUESTION_REF,
    SELF_PARENT_REF,
    SURVEY_NOT_FOUND,
    UNKNOWN_PARENT_REF,
    UNKNOWN_TRIGGER_OPTION_REF,
    NotFoundError,
    SurveyDefinitionError,
)
from survey_tool.models.authoring import (
    AnswerOptionView,
    QuestionView,
    SurveySummary,
    SurveyUpsertRequest,
    SurveyView,
)
from survey_tool.models.survey import AnswerOption, Question, Survey, VisibilityRule

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def build_survey(survey_id: str, request: SurveyUpsertRequest) -> Survey:
    """Translate an upsert request into an immutable Survey with fresh ids.

    Raises SurveyDefinitionError for duplicate refs, unknown or self parents
    and trigger refs that are not options of the parent. A parent link with
    no trigger options yields a question without a rule (never visible).
    """
    ordered = sorted(request.questions, key=lambda q: q.order)

    question_ids: List[str] = [_new_id() for _ in ordered]
    question_id_by_ref: Dict[str, str] = {}
    option_ids: List[List[str]] = []
    option_id_by_ref: Dict[str, Dict[str, str]] = {}

    for q, qid in zip(ordered, question_ids):
        if q.ref is not None:
            if q.ref in question_id_by_ref:
                raise SurveyDefinitionError(DUPLICATE_QUESTION_REF)
            question_id_by_ref[q.ref] = qid
        ids = [_new_id() for _ in q.options]
        option_ids.append(ids)
        refs: Dict[str, str] = {}
        for opt, oid in zip(q.options, ids):
            if opt.ref is not None:
                if opt.ref in refs:
                    raise SurveyDefinitionError(DUPLICATE_OPTION_REF)
                refs[opt.ref] = oid
        option_id_by_ref[qid] = refs

    questions: List[Question] = []
    for q, qid, oids in zip(ordered, question_ids, option_ids):
        parent_id: Optional[str] = None
        rule: Optional[VisibilityRule] = None
        if q.parent_question_ref is not None:
            parent_id = question_id_by_ref.get(q.parent_question_ref)
            if parent_id is None:
                raise SurveyDefinitionError(UNKNOWN_PARENT_REF)
            if parent_id == qid:
                raise SurveyDefinitionError(SELF_PARENT_REF)
            if q.visible_when_selected_option_refs:
                parent_options = option_id_by_ref[parent_id]
                triggers: List[str] = []
                for ref in q.visible_when_selected_option_refs:
                    if ref not in parent_options:
                        raise SurveyDefinitionError(UNKNOWN_TRIGGER_OPTION_REF)
                    triggers.append(parent_options[ref])
                rule = VisibilityRule(
                    parent_question_id=parent_id,
                    visible_when_selected_option_ids=tuple(dict.fromkeys(triggers)),
                )
            else:
                logger.warning("survey.orphaned_condition survey_id=%s question_ref=%s", survey_id, q.ref)
        questions.append(
            Question(
                id=qid,
                text=q.text,
                type=q.type,
                order=q.order,
                parent_question_id=parent_id,
                visibility_rule=rule,
                options=tuple(
                    AnswerOption(id=oid, text=opt.text, weight=opt.weight) for opt, oid in zip(q.options, oids)
                ),
            )
        )

    return Survey(id=survey_id, title=request.title, description=request.description, questions=tuple(questions))


def to_survey_view(survey: Survey) -> SurveyView:
    return SurveyView(
        id=survey.id,
        title=survey.title,
        description=survey.description,
        questions=[
            QuestionView(
                id=q.id,
                text=q.text,
                type=q.type,
                order=q.order,
                parent_question_id=q.parent_question_id,
                visible_when_selected_option_ids=(
                    list(q.visibility_rule.visible_when_selected_option_ids) if q.visibility_rule else None
                ),
                options=[AnswerOptionView(id=o.id, text=o.text, weight=o.weight) for o in q.options],
            )
            for q in survey.ordered_questions()
        ],
    )


def _repo():
    # Module import so tests can patch the repository functions
    from survey_tool.logic import repository_surveys

    return repository_surveys


def create_survey(
    request: SurveyUpsertRequest,
    *,
    add_survey: Optional[Callable[[Survey], None]] = None,
) -> str:
    survey = build_survey(_new_id(), request)
    (add_survey or _repo().add_survey)(survey)
    logger.info("survey.created", extra={"survey_id": survey.id, "questions": len(survey.questions)})
    return survey.id


def update_survey(
    survey_id: str,
    request: SurveyUpsertRequest,
    *,
    replace_survey: Optional[Callable[[Survey], bool]] = None,
) -> None:
    survey = build_survey(survey_id, request)
    if not (replace_survey or _repo().replace_survey)(survey):
        raise NotFoundError(SURVEY_NOT_FOUND)
    logger.info("survey.updated", extra={"survey_id": survey_id, "questions": len(survey.questions)})


def delete_survey(
    survey_id: str,
    *,
    delete_survey_rows: Optional[Callable[[str], bool]] = None,
) -> None:
    if not (delete_survey_rows or _repo().delete_survey)(survey_id):
        raise NotFoundError(SURVEY_NOT_FOUND)


def get_survey_view(
    survey_id: str,
    *,
    get_survey: Optional[Callable[[str], Optional[Survey]]] = None,
) -> SurveyView:
    survey = (get_survey or _repo().get_survey_by_id)(survey_id)
    if survey is None:
        raise NotFoundError(SURVEY_NOT_FOUND)
    return to_survey_view(survey)


def list_survey_summaries(
    *,
    list_surveys: Optional[Callable[[], List[tuple[str, str]]]] = None,
) -> List[SurveySummary]:
    rows = (list_surveys or _repo().list_surveys)()
    return [SurveySummary(id=sid, title=title) for sid, title in rows]


__all__ = [
    "build_survey",
    "to_survey_view",
    "create_survey",
    "update_survey",
    "delete_survey",
    "get_survey_view",
    "list_survey_summaries",
]
