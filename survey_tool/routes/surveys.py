"""Survey authoring endpoints (create, read, list, update, delete)."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Response

from survey_tool.logic import survey_authoring
from survey_tool.models.authoring import SurveyCreated, SurveySummary, SurveyUpsertRequest, SurveyView


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/surveys",
    summary="List surveys (id and title only)",
    operation_id="listSurveys",
    response_model=List[SurveySummary],
    tags=["Surveys"],
)
def list_surveys() -> List[SurveySummary]:
    return survey_authoring.list_survey_summaries()


@router.get(
    "/surveys/{survey_id}",
    summary="Get a survey with its questions, options and visibility rules",
    operation_id="getSurvey",
    response_model=SurveyView,
    tags=["Surveys"],
)
def get_survey(survey_id: str) -> SurveyView:
    return survey_authoring.get_survey_view(survey_id)


@router.post(
    "/surveys",
    summary="Create a survey",
    operation_id="createSurvey",
    status_code=201,
    response_model=SurveyCreated,
    tags=["Surveys"],
)
def create_survey(body: SurveyUpsertRequest, response: Response) -> SurveyCreated:
    survey_id = survey_authoring.create_survey(body)
    response.headers["Location"] = f"/api/v1/surveys/{survey_id}"
    return SurveyCreated(id=survey_id)


@router.put(
    "/surveys/{survey_id}",
    summary="Replace a survey definition (question and option ids are regenerated)",
    operation_id="updateSurvey",
    status_code=204,
    tags=["Surveys"],
)
def update_survey(survey_id: str, body: SurveyUpsertRequest) -> Response:
    survey_authoring.update_survey(survey_id, body)
    return Response(status_code=204)


@router.delete(
    "/surveys/{survey_id}",
    summary="Delete a survey",
    operation_id="deleteSurvey",
    status_code=204,
    tags=["Surveys"],
)
def delete_survey(survey_id: str) -> Response:
    survey_authoring.delete_survey(survey_id)
    logger.info("survey.delete_requested survey_id=%s", survey_id)
    return Response(status_code=204)
