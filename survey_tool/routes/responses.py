"""Response submission and read-back endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response

from survey_tool.logic import response_submission
from survey_tool.models.response import SubmitResponseRequest, SubmitResponseResult, SurveyResponse


router = APIRouter()


@router.post(
    "/surveys/{survey_id}/responses",
    summary="Submit answers; validates visibility and type rules and returns the total score",
    operation_id="submitResponse",
    status_code=201,
    response_model=SubmitResponseResult,
    tags=["Responses"],
)
def submit_response(survey_id: str, body: SubmitResponseRequest, response: Response) -> SubmitResponseResult:
    result = response_submission.submit_response(survey_id, body)
    response.headers["Location"] = f"/api/v1/surveys/{survey_id}/responses/{result.response_id}"
    return result


@router.get(
    "/surveys/{survey_id}/responses/{response_id}",
    summary="Get a stored response with its scored items",
    operation_id="getResponse",
    response_model=SurveyResponse,
    tags=["Responses"],
)
def get_response(survey_id: str, response_id: str) -> SurveyResponse:
    return response_submission.get_response(survey_id, response_id)
