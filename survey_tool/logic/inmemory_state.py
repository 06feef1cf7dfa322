"""In-memory survey and response stores (tests and local development).

Drop-in collaborators for the submission engine and the authoring service:
each store exposes the same callables as the SQL repositories, so they can
be passed wherever `get_survey`/`add_response` style callables are expected.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from survey_tool.models.response import SurveyResponse
from survey_tool.models.survey import Survey


class InMemorySurveyStore:
    def __init__(self) -> None:
        self._surveys: Dict[str, Survey] = {}

    def seed(self, survey: Survey) -> None:
        self._surveys[survey.id] = survey

    def get_survey_by_id(self, survey_id: str) -> Optional[Survey]:
        return self._surveys.get(survey_id)

    def list_surveys(self) -> List[tuple[str, str]]:
        return [(s.id, s.title) for s in self._surveys.values()]

    def add_survey(self, survey: Survey) -> None:
        self._surveys[survey.id] = survey

    def replace_survey(self, survey: Survey) -> bool:
        if survey.id not in self._surveys:
            return False
        self._surveys[survey.id] = survey
        return True

    def delete_survey(self, survey_id: str) -> bool:
        return self._surveys.pop(survey_id, None) is not None


class InMemoryResponseStore:
    def __init__(self) -> None:
        self.responses: Dict[str, SurveyResponse] = {}

    def add_response(self, response: SurveyResponse) -> None:
        self.responses[response.id] = response

    def get_response_by_id(self, response_id: str) -> Optional[SurveyResponse]:
        return self.responses.get(response_id)


__all__ = ["InMemorySurveyStore", "InMemoryResponseStore"]
