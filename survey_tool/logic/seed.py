"""Demonstration survey loaded at startup when seeding is enabled."""

from __future__ import annotations

import logging
from typing import Optional

from survey_tool.logic import repository_surveys
from survey_tool.logic.survey_authoring import create_survey
from survey_tool.models.authoring import SurveyUpsertRequest
from survey_tool.models.question_type import QuestionType

logger = logging.getLogger(__name__)


DEMO_SURVEY = {
    "title": "Workplace Tools Feedback",
    "description": "Tell us how your team plans, tracks and reports its work.",
    "questions": [
        {
            "ref": "familiarity",
            "text": "How familiar are you with our planning tools?",
            "type": QuestionType.SINGLE_CHOICE,
            "order": 1,
            "options": [
                {"ref": "daily", "text": "I use them every day", "weight": 4},
                {"ref": "exploring", "text": "I am still exploring them", "weight": 2},
            ],
        },
        {
            "ref": "features",
            "text": "Which features matter most to you? (choose any)",
            "type": QuestionType.MULTIPLE_CHOICE,
            "order": 2,
            "parent_question_ref": "familiarity",
            "visible_when_selected_option_refs": ["daily", "exploring"],
            "options": [
                {"text": "Sprint boards", "weight": 4},
                {"text": "Reporting dashboards", "weight": 3},
                {"text": "Integrations with chat tools", "weight": 5},
            ],
        },
        {
            "ref": "referral",
            "text": "If a colleague recommended us, what stood out?",
            "type": QuestionType.FREE_TEXT,
            "order": 3,
            "parent_question_ref": "familiarity",
            "visible_when_selected_option_refs": ["exploring"],
        },
        {
            "ref": "first_use",
            "text": "Where would you apply the tools first?",
            "type": QuestionType.SINGLE_CHOICE,
            "order": 4,
            "options": [
                {"text": "Project planning", "weight": 5},
                {"text": "Incident tracking", "weight": 4},
                {"text": "Hiring pipelines", "weight": 3},
            ],
        },
        {
            "ref": "team_size",
            "text": "Which team sizes do you work with? (choose any)",
            "type": QuestionType.MULTIPLE_CHOICE,
            "order": 5,
            "options": [
                {"text": "1-5 people", "weight": 2},
                {"text": "6-20 people", "weight": 3},
                {"text": "21-100 people", "weight": 4},
                {"text": "More than 100 people", "weight": 4},
            ],
        },
        {
            "ref": "access",
            "text": "How would you prefer to access your data?",
            "type": QuestionType.SINGLE_CHOICE,
            "order": 6,
            "options": [
                {"ref": "web", "text": "Web application", "weight": 4},
                {"ref": "api", "text": "API into our own systems", "weight": 5},
                {"ref": "export", "text": "Scheduled exports", "weight": 3},
            ],
        },
        {
            "ref": "decision",
            "text": "Describe one decision you would like better data for",
            "type": QuestionType.FREE_TEXT,
            "order": 7,
        },
        {
            "ref": "first_report",
            "text": "Which report would you try first?",
            "type": QuestionType.SINGLE_CHOICE,
            "order": 8,
            "parent_question_ref": "access",
            "visible_when_selected_option_refs": ["web"],
            "options": [
                {"text": "Single project summary", "weight": 3},
                {"text": "Portfolio dashboard", "weight": 4},
                {"text": "Executive overview", "weight": 2},
            ],
        },
    ],
}


def ensure_seeded() -> Optional[str]:
    """Create the demo survey when the store is empty; return its id if created."""
    if repository_surveys.list_surveys():
        logger.info("seed.skipped reason=surveys_present")
        return None
    survey_id = create_survey(SurveyUpsertRequest.model_validate(DEMO_SURVEY))
    logger.info("seed.created survey_id=%s", survey_id)
    return survey_id


__all__ = ["DEMO_SURVEY", "ensure_seeded"]
