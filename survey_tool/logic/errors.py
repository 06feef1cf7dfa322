"""Domain error taxonomy.

NotFoundError marks a referenced resource as absent. SurveyValidationError
carries a fixed, human-readable reason for a rejected submission; its
SurveyDefinitionError subclass covers survey definitions whose refs do not
resolve.
Collaborator failures such as SQLAlchemy errors are never wrapped.
"""

from __future__ import annotations

# Submission reasons
UNKNOWN_QUESTION = "Answer references unknown question"
HIDDEN_QUESTION = "Answer provided for hidden question"
FREE_TEXT_WITH_OPTIONS = "FreeText question cannot contain selected options"
CHOICE_WITHOUT_OPTIONS = "Choice question requires selected options"
UNKNOWN_OPTION = "Answer references unknown option"
SINGLE_CHOICE_COUNT = "SingleChoice requires exactly one selected option"

# Authoring reasons
DUPLICATE_QUESTION_REF = "Duplicate question reference"
DUPLICATE_OPTION_REF = "Duplicate option reference"
UNKNOWN_PARENT_REF = "Parent question reference not found"
SELF_PARENT_REF = "Question cannot be its own parent"
UNKNOWN_TRIGGER_OPTION_REF = "Visibility rule references unknown option"

SURVEY_NOT_FOUND = "Survey not found"
RESPONSE_NOT_FOUND = "Response not found"


class SurveyToolError(Exception):
    """Base class for errors raised by service logic."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SurveyToolError):
    kind = "not_found"


class SurveyValidationError(SurveyToolError):
    kind = "validation"


class SurveyDefinitionError(SurveyValidationError):
    """A survey definition whose references do not resolve."""

    kind = "definition_invalid"


__all__ = [
    "SurveyToolError",
    "NotFoundError",
    "SurveyValidationError",
    "SurveyDefinitionError",
    "UNKNOWN_QUESTION",
    "HIDDEN_QUESTION",
    "FREE_TEXT_WITH_OPTIONS",
    "CHOICE_WITHOUT_OPTIONS",
    "UNKNOWN_OPTION",
    "SINGLE_CHOICE_COUNT",
    "DUPLICATE_QUESTION_REF",
    "DUPLICATE_OPTION_REF",
    "UNKNOWN_PARENT_REF",
    "SELF_PARENT_REF",
    "UNKNOWN_TRIGGER_OPTION_REF",
    "SURVEY_NOT_FOUND",
    "RESPONSE_NOT_FOUND",
]
