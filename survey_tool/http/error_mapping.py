"""Central error mapping from domain error kinds to problem+json codes.

Single source of truth for HTTP statuses; handlers import from here instead
of hardcoding numbers.
"""

from __future__ import annotations

ERROR_MAP = {
    "not_found": {"code": "RESOURCE_NOT_FOUND", "status": 404, "title": "Not Found"},
    "validation": {"code": "SUBMISSION_INVALID", "status": 400, "title": "Bad Request"},
    "definition_invalid": {"code": "SURVEY_DEFINITION_INVALID", "status": 400, "title": "Bad Request"},
    "error": {"code": "INTERNAL_ERROR", "status": 500, "title": "Internal Server Error"},
}


def lookup(kind: str) -> dict:
    return ERROR_MAP.get(kind, ERROR_MAP["error"])


__all__ = ["ERROR_MAP", "lookup"]
