"""FastAPI application package for the Survey Tool service.

Exposes the application factory. Branching visibility, answer validation and
scoring live in `survey_tool/logic/`; HTTP handlers live in
`survey_tool/routes/`.
"""

from __future__ import annotations

from survey_tool.main import create_app

__all__ = ["create_app"]
