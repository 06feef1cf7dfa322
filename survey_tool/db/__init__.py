"""Database bootstrap utilities for the survey service.

Exposes engine construction, a transactional connection helper and the SQL
migrations runner. ORM models are deliberately absent; repositories in
`survey_tool/logic/` speak SQL directly.
"""

from survey_tool.db.base import get_engine, reset_engine, transaction
from survey_tool.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "reset_engine",
    "transaction",
    "apply_migrations",
]
