"""QuestionType enumeration.

Integer wire values are part of the public API contract:
0 = single choice, 1 = multiple choice, 2 = free text.
"""

from __future__ import annotations

from enum import IntEnum


class QuestionType(IntEnum):
    SINGLE_CHOICE = 0
    MULTIPLE_CHOICE = 1
    FREE_TEXT = 2

    @property
    def is_choice(self) -> bool:
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)


__all__ = ["QuestionType"]
