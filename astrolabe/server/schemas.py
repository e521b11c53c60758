# server/schemas.py
"""
Pydantic schemas for the ASTROLABE backend.

This file defines the structured payloads used by:
- /api/astrolabe  (PlanIn, PlanOut, ReflectionStep)
- error bodies    (ErrorOut)
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Age groups
# ---------------------------------------------------------------------------

class AgeGroup(str, Enum):
    kid = "kid"
    teen = "teen"
    adult = "adult"

    @classmethod
    def normalize(cls, value: Optional[str]) -> "AgeGroup":
        """Unknown or missing values fall back to adult."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.adult


# ---------------------------------------------------------------------------
# /api/astrolabe
# ---------------------------------------------------------------------------

class PlanIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # required by the service; left optional here so a blank field is a 400
    scenario: Optional[str] = None
    description: Optional[str] = None
    virtue: Optional[str] = None
    age_group: Optional[str] = Field(default=None, alias="ageGroup")

    @field_validator("scenario", "description", "virtue", "age_group", mode="before")
    @classmethod
    def _non_string_is_missing(cls, value: Any) -> Optional[str]:
        # numbers, bools, lists: treated as absent (400 / adult)
        return value if isinstance(value, str) else None


class ReflectionStep(BaseModel):
    letter: str
    title: str
    # 2–6 sentences of guidance
    text: str


class PlanOut(BaseModel):
    # always 9, in ASTROLABE order
    steps: List[ReflectionStep]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorOut(BaseModel):
    error: str
