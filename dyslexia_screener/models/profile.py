"""
User profile model.

The profile supplies the age group used to filter checklist items when a
checklist payload does not carry one, and the header block of reports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup, age_group_for_age

Gender = Literal["male", "female", "other", "prefer-not-to-say"]
Education = Literal[
    "preschool", "elementary", "middle-school", "high-school",
    "college", "graduate", "other",
]
DiagnosisStatus = Literal["yes", "no", "unsure"]


class UserProfile(BaseModel):
    """A screened person.

    Attributes:
        user_id: Store key for this user's records.
        name: Display name.
        age: Age in years, 3–100.
        gender: Self-reported gender.
        education: Highest education level reached, or ``None``.
        has_been_diagnosed: Whether a prior dyslexia diagnosis exists.
        age_group: Explicit age group; derived from ``age`` when ``None``.
        created_at: Set by the repository on first insert.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    age: int = Field(ge=3, le=100)
    gender: Gender = "prefer-not-to-say"
    education: Optional[Education] = None
    has_been_diagnosed: DiagnosisStatus = "unsure"
    age_group: Optional[AgeGroup] = None
    created_at: Optional[datetime] = None

    @property
    def effective_age_group(self) -> AgeGroup:
        """The explicit ``age_group`` if set, else the one implied by ``age``."""
        return self.age_group or age_group_for_age(self.age)
