"""
Symptom checklist and handwriting-analysis result models.

``ChecklistResult`` is the second input channel. Its polarity is the
opposite of cognitive scores: each ``True`` answer means a trait is present,
so a *higher* percentage of "yes" answers means *higher* risk.

Two payload shapes are accepted:

  - Current: ``{"responses": {"r1": true, ...}, "ageGroup": "school"}``
  - Legacy:  a bare ``{"r1": true, "r2": false, ...}`` map (stored by older
    checklist pages without an age group); it is read with the default
    ``school`` age group.

``HandwritingResult`` is the optional third channel: a single 0–100
indicator score produced by the handwriting analyser, where higher means
more dyslexia indicators were found.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from dyslexia_screener.models.result import SCORE_MAX, SCORE_MIN, coerce_finite
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup
from dyslexia_screener.utils.time_utils import ensure_utc


class ChecklistResult(BaseModel):
    """Answers to the symptom checklist.

    Attributes:
        responses: Item id → ``True`` (trait present), ``False`` (absent) or
            ``None`` (unanswered). Ids outside the item bank are kept but
            never scored.
        age_group: Selects the active item subset (``ageGroup``).
        completed_at: When the checklist was submitted, if known.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    responses: dict[str, Optional[bool]] = Field(default_factory=dict)
    age_group: AgeGroup = AgeGroup.SCHOOL
    completed_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_shape(cls, data: Any) -> Any:
        if isinstance(data, dict) and data and "responses" not in data:
            if all(isinstance(v, bool) or v is None for v in data.values()):
                return {"responses": data}
        return data

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def answered_count(self) -> int:
        return sum(1 for v in self.responses.values() if v is not None)


class HandwritingResult(BaseModel):
    """Output of the handwriting analyser.

    Attributes:
        indicator_score: 0–100, higher = more indicators
            (wire name ``dyslexiaIndicatorScore``).
        features: Identified features, e.g. ``"Letter reversals detected"``.
        recommendations: Analyser-provided advice, shown verbatim.
        completed_at: When the sample was analysed, if known.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    indicator_score: float = Field(alias="dyslexiaIndicatorScore")
    features: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    completed_at: Optional[datetime] = None

    @field_validator("indicator_score", mode="before")
    @classmethod
    def validate_indicator_score(cls, v: Any) -> float:
        score = coerce_finite(v)
        if score is None:
            raise ValueError(f"dyslexiaIndicatorScore must be a finite number, got {v!r}.")
        if not SCORE_MIN <= score <= SCORE_MAX:
            raise ValueError(f"dyslexiaIndicatorScore must be in [0, 100], got {score}.")
        return score

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None
