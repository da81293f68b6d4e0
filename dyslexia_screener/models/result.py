"""
Cognitive test result model: the shape every scoring pass consumes.

``ResultRecord`` mirrors the record each test component emits on completion::

    {"testId": "working-memory", "score": 62, "timeSpent": 143.2,
     "completedAt": "2025-03-01T10:15:00Z", "responses": [...]}

Both the camelCase wire names and snake_case field names are accepted.

The model is deliberately *tolerant*: a missing, non-numeric or non-finite
``score`` becomes ``None`` ("no score") instead of failing validation, and
out-of-range scores are kept as-is. The scoring engine excludes unscored
records and clamps the rest, so malformed data never inflates risk and never
raises out of a scoring call. An unparseable ``completedAt`` is
dropped to ``None`` and the record is still scored.

The *store boundary* is strict: ``validate_result_payload()`` rejects unknown
test ids and unusable scores before a payload is persisted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from dyslexia_screener.taxonomy.assessment_taxonomy import VALID_TEST_IDS
from dyslexia_screener.utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 100.0

_DATETIME = TypeAdapter(datetime)


class InvalidResultError(ValueError):
    """Raised when a result payload is rejected at the store boundary."""


def coerce_finite(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if that is not possible.

    Booleans are rejected (``True`` is not a score). Numeric strings such as
    ``"72.5"`` are accepted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
    elif isinstance(value, str):
        try:
            f = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return f if math.isfinite(f) else None


class ResultRecord(BaseModel):
    """One completed cognitive test.

    Attributes:
        test_id: Test identifier (``testId``); normally one of ``TestId``.
            Unknown ids are allowed here and receive the default weight.
        score: Percent correct in ``[0, 100]``; ``None`` when missing or
            unusable. Higher is better.
        time_spent: Seconds elapsed (``timeSpent``); display only.
        completed_at: UTC completion timestamp (``completedAt``); used to
            resolve duplicate ``test_id`` entries. Naive values are read as UTC.
        responses: Opaque per-item detail, passed through untouched.
        interpretation: Label attached after scoring; never an input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    test_id: str
    score: Optional[float] = None
    time_spent: float = 0.0
    completed_at: Optional[datetime] = None
    responses: list[Any] = Field(default_factory=list)
    interpretation: Optional[str] = None

    @field_validator("test_id", mode="before")
    @classmethod
    def normalize_test_id(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"testId must be a non-empty string, got {v!r}.")
        return v.strip().lower()

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> Optional[float]:
        return coerce_finite(v)

    @field_validator("time_spent", mode="before")
    @classmethod
    def coerce_time_spent(cls, v: Any) -> float:
        seconds = coerce_finite(v)
        if seconds is None or seconds < 0:
            return 0.0
        return seconds

    @field_validator("completed_at", mode="before")
    @classmethod
    def coerce_completed_at(cls, v: Any) -> Optional[datetime]:
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v
        try:
            return _DATETIME.validate_python(v)
        except ValidationError:
            logger.warning("Ignoring unparseable completedAt %r", v)
            return None

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def has_score(self) -> bool:
        return self.score is not None

    def to_payload(self) -> dict[str, Any]:
        """Serialise back to the camelCase wire shape (JSON-safe)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_result_payload(payload: Any) -> ResultRecord:
    """Validate a raw payload at the store boundary.

    Rules:
      - ``testId`` must be one of the known ``TestId`` values.
      - ``score`` must be present, numeric and finite.
      - Scores outside ``[0, 100]`` are accepted but logged; the engine
        clamps them when scoring.

    Args:
        payload: Mapping in wire (camelCase) or snake_case form.

    Returns:
        Validated ``ResultRecord``.

    Raises:
        InvalidResultError: If the payload must not be stored.
    """
    if not isinstance(payload, Mapping):
        raise InvalidResultError(f"Result payload must be an object, got {type(payload).__name__}.")

    raw_id = payload.get("testId", payload.get("test_id"))
    test_id = raw_id.strip().lower() if isinstance(raw_id, str) else None
    if test_id not in VALID_TEST_IDS:
        raise InvalidResultError(
            f"Unknown testId {raw_id!r}. Must be one of {sorted(VALID_TEST_IDS)}."
        )

    if coerce_finite(payload.get("score")) is None:
        raise InvalidResultError(
            f"Result for '{test_id}' has no usable score: {payload.get('score')!r}."
        )

    try:
        record = ResultRecord.model_validate(payload)
    except ValidationError as exc:
        raise InvalidResultError(f"Result for '{test_id}' failed validation: {exc}") from exc

    assert record.score is not None
    if not SCORE_MIN <= record.score <= SCORE_MAX:
        logger.warning(
            "Result for '%s' has out-of-range score %.2f; it will be clamped when scored.",
            record.test_id, record.score,
        )
    return record
