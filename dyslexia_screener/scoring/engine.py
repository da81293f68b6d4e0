"""
Cognitive risk scoring: converts completed test results into a weighted
risk score, a three-tier risk level, and the list of concern areas.

Score formula (weighted mean over the tests actually present)
--------------------------------------------------------------
    risk = round_half_up(
        sum((100 - clamp(score)) * weight(test_id))
        / sum(weight(test_id))
    )

The inversion ``100 - score`` turns percent-correct (higher is better) into
risk (higher is worse).  Normalising by the weights *present* means a user
who completed 2 of 6 tests is scored on those 2 tests, not diluted toward
"Low" by the 4 missing ones.

Weights (``TEST_WEIGHTS``)
--------------------------
    rapid-naming        0.25
    phonemic-awareness  0.25
    working-memory      0.15
    visual-processing   0.15
    processing-speed    0.10
    sequencing          0.10
    <any other id>      0.10  (DEFAULT_WEIGHT)

Tiers (``RISK_TIER_THRESHOLDS``, lower bound inclusive)
--------------------------------------------------------
    score >= 70 → High
    score >= 40 → Moderate
    otherwise   → Low

Concern areas
-------------
Every test whose clamped score is below ``CONCERN_THRESHOLD`` (60), in the
order its record appears in the input.

Failure policy
--------------
Nothing in this module raises on bad data.  Empty input, unscored records
and uncoercible mappings all fall back toward the ``Low / 0`` safe default.
Records are never mutated.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from dyslexia_screener.models.result import SCORE_MAX, SCORE_MIN, ResultRecord, coerce_finite
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel, TestId

logger = logging.getLogger(__name__)

TEST_WEIGHTS: dict[str, float] = {
    TestId.RAPID_NAMING.value:       0.25,
    TestId.PHONEMIC_AWARENESS.value: 0.25,
    TestId.WORKING_MEMORY.value:     0.15,
    TestId.VISUAL_PROCESSING.value:  0.15,
    TestId.PROCESSING_SPEED.value:   0.10,
    TestId.SEQUENCING.value:         0.10,
}
DEFAULT_WEIGHT = 0.10

# Checked in order; first lower bound reached wins.
RISK_TIER_THRESHOLDS: tuple[tuple[float, RiskLevel], ...] = (
    (70.0, RiskLevel.HIGH),
    (40.0, RiskLevel.MODERATE),
)

CONCERN_THRESHOLD = 60.0

ResultInput = ResultRecord | Mapping[str, Any]


@dataclass(frozen=True)
class RiskAssessment:
    """Output of ``compute_risk()``.

    Attributes:
        score:        Integer risk percentage, 0–100.
        level:        Tier derived from ``score``.
        areas:        Test ids scoring below the concern threshold.
        tests_scored: Number of records that contributed to ``score``.
    """

    score:        int
    level:        RiskLevel
    areas:        list[str] = field(default_factory=list)
    tests_scored: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "level": self.level.value, "areas": list(self.areas)}


def safe_default() -> RiskAssessment:
    """The ``Low / 0`` result returned when nothing can be scored."""
    return RiskAssessment(score=0, level=RiskLevel.LOW, areas=[], tests_scored=0)


# ── Primitives ────────────────────────────────────────────────────────────────

def clamp_score(value: Any) -> float | None:
    """Clamp ``value`` to ``[0, 100]``; ``None`` if missing or non-finite."""
    f = coerce_finite(value)
    if f is None:
        return None
    return max(SCORE_MIN, min(SCORE_MAX, f))


def weight_for(
    test_id: str,
    weights: Mapping[str, float] | None = None,
    default: float = DEFAULT_WEIGHT,
) -> float:
    """Weight for ``test_id``; ids missing from the table get ``default``."""
    table = TEST_WEIGHTS if weights is None else weights
    return table.get(test_id, default)


def classify_risk_level(
    score: float,
    thresholds: Sequence[tuple[float, RiskLevel]] = RISK_TIER_THRESHOLDS,
) -> RiskLevel:
    """Map a 0–100 risk score to its tier (lower bounds inclusive)."""
    for lower, level in thresholds:
        if score >= lower:
            return level
    return RiskLevel.LOW


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


# ── Input preparation ─────────────────────────────────────────────────────────

def _coerce_record(raw: ResultInput) -> ResultRecord | None:
    if isinstance(raw, ResultRecord):
        return raw
    if isinstance(raw, Mapping):
        try:
            return ResultRecord.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed result record: %s", exc.errors()[0].get("msg"))
            return None
    logger.warning("Skipping result of unsupported type %s", type(raw).__name__)
    return None


def _is_newer(candidate: datetime | None, current: datetime | None) -> bool:
    # Ties and missing timestamps go to the later record (last write wins).
    if candidate is None:
        return current is None
    if current is None:
        return True
    return candidate >= current


def latest_per_test(results: Iterable[ResultInput]) -> list[ResultRecord]:
    """Collapse duplicate ``test_id`` entries to the most recent record.

    The most recent ``completed_at`` wins.  A record without a timestamp never
    replaces a timestamped one; between equals, the later input wins.
    A newer record with no usable score still wins, so that test is left
    unscored.  The returned list is ordered by the input position of each
    surviving record.
    """
    winners: dict[str, tuple[int, ResultRecord]] = {}
    for idx, raw in enumerate(results):
        record = _coerce_record(raw)
        if record is None:
            continue
        existing = winners.get(record.test_id)
        if existing is None or _is_newer(record.completed_at, existing[1].completed_at):
            winners[record.test_id] = (idx, record)
        else:
            logger.debug(
                "Dropping older duplicate result for '%s' (completed_at=%s)",
                record.test_id, record.completed_at,
            )
    return [rec for _, rec in sorted(winners.values(), key=lambda pair: pair[0])]


# ── Engine ────────────────────────────────────────────────────────────────────

def compute_risk(
    results:           Iterable[ResultInput],
    weights:           Mapping[str, float] | None = None,
    thresholds:        Sequence[tuple[float, RiskLevel]] = RISK_TIER_THRESHOLDS,
    concern_threshold: float = CONCERN_THRESHOLD,
    default_weight:    float = DEFAULT_WEIGHT,
) -> RiskAssessment:
    """Compute the weighted cognitive risk for one user's results.

    Args:
        results:           ResultRecords or raw wire-shaped mappings.
        weights:           Override for ``TEST_WEIGHTS`` (config-driven).
        default_weight:    Weight for ids missing from the table.
        thresholds:        Override for ``RISK_TIER_THRESHOLDS``.
        concern_threshold: Scores strictly below this are concern areas.

    Returns:
        ``RiskAssessment``; the ``Low / 0`` safe default when nothing can be
        scored.
    """
    records = latest_per_test(results)
    if not records:
        return safe_default()

    weighted_sum = 0.0
    total_weight = 0.0
    areas: list[str] = []
    scored = 0

    for record in records:
        score = clamp_score(record.score)
        if score is None:
            logger.debug("Result for '%s' has no usable score; excluded.", record.test_id)
            continue
        w = weight_for(record.test_id, weights, default_weight)
        weighted_sum += (SCORE_MAX - score) * w
        total_weight += w
        scored += 1
        if score < concern_threshold:
            areas.append(record.test_id)

    if total_weight <= 0:
        return RiskAssessment(
            score=0,
            level=classify_risk_level(0, thresholds),
            areas=areas,
            tests_scored=scored,
        )

    risk = round_half_up(weighted_sum / total_weight)
    risk = max(0, min(100, risk))
    assessment = RiskAssessment(
        score=risk,
        level=classify_risk_level(risk, thresholds),
        areas=areas,
        tests_scored=scored,
    )
    logger.debug(
        "Cognitive risk: score=%d level=%s areas=%s (tests_scored=%d)",
        assessment.score, assessment.level, assessment.areas, scored,
    )
    return assessment
