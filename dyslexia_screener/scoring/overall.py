"""
Overall combined risk across the three assessment channels.

    overall = round_half_up(mean(channel values present))

Channels
--------
cognitive   : ``compute_risk(results).score``: only when at least one record
              carried a usable score.
checklist   : ``checklist_channel_score(checklist)``: mean over answered
              categories.
handwriting : ``handwriting.indicator_score`` passed through (clamped).

A channel with no data is excluded from the mean, so skipping an assessment
type never pulls the result toward zero or toward "High".  With no channel
at all the result is the ``Low / 0`` safe default.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.scoring.checklist import checklist_channel_score
from dyslexia_screener.scoring.engine import (
    CONCERN_THRESHOLD,
    DEFAULT_WEIGHT,
    RISK_TIER_THRESHOLDS,
    ResultInput,
    RiskAssessment,
    clamp_score,
    classify_risk_level,
    compute_risk,
    round_half_up,
)
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel

CHANNEL_COGNITIVE = "cognitive"
CHANNEL_CHECKLIST = "checklist"
CHANNEL_HANDWRITING = "handwriting"


@dataclass(frozen=True)
class OverallRisk:
    """Blended risk across channels.

    Attributes:
        score:     Integer 0–100.
        level:     Tier derived from ``score``.
        channels:  Channel name → value that entered the mean (only channels
                   with data appear).
        cognitive: The full cognitive assessment used for the blend.
    """

    score:     int
    level:     RiskLevel
    channels:  dict[str, float] = field(default_factory=dict)
    cognitive: RiskAssessment | None = None

    @property
    def has_data(self) -> bool:
        return bool(self.channels)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "channels": {k: round(v, 2) for k, v in self.channels.items()},
        }


def compute_overall_risk(
    results:     Iterable[ResultInput] = (),
    checklist:   ChecklistResult | None = None,
    handwriting: HandwritingResult | None = None,
    weights:     Mapping[str, float] | None = None,
    thresholds:  Sequence[tuple[float, RiskLevel]] = RISK_TIER_THRESHOLDS,
    concern_threshold: float = CONCERN_THRESHOLD,
    default_weight:    float = DEFAULT_WEIGHT,
) -> OverallRisk:
    """Blend the cognitive, checklist and handwriting channels.

    Args:
        results:     Cognitive test results (records or wire mappings).
        checklist:   Checklist answers, or ``None`` if not taken.
        handwriting: Handwriting analysis, or ``None`` if not taken.
        weights:     Optional cognitive weight override.
        thresholds:  Tier thresholds shared by all channels.
        concern_threshold: Passed through to ``compute_risk()``.
        default_weight:    Passed through to ``compute_risk()``.

    Returns:
        ``OverallRisk``.
    """
    channels: dict[str, float] = {}

    cognitive = compute_risk(
        results,
        weights=weights,
        thresholds=thresholds,
        concern_threshold=concern_threshold,
        default_weight=default_weight,
    )
    if cognitive.tests_scored > 0:
        channels[CHANNEL_COGNITIVE] = float(cognitive.score)

    checklist_value = checklist_channel_score(checklist)
    if checklist_value is not None:
        channels[CHANNEL_CHECKLIST] = checklist_value

    if handwriting is not None:
        hw = clamp_score(handwriting.indicator_score)
        if hw is not None:
            channels[CHANNEL_HANDWRITING] = hw

    if not channels:
        return OverallRisk(score=0, level=RiskLevel.LOW, channels={}, cognitive=cognitive)

    score = round_half_up(sum(channels.values()) / len(channels))
    return OverallRisk(
        score=score,
        level=classify_risk_level(score, thresholds),
        channels=channels,
        cognitive=cognitive,
    )
