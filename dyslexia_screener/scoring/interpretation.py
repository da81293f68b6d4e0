"""
Per-test interpretation labels and per-test risk tiers.

Labels are attached to copies of the records after scoring; they are never
read back as inputs.

    clamped score >= 80 → "Above average <domain>"
    clamped score >= 60 → "Average <domain>"
    clamped score >= 40 → "Below average <domain>"
    otherwise           → "Significantly below average <domain>"

Per-test risk inverts the score (higher percent-correct = lower risk):
    score >= 70 → Low,  score >= 40 → Moderate,  otherwise High.
"""

from __future__ import annotations

from collections.abc import Iterable

from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.scoring.engine import ResultInput, clamp_score, latest_per_test
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel, TestId

_DOMAIN_PHRASES: dict[str, str] = {
    TestId.RAPID_NAMING.value:       "rapid naming speed",
    TestId.PHONEMIC_AWARENESS.value: "phonemic awareness",
    TestId.WORKING_MEMORY.value:     "working memory capacity",
    TestId.VISUAL_PROCESSING.value:  "visual processing",
    TestId.PROCESSING_SPEED.value:   "processing speed",
    TestId.SEQUENCING.value:         "sequencing ability",
}

_LABEL_BANDS: tuple[tuple[float, str], ...] = (
    (80.0, "Above average"),
    (60.0, "Average"),
    (40.0, "Below average"),
)


def interpret_score(test_id: str, score: float | None) -> str | None:
    """Natural-language label for one test score; ``None`` if unscored."""
    clamped = clamp_score(score)
    if clamped is None:
        return None
    domain = _DOMAIN_PHRASES.get(test_id, "performance")
    for lower, prefix in _LABEL_BANDS:
        if clamped >= lower:
            return f"{prefix} {domain}"
    return f"Significantly below average {domain}"


def per_test_risk_level(score: float | None) -> RiskLevel | None:
    """Risk tier for a single test score (inverted polarity)."""
    clamped = clamp_score(score)
    if clamped is None:
        return None
    if clamped >= 70:
        return RiskLevel.LOW
    if clamped >= 40:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def attach_interpretations(results: Iterable[ResultInput]) -> list[ResultRecord]:
    """Return de-duplicated copies of ``results`` with ``interpretation`` set."""
    return [
        rec.model_copy(update={"interpretation": interpret_score(rec.test_id, rec.score)})
        for rec in latest_per_test(results)
    ]
