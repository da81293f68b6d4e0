"""
Recommendation generator: turns a risk tier plus concern areas into an
ordered, duplicate-free list of human-readable recommendations.

Output order
------------
    1. Tier block for ``risk_level``
       (with ``escalate=True`` a High tier also gets the Moderate block).
    2. One area block per id in ``areas``, in the given order:
         - the area's base line from ``AREA_RECOMMENDATIONS``;
         - the ``INTENSIVE_AREA_SUPPORT`` line when that test's clamped score
           in ``results`` is below ``severe_threshold``.
       Ids with no rule are skipped silently.
    3. ``GENERAL_RECOMMENDATIONS``, always.

A string already emitted is never emitted again, so overlapping rules cannot
produce duplicates.  The function is pure: same inputs, same list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from dyslexia_screener.recommendations.rules import (
    AREA_RECOMMENDATIONS,
    GENERAL_RECOMMENDATIONS,
    INTENSIVE_AREA_SUPPORT,
    SEVERE_AREA_THRESHOLD,
    TIER_RECOMMENDATIONS,
)
from dyslexia_screener.scoring.engine import ResultInput, clamp_score, latest_per_test
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel

logger = logging.getLogger(__name__)


def _resolve_level(risk_level: RiskLevel | str) -> RiskLevel | None:
    if isinstance(risk_level, RiskLevel):
        return risk_level
    try:
        return RiskLevel(risk_level)
    except ValueError:
        logger.warning("Unrecognised risk level %r; tier recommendations skipped.", risk_level)
        return None


def tier_block(risk_level: RiskLevel | str, escalate: bool = False) -> list[str]:
    """Fixed recommendations for one tier."""
    level = _resolve_level(risk_level)
    if level is None:
        return []
    block = list(TIER_RECOMMENDATIONS[level])
    if escalate and level is RiskLevel.HIGH:
        block.extend(TIER_RECOMMENDATIONS[RiskLevel.MODERATE])
    return block


def generate_recommendations(
    results:          Iterable[ResultInput],
    risk_level:       RiskLevel | str,
    areas:            Sequence[str],
    *,
    escalate:         bool = False,
    severe_threshold: float = SEVERE_AREA_THRESHOLD,
) -> list[str]:
    """Build the ordered recommendation list.

    Args:
        results:          The results that were scored (records or mappings);
                          used to detect severely low concern areas.
        risk_level:       Tier from ``compute_risk()`` (enum or its string value).
        areas:            Concern-area test ids from ``compute_risk()``.
        escalate:         Append the Moderate block after the High block.
        severe_threshold: Clamped scores below this add intensive-support text.

    Returns:
        Ordered list of unique recommendation strings.
    """
    scores_by_test = {rec.test_id: clamp_score(rec.score) for rec in latest_per_test(results)}

    ordered: list[str] = []
    seen: set[str] = set()

    def _add(text: str) -> None:
        if text not in seen:
            seen.add(text)
            ordered.append(text)

    for text in tier_block(risk_level, escalate=escalate):
        _add(text)

    for test_id in areas:
        base = AREA_RECOMMENDATIONS.get(test_id)
        if base is None:
            logger.debug("No area recommendation rule for '%s'; skipped.", test_id)
            continue
        _add(base)
        score = scores_by_test.get(test_id)
        if score is not None and score < severe_threshold:
            _add(INTENSIVE_AREA_SUPPORT[test_id])

    for text in GENERAL_RECOMMENDATIONS:
        _add(text)

    return ordered
