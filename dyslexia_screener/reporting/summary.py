"""
Assessment report assembly.

``build_assessment_report()`` runs every scoring pass for one user and
returns a plain dict (JSON-safe) that the exporters and text formatter
consume::

    {
      "generated_at":    "2025-03-01T10:20:00Z",
      "profile":         {...} | None,
      "tests":           [ {test_id, test, score, risk_level, interpretation,
                            time_spent_seconds, time_spent, completed_date}, ... ],
      "cognitive":       {"score", "level", "areas", "tests_scored"},
      "checklist":       {"age_group", "score", "categories": [...]} | None,
      "handwriting":     {"score", "features", "recommendations"} | None,
      "overall":         {"score", "level", "channels"},
      "recommendations": [...],
      "disclaimer":      "...",
    }

``tests`` holds one row per test id (duplicates resolved to the latest run)
in the order the surviving records were supplied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional

from dyslexia_screener.config import AppConfig
from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.models.profile import UserProfile
from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.recommendations.generator import generate_recommendations
from dyslexia_screener.scoring.checklist import category_scores, checklist_channel_score
from dyslexia_screener.scoring.engine import (
    ResultInput,
    clamp_score,
    classify_risk_level,
    round_half_up,
)
from dyslexia_screener.scoring.interpretation import attach_interpretations, per_test_risk_level
from dyslexia_screener.scoring.overall import compute_overall_risk
from dyslexia_screener.taxonomy.assessment_taxonomy import display_name
from dyslexia_screener.taxonomy.checklist_taxonomy import CATEGORY_DISPLAY_NAMES
from dyslexia_screener.utils.time_utils import format_time, to_iso, utcnow

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This report is generated based on screening assessments and should not be "
    "considered a clinical diagnosis. For a formal diagnosis of dyslexia or other "
    "learning difficulties, please consult with a qualified educational "
    "psychologist or specialist. This tool is designed to help identify potential "
    "risk factors only."
)


def _test_row(record: ResultRecord) -> dict[str, Any]:
    clamped = clamp_score(record.score)
    level = per_test_risk_level(record.score)
    return {
        "test_id":            record.test_id,
        "test":               display_name(record.test_id),
        "score":              round_half_up(clamped) if clamped is not None else None,
        "risk_level":         level.value if level else None,
        "interpretation":     record.interpretation,
        "time_spent_seconds": round(record.time_spent, 1),
        "time_spent":         format_time(record.time_spent),
        "completed_date": (
            record.completed_at.date().isoformat() if record.completed_at else None
        ),
    }


def _checklist_section(
    checklist: ChecklistResult,
    thresholds,
) -> dict[str, Any]:
    channel = checklist_channel_score(checklist)
    categories = []
    for category, score in category_scores(checklist).items():
        categories.append(
            {
                "category": category.value,
                "name":     CATEGORY_DISPLAY_NAMES[category],
                "score":    round(score, 2),
                "level":    classify_risk_level(score, thresholds).value,
            }
        )
    return {
        "age_group":  checklist.age_group.value,
        "answered":   checklist.answered_count,
        "score":      round(channel, 2) if channel is not None else None,
        "categories": categories,
    }


def build_assessment_report(
    results:     Iterable[ResultInput],
    checklist:   Optional[ChecklistResult] = None,
    handwriting: Optional[HandwritingResult] = None,
    profile:     Optional[UserProfile] = None,
    config:      Optional[AppConfig] = None,
    generated_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Score everything for one user and assemble the report dict.

    Args:
        results:      Cognitive results (duplicates allowed).
        checklist:    Latest checklist submission, if any.
        handwriting:  Latest handwriting analysis, if any.
        profile:      The screened user, for the header block.
        config:       Scoring/recommendation policy; defaults when ``None``.
        generated_at: Report timestamp; now (UTC) when ``None``.

    Returns:
        JSON-serialisable report dict.
    """
    config = config or AppConfig()
    scoring = config.scoring
    thresholds = scoring.tier_thresholds

    records = attach_interpretations(results)

    overall = compute_overall_risk(
        records,
        checklist=checklist,
        handwriting=handwriting,
        weights=scoring.weights,
        thresholds=thresholds,
        concern_threshold=scoring.concern_threshold,
        default_weight=scoring.default_weight,
    )
    cognitive = overall.cognitive
    assert cognitive is not None

    recommendations = generate_recommendations(
        records,
        cognitive.level,
        cognitive.areas,
        escalate=config.recommendations.escalate_high_tier,
        severe_threshold=config.recommendations.severe_area_threshold,
    )

    report = {
        "generated_at": to_iso(generated_at or utcnow()),
        "profile": profile.model_dump(mode="json") if profile else None,
        "tests": [_test_row(r) for r in records],
        "cognitive": {**cognitive.to_dict(), "tests_scored": cognitive.tests_scored},
        "checklist": _checklist_section(checklist, thresholds) if checklist else None,
        "handwriting": (
            {
                "score":           handwriting.indicator_score,
                "features":        list(handwriting.features),
                "recommendations": list(handwriting.recommendations),
            }
            if handwriting
            else None
        ),
        "overall": overall.to_dict(),
        "recommendations": recommendations,
        "disclaimer": DISCLAIMER,
    }
    logger.info(
        "Built assessment report: %d test(s), cognitive=%d/%s, overall=%d/%s",
        len(records), cognitive.score, cognitive.level, overall.score, overall.level,
    )
    return report
