"""Tests for the overall combined risk across cognitive, checklist and handwriting."""

from __future__ import annotations

import pytest

from dyslexia_screener.models.checklist import HandwritingResult
from dyslexia_screener.scoring.overall import (
    CHANNEL_CHECKLIST,
    CHANNEL_COGNITIVE,
    CHANNEL_HANDWRITING,
    compute_overall_risk,
)
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel

# Cognitive risk 75 / High.
WEAK_CORE = [
    {"testId": "rapid-naming", "score": 30},
    {"testId": "phonemic-awareness", "score": 20},
]


class TestNoData:
    def test_nothing(self):
        overall = compute_overall_risk()
        assert overall.score == 0
        assert overall.level is RiskLevel.LOW
        assert overall.channels == {}
        assert not overall.has_data

    def test_cognitive_still_reported(self):
        assert compute_overall_risk().cognitive.score == 0

    def test_unscored_results_do_not_count(self):
        overall = compute_overall_risk([{"testId": "rapid-naming", "score": None}])
        assert overall.channels == {}


class TestChannels:
    def test_cognitive_only(self):
        overall = compute_overall_risk(WEAK_CORE)
        assert overall.channels == {CHANNEL_COGNITIVE: 75.0}
        assert overall.score == 75
        assert overall.level is RiskLevel.HIGH

    def test_cognitive_and_checklist(self, sample_checklist):
        # (75 + 30) / 2 = 52.5 → 53
        overall = compute_overall_risk(WEAK_CORE, checklist=sample_checklist)
        assert overall.score == 53
        assert overall.level is RiskLevel.MODERATE
        assert set(overall.channels) == {CHANNEL_COGNITIVE, CHANNEL_CHECKLIST}

    def test_all_three(self, sample_checklist, sample_handwriting):
        # (75 + 30 + 35) / 3 = 46.67 → 47
        overall = compute_overall_risk(
            WEAK_CORE, checklist=sample_checklist, handwriting=sample_handwriting
        )
        assert overall.score == 47
        assert overall.channels[CHANNEL_HANDWRITING] == pytest.approx(35.0)

    def test_handwriting_only(self, sample_handwriting):
        overall = compute_overall_risk(handwriting=sample_handwriting)
        assert overall.score == 35
        assert overall.level is RiskLevel.LOW

    def test_unscored_cognitive_excluded_from_mean(self):
        overall = compute_overall_risk(
            [{"testId": "rapid-naming", "score": None}],
            handwriting=HandwritingResult(indicator_score=80),
        )
        assert overall.channels == {CHANNEL_HANDWRITING: 80.0}
        assert overall.level is RiskLevel.HIGH

    def test_unanswered_checklist_excluded(self, sample_handwriting):
        from dyslexia_screener.models.checklist import ChecklistResult

        overall = compute_overall_risk(
            checklist=ChecklistResult(responses={"r1": None}),
            handwriting=sample_handwriting,
        )
        assert CHANNEL_CHECKLIST not in overall.channels

    def test_thresholds_passed_through(self, sample_handwriting):
        thresholds = ((30.0, RiskLevel.HIGH), (10.0, RiskLevel.MODERATE))
        overall = compute_overall_risk(handwriting=sample_handwriting, thresholds=thresholds)
        assert overall.level is RiskLevel.HIGH


class TestToDict:
    def test_shape(self, sample_checklist):
        d = compute_overall_risk(WEAK_CORE, checklist=sample_checklist).to_dict()
        assert d == {
            "score": 53,
            "level": "Moderate",
            "channels": {"cognitive": 75.0, "checklist": 30.0},
        }
