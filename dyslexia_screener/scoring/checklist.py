"""
Checklist category scoring.

Unlike the cognitive engine this is a direct, unweighted percentage:

    category_score = 100 * (# applicable items answered "yes")
                         / (# items in the category applicable to the age group)

A category with no applicable items for the age group scores ``0.0``
(no signal) rather than NaN.

The checklist *channel* score used by the overall blend is the plain mean
of category scores over categories with at least one answered applicable
item.  ``None`` means the channel has no data and must be left out of the
blend rather than counted as zero.
"""

from __future__ import annotations

import logging

from dyslexia_screener.models.checklist import ChecklistResult
from dyslexia_screener.taxonomy.checklist_taxonomy import (
    CHECKLIST_ITEMS,
    ChecklistCategory,
    ChecklistItem,
    items_for,
)

logger = logging.getLogger(__name__)


def category_score(
    checklist: ChecklistResult,
    category:  ChecklistCategory,
    items:     tuple[ChecklistItem, ...] = CHECKLIST_ITEMS,
) -> float:
    """Percentage of applicable items in ``category`` answered ``True``."""
    applicable = items_for(category, checklist.age_group, items)
    if not applicable:
        return 0.0
    positive = sum(1 for item in applicable if checklist.responses.get(item.item_id) is True)
    return positive / len(applicable) * 100.0


def category_scores(
    checklist: ChecklistResult,
    items:     tuple[ChecklistItem, ...] = CHECKLIST_ITEMS,
) -> dict[ChecklistCategory, float]:
    """All category percentages, in ``ChecklistCategory`` declaration order."""
    return {cat: category_score(checklist, cat, items) for cat in ChecklistCategory}


def answered_categories(
    checklist: ChecklistResult,
    items:     tuple[ChecklistItem, ...] = CHECKLIST_ITEMS,
) -> list[ChecklistCategory]:
    """Categories with at least one applicable item answered yes or no."""
    answered: list[ChecklistCategory] = []
    for cat in ChecklistCategory:
        for item in items_for(cat, checklist.age_group, items):
            if checklist.responses.get(item.item_id) is not None:
                answered.append(cat)
                break
    return answered


def checklist_channel_score(
    checklist: ChecklistResult | None,
    items:     tuple[ChecklistItem, ...] = CHECKLIST_ITEMS,
) -> float | None:
    """Unweighted mean over answered categories, or ``None`` with no data."""
    if checklist is None:
        return None
    cats = answered_categories(checklist, items)
    if not cats:
        return None
    scores = [category_score(checklist, cat, items) for cat in cats]
    mean = sum(scores) / len(scores)
    logger.debug(
        "Checklist channel: %.1f over %d categories (age_group=%s)",
        mean, len(cats), checklist.age_group,
    )
    return mean
