"""
Recommendation rule tables.

Three tables, consumed in this order by ``generate_recommendations()``:

TIER_RECOMMENDATIONS     : one fixed block per ``RiskLevel``.
AREA_RECOMMENDATIONS     : one line per concern-area test id.
INTENSIVE_AREA_SUPPORT   : extra line for an area whose score is severely low.
GENERAL_RECOMMENDATIONS  : always appended last.

Strings are plain text so they can be dropped into CSV, JSON, or a terminal
report without escaping.
"""

from __future__ import annotations

from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel, TestId

TIER_RECOMMENDATIONS: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.HIGH: (
        "Comprehensive assessment by an educational psychologist is strongly recommended.",
        "Consider educational accommodations such as extended time for assignments and tests.",
        "Explore structured literacy programs specifically designed for dyslexia.",
    ),
    RiskLevel.MODERATE: (
        "Consider a follow-up assessment with an educational specialist.",
        "Monitor academic progress and provide support in challenging areas.",
        "Consider reading and writing support techniques that benefit learners with dyslexia.",
    ),
    RiskLevel.LOW: (
        "Continue to monitor academic progress.",
        "If concerns persist despite these results, consider a comprehensive "
        "educational assessment.",
    ),
}

AREA_RECOMMENDATIONS: dict[str, str] = {
    TestId.RAPID_NAMING.value:
        "Practise rapid naming drills with familiar colours, objects and letters "
        "to build retrieval fluency.",
    TestId.PHONEMIC_AWARENESS.value:
        "Phonological awareness training is recommended, such as rhyming, sound "
        "blending and sound deletion games.",
    TestId.WORKING_MEMORY.value:
        "Working memory exercises may be beneficial; break instructions into short "
        "steps and use memory aids such as checklists.",
    TestId.VISUAL_PROCESSING.value:
        "Use visual discrimination activities and clear, uncluttered text layouts "
        "to reduce visual load.",
    TestId.PROCESSING_SPEED.value:
        "Allow additional time for reading and written tasks, and practise timed "
        "activities at a comfortable pace.",
    TestId.SEQUENCING.value:
        "Practise sequencing activities such as ordering story events, days of the "
        "week and multi-step routines.",
}

INTENSIVE_AREA_SUPPORT: dict[str, str] = {
    TestId.RAPID_NAMING.value:
        "Rapid naming was well below expected levels; a specialist may recommend "
        "targeted fluency intervention.",
    TestId.PHONEMIC_AWARENESS.value:
        "Phonemic awareness was well below expected levels; consider a structured, "
        "systematic phonics programme.",
    TestId.WORKING_MEMORY.value:
        "Working memory was well below expected levels; discuss classroom or "
        "workplace memory supports with a specialist.",
    TestId.VISUAL_PROCESSING.value:
        "Visual processing was well below expected levels; consider a vision and "
        "visual-perception check.",
    TestId.PROCESSING_SPEED.value:
        "Processing speed was well below expected levels; formal extra-time "
        "accommodations may be appropriate.",
    TestId.SEQUENCING.value:
        "Sequencing was well below expected levels; use visual schedules and "
        "step-by-step guides for daily tasks.",
}

GENERAL_RECOMMENDATIONS: tuple[str, ...] = (
    "Encourage regular reading practice with engaging, level-appropriate material.",
    "This screening is not a clinical diagnosis; share the results with a qualified "
    "educational psychologist or specialist if you have concerns.",
)

# Clamped area scores below this add the INTENSIVE_AREA_SUPPORT line.
SEVERE_AREA_THRESHOLD = 40.0
