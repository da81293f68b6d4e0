"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept a report dict from ``build_assessment_report()`` and
return plain multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Layout::

    === Dyslexia Screening Report ===
      Name:          Alex
      ...
      [TEST SUMMARY]
        Test                  Score  Risk      Time   Completed
        ----------------------------------------------------------
        Rapid Naming            72%  Low       01:35  2025-03-01
      [ANALYSIS]
      [RECOMMENDATIONS]
      [DISCLAIMER]
"""

from __future__ import annotations

import textwrap

from dyslexia_screener.utils.time_utils import format_time

__all__ = ["format_report_text", "format_time"]

_WRAP = 72


def _wrap(text: str, indent: str = "    ") -> list[str]:
    return textwrap.wrap(text, width=_WRAP, initial_indent=indent, subsequent_indent=indent)


def _format_header(report: dict) -> list[str]:
    lines = ["", "=== Dyslexia Screening Report ==="]
    profile = report.get("profile")
    if profile:
        lines.append(f"  Name:          {profile.get('name', '')}")
        lines.append(f"  Age:           {profile.get('age', '')}")
        if profile.get("education"):
            lines.append(f"  Education:     {profile['education']}")
    lines.append(f"  Generated at:  {report.get('generated_at') or 'unknown'}")
    return lines


def _format_tests(tests: list[dict]) -> list[str]:
    lines = ["", "  [TEST SUMMARY]"]
    if not tests:
        lines.append("    (no cognitive tests completed)")
        return lines
    header = f"    {'Test':<22}  {'Score':>5}  {'Risk':<8}  {'Time':>5}  {'Completed':<10}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for t in tests:
        score = t.get("score")
        score_str = f"{score}%" if score is not None else "n/a"
        lines.append(
            f"    {str(t.get('test', ''))[:22]:<22}  {score_str:>5}  "
            f"{t.get('risk_level') or '-':<8}  "
            f"{format_time(t.get('time_spent_seconds', 0)):>5}  "
            f"{t.get('completed_date') or '-':<10}"
        )
    return lines


def _format_analysis(report: dict) -> list[str]:
    lines = ["", "  [ANALYSIS]"]
    cognitive = report.get("cognitive") or {}
    if cognitive.get("tests_scored"):
        lines.append(
            f"    Cognitive risk:  {cognitive['score']}%  ({cognitive['level']})"
        )
        areas = cognitive.get("areas") or []
        by_id = {t.get("test_id"): t.get("test") for t in report.get("tests", [])}
        lines.append(
            "    Areas of concern: "
            + (", ".join(by_id.get(a) or a for a in areas) if areas else "none")
        )

    checklist = report.get("checklist")
    if checklist and checklist.get("score") is not None:
        lines.append(f"    Checklist:       {checklist['score']:.0f}%  (age group: {checklist['age_group']})")
        for cat in checklist.get("categories", []):
            lines.append(f"      {cat['name']:<26}  {cat['score']:>6.1f}%  {cat['level']}")

    handwriting = report.get("handwriting")
    if handwriting:
        lines.append(f"    Handwriting:     {handwriting['score']:.0f}%")

    overall = report.get("overall") or {}
    if overall.get("channels"):
        lines.append(f"    Overall risk:    {overall['score']}%  ({overall['level']})")
    else:
        lines.append("    Overall risk:    no assessments completed yet")
    return lines


def format_report_text(report: dict) -> str:
    """Render an assessment report as plain text.

    Args:
        report: Dict from ``build_assessment_report()``.

    Returns:
        Multi-line string.
    """
    lines = _format_header(report)
    lines.extend(_format_tests(report.get("tests", [])))
    lines.extend(_format_analysis(report))

    lines.append("")
    lines.append("  [RECOMMENDATIONS]")
    for i, rec in enumerate(report.get("recommendations", []), start=1):
        lines.extend(
            textwrap.wrap(
                rec,
                width=_WRAP,
                initial_indent=f"    {i:>2}. ",
                subsequent_indent=" " * 8,
            )
        )

    if report.get("disclaimer"):
        lines.append("")
        lines.append("  [DISCLAIMER]")
        lines.extend(_wrap(report["disclaimer"]))

    return "\n".join(lines)
