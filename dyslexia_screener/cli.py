"""
Dyslexia Screener: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (DB init, result import, scoring, report).
  5. Report result to stdout.

Install and run::

    pip install -e .
    dyslexia-screener --help
    dyslexia-screener init-db
    dyslexia-screener create-profile --user-id u1 --name Alex --age 9
    dyslexia-screener import-results results.json --user-id u1
    dyslexia-screener record-checklist checklist.json --user-id u1
    dyslexia-screener score --user-id u1
    dyslexia-screener report --user-id u1 --csv --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="dyslexia-screener",
    help="Dyslexia screening risk engine: scoring and reporting CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from dyslexia_screener.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from dyslexia_screener.utils.logging import configure_logging
    configure_logging(config.logging)


def _open_db(config):
    from dyslexia_screener.db.connection import get_connection

    return get_connection(
        config.database.db_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
        ensure_schema=True,
    )


def _require_profile(conn, user_id: str):
    """Return the stored profile or exit with an error."""
    from dyslexia_screener.db.repositories.profile_repo import UserProfileRepository

    profile = UserProfileRepository(conn).get(user_id)
    if profile is None:
        typer.echo(
            f"[ERROR] No profile for user '{user_id}'. Run 'create-profile' first.",
            err=True,
        )
        raise typer.Exit(code=1)
    return profile


def _load_user_results(conn, user_id: str, local_file: Optional[str]):
    """Stored results, merged with a device-local export when given."""
    from dyslexia_screener.db.repositories.result_repo import (
        ResultRecordRepository,
        ResultStore,
    )
    from dyslexia_screener.ingestion.merge import merge_result_sets
    from dyslexia_screener.ingestion.result_import import load_result_payloads

    store: ResultStore = ResultRecordRepository(conn)
    stored = store.get_results(user_id)
    if not local_file:
        return stored

    try:
        outcome = load_result_payloads(Path(local_file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    for rejected in outcome.rejected:
        typer.echo(f"  [WARN] local entry #{rejected.index}: {rejected.reason}", err=True)
    return merge_result_sets(outcome.records, stored)


_USER_ID_OPTION = typer.Option(..., "--user-id", "-u", help="User the records belong to.")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config (e.g. data/db/test.db).",
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Initialize the SQLite database and apply the full schema.

    Safe to run multiple times: all DDL uses IF NOT EXISTS.
    """
    from dyslexia_screener.db.connection import get_connection
    from dyslexia_screener.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with get_connection(
        target_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    ) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    scoring = config.scoring

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:     {config.database.db_path}")
    typer.echo(f"  Output dir:        {config.data.output_dir}")
    typer.echo(
        f"  Tier thresholds:   High >= {scoring.high_threshold:g}, "
        f"Moderate >= {scoring.moderate_threshold:g}"
    )
    typer.echo(f"  Concern threshold: {scoring.concern_threshold:g}")
    typer.echo(f"  Escalate High:     {config.recommendations.escalate_high_tier}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("create-profile")
def create_profile(
    user_id: str = _USER_ID_OPTION,
    name: str = typer.Option(..., "--name", help="Display name."),
    age: int = typer.Option(..., "--age", help="Age in years (3-100)."),
    gender: str = typer.Option("prefer-not-to-say", "--gender"),
    education: Optional[str] = typer.Option(None, "--education"),
    diagnosed: str = typer.Option("unsure", "--diagnosed", help="yes / no / unsure."),
    age_group: Optional[str] = typer.Option(
        None, "--age-group", help="Override the age group derived from --age."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Create or update a user profile (UPSERT by user id)."""
    from pydantic import ValidationError

    from dyslexia_screener.db.repositories.profile_repo import UserProfileRepository
    from dyslexia_screener.models.profile import UserProfile

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        profile = UserProfile(
            user_id=user_id,
            name=name,
            age=age,
            gender=gender,
            education=education,
            has_been_diagnosed=diagnosed,
            age_group=age_group,
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid profile:\n{exc}", err=True)
        raise typer.Exit(code=1)

    with _open_db(config) as conn:
        UserProfileRepository(conn).upsert(profile)

    typer.echo(f"  Age group: {profile.effective_age_group.value}")
    typer.echo(f"[OK] Profile '{user_id}' saved.")


@app.command("import-results")
def import_results(
    results_file: str = typer.Argument(..., help="JSON array of test result payloads."),
    user_id: str = _USER_ID_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate results but do not write to the database.",
    ),
) -> None:
    """Import cognitive test results exported by the screening app.

    Each payload is validated; rejected payloads are listed and skipped,
    the rest are stored.
    """
    from dyslexia_screener.db.repositories.result_repo import ResultRecordRepository
    from dyslexia_screener.ingestion.result_import import load_result_payloads

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    typer.echo(f"Loading results from: {results_file}")
    try:
        outcome = load_result_payloads(Path(results_file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"  Validated {len(outcome.records)} result(s).")
    if outcome.rejected:
        typer.echo(f"  [WARN] {len(outcome.rejected)} payload(s) rejected:", err=True)
        for rejected in outcome.rejected[:5]:
            typer.echo(f"    #{rejected.index}: {rejected.reason}", err=True)
        if len(outcome.rejected) > 5:
            typer.echo(f"    ... and {len(outcome.rejected) - 5} more.", err=True)

    if dry_run:
        typer.echo("[DRY RUN] No results written to database.")
        for rec in outcome.records:
            typer.echo(f"  {rec.test_id} | {rec.score:g} | {rec.completed_at or '-'}")
        return

    with _open_db(config) as conn:
        _require_profile(conn, user_id)
        written = ResultRecordRepository(conn).save_many(user_id, outcome.records)

    typer.echo(f"  Stored {written} result(s) for '{user_id}'.")
    typer.echo("[OK] Results imported.")


@app.command("record-checklist")
def record_checklist(
    checklist_file: str = typer.Argument(..., help="Checklist JSON (current or legacy shape)."),
    user_id: str = _USER_ID_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Store a symptom checklist submission.

    When the file carries no age group, the profile's age group is used.
    """
    from dyslexia_screener.db.repositories.assessment_repo import ChecklistRepository
    from dyslexia_screener.ingestion.result_import import load_checklist
    from dyslexia_screener.scoring.checklist import checklist_channel_score

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        checklist = load_checklist(Path(checklist_file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    with _open_db(config) as conn:
        profile = _require_profile(conn, user_id)
        if "age_group" not in checklist.model_fields_set:
            checklist = checklist.model_copy(
                update={"age_group": profile.effective_age_group}
            )
        ChecklistRepository(conn).save(user_id, checklist)

    score = checklist_channel_score(checklist)
    typer.echo(f"  Answered items: {checklist.answered_count}")
    typer.echo(f"  Age group:      {checklist.age_group.value}")
    typer.echo(f"  Checklist score: {'n/a' if score is None else f'{score:.1f}%'}")
    typer.echo("[OK] Checklist recorded.")


@app.command("record-handwriting")
def record_handwriting(
    handwriting_file: str = typer.Argument(..., help="Handwriting analysis JSON."),
    user_id: str = _USER_ID_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Store a handwriting analysis result."""
    from dyslexia_screener.db.repositories.assessment_repo import HandwritingRepository
    from dyslexia_screener.ingestion.result_import import load_handwriting

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        result = load_handwriting(Path(handwriting_file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    with _open_db(config) as conn:
        _require_profile(conn, user_id)
        HandwritingRepository(conn).save(user_id, result)

    typer.echo(f"  Indicator score: {result.indicator_score:g}")
    typer.echo("[OK] Handwriting result recorded.")


@app.command("score")
def score(
    user_id: str = _USER_ID_OPTION,
    local_file: Optional[str] = typer.Option(
        None,
        "--local-file",
        help="Device-local results export; the newer completion wins per test.",
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print the cognitive and overall risk for a user as JSON."""
    from dyslexia_screener.db.repositories.assessment_repo import (
        ChecklistRepository,
        HandwritingRepository,
    )
    from dyslexia_screener.scoring.overall import compute_overall_risk

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    scoring = config.scoring

    with _open_db(config) as conn:
        _require_profile(conn, user_id)
        results = _load_user_results(conn, user_id, local_file)
        checklist = ChecklistRepository(conn).get_latest(user_id)
        handwriting = HandwritingRepository(conn).get_latest(user_id)

    overall = compute_overall_risk(
        results,
        checklist=checklist,
        handwriting=handwriting,
        weights=scoring.weights,
        thresholds=scoring.tier_thresholds,
        concern_threshold=scoring.concern_threshold,
        default_weight=scoring.default_weight,
    )
    assert overall.cognitive is not None
    typer.echo(
        json.dumps(
            {"cognitive": overall.cognitive.to_dict(), "overall": overall.to_dict()},
            indent=2,
        )
    )


@app.command("report")
def report(
    user_id: str = _USER_ID_OPTION,
    local_file: Optional[str] = typer.Option(
        None,
        "--local-file",
        help="Device-local results export; the newer completion wins per test.",
    ),
    write_csv: bool = typer.Option(False, "--csv", help="Also write a per-test CSV."),
    write_json: bool = typer.Option(False, "--json", help="Also write the full report JSON."),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Override config.data.output_dir."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print the full assessment report; optionally export CSV / JSON."""
    from dyslexia_screener.db.repositories.assessment_repo import (
        ChecklistRepository,
        HandwritingRepository,
    )
    from dyslexia_screener.reporting.export import (
        RESULT_EXPORT_COLUMNS,
        export_to_csv,
        export_to_json,
        flatten_results_for_export,
    )
    from dyslexia_screener.reporting.formatters import format_report_text
    from dyslexia_screener.reporting.summary import build_assessment_report
    from dyslexia_screener.utils.time_utils import utcnow

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with _open_db(config) as conn:
        profile = _require_profile(conn, user_id)
        results = _load_user_results(conn, user_id, local_file)
        checklist = ChecklistRepository(conn).get_latest(user_id)
        handwriting = HandwritingRepository(conn).get_latest(user_id)

    data = build_assessment_report(
        results,
        checklist=checklist,
        handwriting=handwriting,
        profile=profile,
        config=config,
    )
    typer.echo(format_report_text(data))

    out_dir = Path(output_dir or config.data.output_dir)
    stem = f"assessment_{user_id}_{utcnow().strftime('%Y-%m-%d')}"
    if write_csv:
        path = export_to_csv(
            flatten_results_for_export(data),
            out_dir / f"{stem}.csv",
            fieldnames=RESULT_EXPORT_COLUMNS,
        )
        typer.echo(f"  CSV:  {path}")
    if write_json:
        path = export_to_json(data, out_dir / f"{stem}.json")
        typer.echo(f"  JSON: {path}")

    typer.echo("")
    typer.echo("[OK] Report complete.")


if __name__ == "__main__":
    app()
