"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local env overrides (gitignored)
  4. Environment variables       : ``DYSLEXIA_SCREENER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Scoring defaults come from ``dyslexia_screener.scoring.engine`` so the weight
table and tier thresholds live in exactly one place; the TOML file may
override them for a deployment.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from dyslexia_screener.recommendations.rules import SEVERE_AREA_THRESHOLD
from dyslexia_screener.scoring.engine import (
    CONCERN_THRESHOLD,
    DEFAULT_WEIGHT,
    RISK_TIER_THRESHOLDS,
    TEST_WEIGHTS,
)
from dyslexia_screener.taxonomy.assessment_taxonomy import RiskLevel

_DEFAULT_HIGH = RISK_TIER_THRESHOLDS[0][0]
_DEFAULT_MODERATE = RISK_TIER_THRESHOLDS[1][0]

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/screener.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class DataConfig(BaseModel):
    """Filesystem paths for imports and generated reports."""

    model_config = ConfigDict(frozen=True)

    import_dir: str = "data/imports"
    output_dir: str = "data/outputs"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/screener.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class ScoringConfig(BaseModel):
    """Cognitive weight table and tier thresholds."""

    model_config = ConfigDict(frozen=True)

    weights: dict[str, float] = dict(TEST_WEIGHTS)
    default_weight: float = DEFAULT_WEIGHT
    high_threshold: float = _DEFAULT_HIGH
    moderate_threshold: float = _DEFAULT_MODERATE
    concern_threshold: float = CONCERN_THRESHOLD

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: dict[str, float]) -> dict[str, float]:
        for test_id, w in v.items():
            if not 0.0 < w <= 1.0:
                raise ValueError(f"Weight for '{test_id}' must be in (0, 1], got {w}.")
        return v

    @field_validator("default_weight")
    @classmethod
    def validate_default_weight(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError(f"default_weight must be in (0, 1], got {v}.")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "ScoringConfig":
        if not 0.0 < self.moderate_threshold < self.high_threshold <= 100.0:
            raise ValueError(
                "Thresholds must satisfy 0 < moderate_threshold < high_threshold <= 100, "
                f"got moderate={self.moderate_threshold}, high={self.high_threshold}."
            )
        return self

    @property
    def tier_thresholds(self) -> tuple[tuple[float, RiskLevel], ...]:
        return (
            (self.high_threshold, RiskLevel.HIGH),
            (self.moderate_threshold, RiskLevel.MODERATE),
        )


class RecommendationsConfig(BaseModel):
    """Recommendation generator policy."""

    model_config = ConfigDict(frozen=True)

    escalate_high_tier: bool = False
    severe_area_threshold: float = SEVERE_AREA_THRESHOLD


class AppConfig(BaseModel):
    """Complete application configuration: the single source of truth.

    CLI commands receive an ``AppConfig`` instance built by ``load_config()``.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    scoring: ScoringConfig = ScoringConfig()
    recommendations: RecommendationsConfig = RecommendationsConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply DYSLEXIA_SCREENER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply DYSLEXIA_SCREENER_* env vars to the raw config dict.

    Supported overrides:
      DYSLEXIA_SCREENER_DB_PATH     → raw["database"]["db_path"]
      DYSLEXIA_SCREENER_OUTPUT_DIR  → raw["data"]["output_dir"]
      DYSLEXIA_SCREENER_LOG_LEVEL   → raw["logging"]["level"]
      DYSLEXIA_SCREENER_DEBUG       → raw["debug"]
    """
    if db_path := os.environ.get("DYSLEXIA_SCREENER_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if output_dir := os.environ.get("DYSLEXIA_SCREENER_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if log_level := os.environ.get("DYSLEXIA_SCREENER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("DYSLEXIA_SCREENER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        scoring=ScoringConfig(**raw.get("scoring", {})),
        recommendations=RecommendationsConfig(**raw.get("recommendations", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
