"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — credentials + ``SKIPTRACE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The connector, scorer, analyzer and CLI all receive an ``AppConfig`` (or one
of its sections) explicitly. Credentials and weights are never read from
the environment deep inside library code.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class SheetsConfig(BaseModel):
    """Google Sheets source settings."""

    model_config = ConfigDict(frozen=True)

    spreadsheet_id: str = ""
    api_key: str = ""
    sheet_name: str = "Sheet1"
    cell_range: str = "A:AZ"
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    timeout_seconds: float = 30.0


class AnalysisConfig(BaseModel):
    """Narrative analysis (chat completion) settings."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    model: str = "gpt-4"
    temperature: float = 0.7
    max_tokens: int = 1500
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: float = 60.0
    concurrency: int = 3

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be in [0.0, 2.0], got {v}.")
        return v

    @field_validator("concurrency", "max_tokens")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be >= 1, got {v}.")
        return v


class ScoringWeights(BaseModel):
    """Relative influence of each sub-score on the aggregate.

    Defaults sum to 100 so the aggregate lands in 0–100.  Custom weights are
    NOT re-normalized: a set summing to 150 yields aggregates up to 150.
    """

    model_config = ConfigDict(frozen=True)

    distress: float = 30.0
    equity: float = 20.0
    property_age: float = 10.0
    tax_delinquency: float = 15.0
    ownership_type: float = 10.0
    time_on_market: float = 10.0
    contactability: float = 5.0

    @field_validator("*")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Scoring weights must be non-negative, got {v}.")
        return v

    @property
    def total(self) -> float:
        return sum(self.model_dump().values())


class ReportingConfig(BaseModel):
    """Report output settings."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"
    top_n: int = 10


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    ``AppConfig()`` with no arguments gives usable defaults (no credentials).
    """

    model_config = ConfigDict(frozen=True)

    sheets: SheetsConfig = SheetsConfig()
    analysis: AnalysisConfig = AnalysisConfig()
    scoring: ScoringWeights = ScoringWeights()
    reporting: ReportingConfig = ReportingConfig()
    logging: LoggingConfig = LoggingConfig()
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
            ``<project_root>/config/default.toml``; if that default file is
            absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            raw = _read_toml(default_path)
            config_dir = default_path.parent
        else:
            config_dir = None
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_toml(config_path)
        config_dir = config_path.parent

    # Also merge local.toml if present (gitignored local overrides)
    if config_dir is not None:
        local_config_path = config_dir / "local.toml"
        if local_config_path.exists():
            raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


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
    """Apply credential and SKIPTRACE_* env vars to the raw config dict.

    Supported overrides:
      GOOGLE_SPREADSHEET_ID   → raw["sheets"]["spreadsheet_id"]
      GOOGLE_SHEETS_API_KEY   → raw["sheets"]["api_key"]
      OPENAI_API_KEY          → raw["analysis"]["api_key"]
      SKIPTRACE_LOG_LEVEL     → raw["logging"]["level"]
      SKIPTRACE_DEBUG         → raw["debug"]
    """
    if spreadsheet_id := os.environ.get("GOOGLE_SPREADSHEET_ID"):
        raw.setdefault("sheets", {})["spreadsheet_id"] = spreadsheet_id

    if sheets_key := os.environ.get("GOOGLE_SHEETS_API_KEY"):
        raw.setdefault("sheets", {})["api_key"] = sheets_key

    if openai_key := os.environ.get("OPENAI_API_KEY"):
        raw.setdefault("analysis", {})["api_key"] = openai_key

    if log_level := os.environ.get("SKIPTRACE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("SKIPTRACE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        sheets=SheetsConfig(**raw.get("sheets", {})),
        analysis=AnalysisConfig(**raw.get("analysis", {})),
        scoring=ScoringWeights(**raw.get("scoring", {})),
        reporting=ReportingConfig(**raw.get("reporting", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
