"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import LogFormat


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ScoringConfig(BaseModel):
    primary_multiplier: float = 1.2  # Extra influence of primary confluences
    fallback_grade: str = "F"  # Below every cutoff
    score_decimals: int = 0  # Precision of formatted percentages
    weight_sum_tolerance: float = 0.01


class DefaultRubricConfig(BaseModel):
    """Rubric applied to playbooks that have not saved one yet."""

    weight_rules: float = 0.7
    weight_confluences: float = 0.3
    weight_checklist: float = 0.0  # Reserved, not wired into scoring
    must_rule_penalty: float = 0.4
    min_checks: int = 0
    grade_cutoffs: dict[str, float] = Field(
        default_factory=lambda: {
            "A+": 0.95,
            "A": 0.9,
            "B": 0.8,
            "C": 0.7,
            "D": 0.6,
        }
    )

    def to_rubric(self, playbook_id: str = ""):
        from ..scoring.models import Rubric

        return Rubric(
            playbook_id=playbook_id,
            weight_rules=self.weight_rules,
            weight_confluences=self.weight_confluences,
            weight_checklist=self.weight_checklist,
            must_rule_penalty=self.must_rule_penalty,
            min_checks=self.min_checks,
            grade_cutoffs=dict(self.grade_cutoffs),
        )


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    default_rubric: DefaultRubricConfig = Field(default_factory=DefaultRubricConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: The config path does not exist or is not valid TOML.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        import tomli

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    return Settings(**data)
