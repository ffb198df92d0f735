"""Configuration settings for Courtside.

Every number the engine uses to weigh testimony is a policy default kept
here, so a deployment can tune it without touching the engine code.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import ConfigurationError


@dataclass
class MomentumConfig:
    """Configuration for momentum tracking."""

    start: int = 50
    helpful_step: int = 2
    harmful_step: int = 3
    minimum: int = 0
    maximum: int = 100
    trend_window: int = 10  # Most recent key moments considered
    trend_margin: int = 2
    excerpt_length: int = 50


@dataclass
class ContradictionConfig:
    """Configuration for contradiction detection."""

    strong_confidence: float = 0.7
    amount_divergence: float = 0.20
    strong_amount_divergence: float = 0.50
    min_keyword_length: int = 4
    min_phrase_length: int = 6
    statement_length: int = 100
    negation_prefixes: list[str] = field(
        default_factory=lambda: ["not", "never", "didn't", "did not"]
    )
    recall_phrases: list[str] = field(
        default_factory=lambda: [
            "don't recall",
            "do not recall",
            "don't remember",
            "cannot recall",
        ]
    )


@dataclass
class StrategyThresholds:
    """Momentum cutoffs and windows used by the strategy engine."""

    recovery_below: int = 40
    pressure_above: int = 70
    concession_below: int = 30
    long_answer_chars: int = 200
    redirect_window: int = 5
    key_themes: list[str] = field(
        default_factory=lambda: ["revenue", "fraud", "control", "disclosure"]
    )


@dataclass
class ScoringConfig:
    """Weights for the composite trial scores."""

    cross_exam_base: float = 30.0
    per_unexploited_contradiction: float = 10.0
    per_negative_moment: float = 2.0
    negative_ratio_threshold: float = 0.30
    negative_ratio_bonus: float = 15.0
    settlement_momentum_weight: float = 0.3
    settlement_jury_weight: float = 0.4
    settlement_resilience_weight: float = 0.3
    confidence_floor: float = 0.5
    confidence_ceiling: float = 0.9
    confidence_saturation_events: int = 50


@dataclass
class DiffConfig:
    """Significance bands for state diffs."""

    high_momentum_delta: int = 10
    medium_momentum_delta: int = 5
    min_score_delta: float = 5.0
    high_score_delta: float = 10.0


@dataclass
class Settings:
    """Main settings container."""

    momentum: MomentumConfig = field(default_factory=MomentumConfig)
    contradictions: ContradictionConfig = field(default_factory=ContradictionConfig)
    strategy: StrategyThresholds = field(default_factory=StrategyThresholds)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    event_log_level: Optional[str] = None  # Per-event detail; see setup_logging

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Create settings from a (possibly partial) dictionary."""
        settings = cls()

        for section in ("momentum", "contradictions", "strategy", "scoring", "diff"):
            if section not in data:
                continue
            values = data[section]
            if not isinstance(values, dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping")
            _apply(section, getattr(settings, section), values)

        if "log_level" in data:
            settings.log_level = str(data["log_level"])
        if data.get("event_log_level"):
            settings.event_log_level = str(data["event_log_level"])
        if data.get("log_file"):
            settings.log_file = Path(data["log_file"])

        return settings

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings overrides from a YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        if config_path := os.getenv("COURTSIDE_CONFIG"):
            settings = cls.from_yaml(Path(config_path))
        else:
            settings = cls()

        if log_level := os.getenv("LOG_LEVEL"):
            settings.log_level = log_level

        if event_log_level := os.getenv("COURTSIDE_EVENT_LOG_LEVEL"):
            settings.event_log_level = event_log_level

        if log_file := os.getenv("COURTSIDE_LOG_FILE"):
            settings.log_file = Path(log_file)

        return settings


def _apply(section_name: str, section: Any, values: dict[str, Any]) -> None:
    """Copy known keys onto a config dataclass, ignoring unknown ones.

    Each value is coerced to the type of the field's current value, so a
    bad override fails at load time rather than mid-proceeding.

    Raises:
        ConfigurationError: If a value cannot be coerced.
    """
    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            continue
        try:
            coerced = _coerce(value, getattr(section, key))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Invalid value for {section_name}.{key}: {value!r}"
            ) from None
        setattr(section, key, coerced)


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, list):
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise TypeError("expected a list")
        return [str(item) for item in value]

    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")

    if isinstance(default, int):
        number = float(value)
        if not number.is_integer():
            raise ValueError("expected a whole number")
        return int(number)

    if isinstance(default, float):
        return float(value)

    return value


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Set (or reset, with None) the global settings instance."""
    global _settings
    _settings = settings
