"""Configuration for Courtside."""

from .settings import (
    ContradictionConfig,
    DiffConfig,
    MomentumConfig,
    ScoringConfig,
    Settings,
    StrategyThresholds,
    configure,
    get_settings,
)

__all__ = [
    "ContradictionConfig",
    "DiffConfig",
    "MomentumConfig",
    "ScoringConfig",
    "Settings",
    "StrategyThresholds",
    "configure",
    "get_settings",
]
