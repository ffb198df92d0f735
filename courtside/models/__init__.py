"""Data models for Courtside."""

from .action import (
    ActionPriority,
    ActionType,
    Posture,
    RiskTolerance,
    StrategyConfig,
    TrialAction,
)
from .event import (
    CredibilitySignal,
    Finding,
    Phase,
    PriorStatement,
    SpeakerRole,
    TestimonyEvent,
)
from .score import (
    Score,
    ScoreDriver,
    ScoreName,
    ScoreThresholds,
    baseline_score,
)
from .state import (
    Contradiction,
    ContradictionStrength,
    ContradictionType,
    KeyMoment,
    MomentImpact,
    MomentumTrend,
    TrialState,
)

__all__ = [
    # Actions
    "ActionPriority",
    "ActionType",
    "Posture",
    "RiskTolerance",
    "StrategyConfig",
    "TrialAction",
    # Events
    "CredibilitySignal",
    "Finding",
    "Phase",
    "PriorStatement",
    "SpeakerRole",
    "TestimonyEvent",
    # Scores
    "Score",
    "ScoreDriver",
    "ScoreName",
    "ScoreThresholds",
    "baseline_score",
    # State
    "Contradiction",
    "ContradictionStrength",
    "ContradictionType",
    "KeyMoment",
    "MomentImpact",
    "MomentumTrend",
    "TrialState",
]
