"""Courtside - Live Trial Support Engine."""

__version__ = "0.1.0"

from .models import StrategyConfig, TestimonyEvent, TrialAction, TrialState
from .trial import (
    compute_state_diff,
    initialize_trial_state,
    process_event,
    process_event_batch,
    update_trial_state,
)

__all__ = [
    "__version__",
    "StrategyConfig",
    "TestimonyEvent",
    "TrialAction",
    "TrialState",
    "compute_state_diff",
    "initialize_trial_state",
    "process_event",
    "process_event_batch",
    "update_trial_state",
]
