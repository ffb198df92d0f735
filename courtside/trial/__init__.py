"""Trial state engine: state updates, strategy, scoring and diffs."""

from .diff import Significance, StateChange, StateDiff, compute_state_diff
from .scoring import (
    calculate_cross_exam_vulnerability,
    calculate_jury_persuasion,
    calculate_scores,
    calculate_settlement_leverage,
    calculate_trial_momentum_score,
    score_credibility_impact,
    score_impeachment_success,
    score_objection_battle,
)
from .session import BatchResult, EventResult, process_event, process_event_batch
from .state import (
    StateUpdate,
    calculate_trend,
    complete_action,
    initialize_trial_state,
    mark_contradiction_exploited,
    update_trial_state,
)
from .strategy import (
    evaluate_concession,
    generate_actions,
    generate_end_of_day_strategy,
    prioritize_actions,
)

__all__ = [
    # Diff
    "Significance",
    "StateChange",
    "StateDiff",
    "compute_state_diff",
    # Scoring
    "calculate_cross_exam_vulnerability",
    "calculate_jury_persuasion",
    "calculate_scores",
    "calculate_settlement_leverage",
    "calculate_trial_momentum_score",
    "score_credibility_impact",
    "score_impeachment_success",
    "score_objection_battle",
    # Session
    "BatchResult",
    "EventResult",
    "process_event",
    "process_event_batch",
    # State
    "StateUpdate",
    "calculate_trend",
    "complete_action",
    "initialize_trial_state",
    "mark_contradiction_exploited",
    "update_trial_state",
    # Strategy
    "evaluate_concession",
    "generate_actions",
    "generate_end_of_day_strategy",
    "prioritize_actions",
]
