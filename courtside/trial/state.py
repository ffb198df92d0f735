"""Trial state creation and the state update engine.

``update_trial_state`` folds one event into a state and returns a new
state plus a readable list of what changed. Nothing here mutates its
inputs; the caller driving the fold owns the current snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

from ..config import MomentumConfig, get_settings
from ..models import (
    CredibilitySignal,
    KeyMoment,
    MomentImpact,
    MomentumTrend,
    Phase,
    ScoreName,
    TestimonyEvent,
    TrialAction,
    TrialState,
    baseline_score,
)
from ..utils.logging import get_logger
from ..utils.text import truncate

logger = get_logger(__name__)


@dataclass(frozen=True)
class StateUpdate:
    """Result of folding one event into trial state."""

    state: TrialState
    changes: list[str] = field(default_factory=list)


def generate_session_id() -> str:
    """Generate a session identifier."""
    return f"TRL-{uuid4().hex[:8].upper()}"


def initialize_trial_state(
    session_id: Optional[str] = None,
    started_at: Optional[datetime] = None,
    config: Optional[MomentumConfig] = None,
) -> TrialState:
    """
    Create the state for a new session with neutral defaults.

    Args:
        session_id: Identifier to use (generated if omitted)
        started_at: Session start time (now if omitted)
        config: Momentum settings (default from settings)

    Returns:
        Fresh TrialState with momentum at the neutral start and baseline scores
    """
    config = config or get_settings().momentum
    started_at = started_at or datetime.now()

    return TrialState(
        session_id=session_id or generate_session_id(),
        started_at=started_at,
        last_updated_at=started_at,
        current_phase=Phase.OPENING,
        momentum_score=config.start,
        momentum_trend=MomentumTrend.STABLE,
        scores={name.value: baseline_score(name, started_at) for name in ScoreName},
    )


def clamp_momentum(value: int, config: MomentumConfig) -> int:
    """Keep momentum inside its configured bounds."""
    return max(config.minimum, min(config.maximum, value))


def calculate_trend(
    key_moments: Sequence[KeyMoment],
    window: int = 10,
    margin: int = 2,
) -> MomentumTrend:
    """
    Derive the momentum trend from the most recent key moments.

    Improving when positive moments outnumber negative ones by more than
    ``margin`` within the last ``window`` moments, declining for the
    reverse, otherwise stable.
    """
    recent = list(key_moments)[-window:] if window > 0 else []
    positive = sum(1 for m in recent if m.impact == MomentImpact.POSITIVE)
    negative = sum(1 for m in recent if m.impact == MomentImpact.NEGATIVE)

    if positive > negative + margin:
        return MomentumTrend.IMPROVING
    if negative > positive + margin:
        return MomentumTrend.DECLINING
    return MomentumTrend.STABLE


def update_trial_state(
    state: TrialState,
    event: TestimonyEvent,
    config: Optional[MomentumConfig] = None,
) -> StateUpdate:
    """
    Fold one validated event into the trial state.

    Steps, in order:
    1. Count the event and stamp the update time with its timestamp.
    2. Adopt the event's phase if it differs (any phase is accepted).
    3. Adopt the speaker as current witness when a witness is speaking.
    4. Helpful testimony adds a positive key moment and raises momentum;
       harmful testimony adds a negative one and lowers it. Neutral
       testimony does neither.
    5. Recompute the trend from the recent key moments.

    Scores are not touched here; they are rebuilt from the full state by
    the score calculator.

    Args:
        state: Current snapshot (left unchanged)
        event: Validated testimony event
        config: Momentum settings (default from settings)

    Returns:
        StateUpdate with the new snapshot and human-readable changes
    """
    config = config or get_settings().momentum
    changes: list[str] = []

    phase = state.current_phase
    if event.phase != state.current_phase:
        changes.append(f"Phase changed: {state.current_phase.value} -> {event.phase.value}")
        phase = event.phase

    witness = state.current_witness
    if event.is_witness and event.speaker_name != state.current_witness:
        changes.append(f"Witness changed: {state.current_witness or 'none'} -> {event.speaker_name}")
        witness = event.speaker_name

    momentum = state.momentum_score
    key_moments = state.key_moments
    excerpt = truncate(event.text, config.excerpt_length)

    if event.credibility_signal == CredibilitySignal.HELPFUL:
        key_moments = key_moments + (
            KeyMoment(
                timestamp=event.timestamp,
                description=f"Helpful testimony: \"{excerpt}\"",
                impact=MomentImpact.POSITIVE,
            ),
        )
        momentum = clamp_momentum(momentum + config.helpful_step, config)
    elif event.credibility_signal == CredibilitySignal.HARMFUL:
        key_moments = key_moments + (
            KeyMoment(
                timestamp=event.timestamp,
                description=f"Harmful testimony: \"{excerpt}\"",
                impact=MomentImpact.NEGATIVE,
            ),
        )
        momentum = clamp_momentum(momentum - config.harmful_step, config)

    if momentum != state.momentum_score:
        changes.append(f"Momentum {state.momentum_score} -> {momentum}")

    trend = calculate_trend(key_moments, config.trend_window, config.trend_margin)
    if trend != state.momentum_trend:
        changes.append(f"Trend changed: {state.momentum_trend.value} -> {trend.value}")

    updated = replace(
        state,
        events_processed=state.events_processed + 1,
        last_updated_at=event.timestamp,
        current_phase=phase,
        current_witness=witness,
        momentum_score=momentum,
        momentum_trend=trend,
        key_moments=key_moments,
    )

    logger.debug(
        f"[{state.session_id}] event {updated.events_processed}: "
        f"momentum={momentum} trend={trend.value}"
    )

    return StateUpdate(state=updated, changes=changes)


def mark_contradiction_exploited(state: TrialState, index: int) -> TrialState:
    """Flag a recorded contradiction as acted upon.

    Raises:
        IndexError: If no contradiction exists at ``index``
    """
    contradictions = list(state.contradictions_found)
    contradictions[index] = replace(contradictions[index], exploited=True)
    return replace(state, contradictions_found=tuple(contradictions))


def complete_action(state: TrialState, action: TrialAction) -> TrialState:
    """Move a pending action to the completed queue.

    Raises:
        ValueError: If the action is not pending
    """
    pending = list(state.pending_actions)
    try:
        pending.remove(action)
    except ValueError:
        raise ValueError(f"Action is not pending: {action.action_type.value} -> {action.target}") from None

    return replace(
        state,
        pending_actions=tuple(pending),
        completed_actions=state.completed_actions + (action,),
    )
