"""Per-event pipeline.

Runs one testimony event through every stage of the engine:

    update -> contradictions -> impeachment -> objections -> strategy
           -> prioritization -> pending queue -> scores -> diff

The caller owns the state and threads it from one call to the next.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Sequence

from ..config import Settings, get_settings
from ..detection import (
    compare_with_prior_statements,
    detect_contradictions,
    detect_objections,
    generate_impeachment_actions,
)
from ..models import (
    ActionPriority,
    Finding,
    PriorStatement,
    StrategyConfig,
    TestimonyEvent,
    TrialAction,
    TrialState,
)
from ..utils.logging import get_logger
from .diff import StateDiff, compute_state_diff
from .scoring import calculate_scores
from .state import update_trial_state
from .strategy import generate_actions, prioritize_actions

logger = get_logger(__name__)


@dataclass(frozen=True)
class EventResult:
    """Everything produced by processing one event."""

    state: TrialState
    actions: list[TrialAction] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)
    diff: Optional[StateDiff] = None

    @property
    def urgent_actions(self) -> list[TrialAction]:
        return [a for a in self.actions if a.priority == ActionPriority.P0]


@dataclass(frozen=True)
class BatchResult:
    """Result of folding a batch of events."""

    state: TrialState
    results: list[EventResult] = field(default_factory=list)
    diffs: list[StateDiff] = field(default_factory=list)

    @property
    def actions(self) -> list[TrialAction]:
        return [a for r in self.results for a in r.actions]


def process_event(
    state: TrialState,
    event: TestimonyEvent,
    findings: Sequence[Finding] = (),
    prior_statements: Sequence[PriorStatement] = (),
    config: Optional[StrategyConfig] = None,
    settings: Optional[Settings] = None,
) -> EventResult:
    """
    Process one validated testimony event.

    Contradictions are only looked for in witness testimony; attorney
    speech is scanned for objections instead. Only P0 actions are queued
    on the state as pending; every action is returned to the caller.

    Args:
        state: Current snapshot (left unchanged)
        event: Validated testimony event
        findings: Documented findings from the case file
        prior_statements: The witnesses' earlier statements
        config: Counsel's strategy preferences
        settings: Policy settings (default: process settings)

    Returns:
        EventResult with the new state, prioritized actions, readable
        changes and the diff against ``state``
    """
    settings = settings or get_settings()
    config = config or StrategyConfig()

    update = update_trial_state(state, event, settings.momentum)
    current = update.state
    changes = list(update.changes)

    impeachment_actions: list[TrialAction] = []
    if event.is_witness:
        contradictions = detect_contradictions(
            event,
            list(findings),
            current.contradictions_found,
            settings.contradictions,
        )
        contradictions.extend(
            compare_with_prior_statements(event, list(prior_statements), settings.contradictions)
        )

        if contradictions:
            current = replace(
                current,
                contradictions_found=current.contradictions_found + tuple(contradictions),
            )
            changes.append(f"{len(contradictions)} contradiction(s) detected")
            impeachment_actions = generate_impeachment_actions(contradictions, event)

    objection_actions = detect_objections(event)
    strategy_actions = generate_actions(current, event, config, settings.strategy)

    actions = prioritize_actions(
        impeachment_actions + objection_actions + strategy_actions,
        config.priorities,
    )

    urgent = [a for a in actions if a.priority == ActionPriority.P0]
    if urgent:
        current = replace(current, pending_actions=current.pending_actions + tuple(urgent))

    current = replace(current, scores=calculate_scores(current, settings.scoring))
    diff = compute_state_diff(state, current, settings.diff)

    logger.debug(
        f"[{current.session_id}] {event.phase.value}/{event.speaker_role.value}: "
        f"{len(actions)} action(s), {diff.summary}"
    )

    return EventResult(state=current, actions=actions, changes=changes, diff=diff)


def process_event_batch(
    events: Iterable[TestimonyEvent],
    state: TrialState,
    findings: Sequence[Finding] = (),
    prior_statements: Sequence[PriorStatement] = (),
    config: Optional[StrategyConfig] = None,
    settings: Optional[Settings] = None,
) -> BatchResult:
    """
    Fold a batch of events in order.

    Events are processed exactly as given; nothing is reordered or
    deduplicated. Only diffs that carry changes are collected.
    """
    settings = settings or get_settings()
    results: list[EventResult] = []
    diffs: list[StateDiff] = []

    for event in events:
        result = process_event(state, event, findings, prior_statements, config, settings)
        results.append(result)
        if result.diff is not None and result.diff.has_changes:
            diffs.append(result.diff)
        state = result.state

    logger.info(
        f"[{state.session_id}] processed {len(results)} event(s); "
        f"momentum={state.momentum_score} trend={state.momentum_trend.value}"
    )

    return BatchResult(state=state, results=results, diffs=diffs)
