"""Strategy engine.

Derives suggested actions from the updated trial state and the event that
triggered the update. The decision tree is keyed on momentum and trend:

- low and declining momentum -> recovery
- high and improving momentum -> pressure (aggressive posture only)
- anything else -> maintenance

Phase overlays for cross and redirect are added on top, and the combined
list is prioritized by tier, then by counsel's preferred action types.
"""

from typing import Iterable, Optional, Sequence

from ..config import StrategyThresholds, get_settings
from ..models import (
    ActionPriority,
    ActionType,
    CredibilitySignal,
    MomentImpact,
    MomentumTrend,
    Phase,
    Posture,
    StrategyConfig,
    TestimonyEvent,
    TrialAction,
    TrialState,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)


def generate_actions(
    state: TrialState,
    event: TestimonyEvent,
    config: Optional[StrategyConfig] = None,
    thresholds: Optional[StrategyThresholds] = None,
) -> list[TrialAction]:
    """
    Generate prioritized strategy actions for one event.

    Args:
        state: Trial state after the event was folded in
        event: The triggering event
        config: Counsel's posture and type preferences
        thresholds: Momentum cutoffs and windows (default from settings)

    Returns:
        Actions sorted by priority tier, then type preference
    """
    config = config or StrategyConfig()
    thresholds = thresholds or get_settings().strategy

    momentum = state.momentum_score
    trend = state.momentum_trend
    actions: list[TrialAction] = []

    if momentum < thresholds.recovery_below and trend == MomentumTrend.DECLINING:
        logger.debug(f"Recovery branch (momentum={momentum})")
        actions.extend(_recovery_actions(state, event, config))
    elif momentum > thresholds.pressure_above and trend == MomentumTrend.IMPROVING:
        logger.debug(f"Pressure branch (momentum={momentum})")
        actions.extend(_pressure_actions(state, event, config))
    else:
        actions.extend(_maintenance_actions(event, thresholds))

    if event.phase == Phase.CROSS:
        actions.extend(_cross_exam_actions(event, thresholds))
    elif event.phase == Phase.REDIRECT:
        actions.extend(_redirect_actions(state, thresholds))

    return prioritize_actions(actions, config.priorities)


def _recovery_actions(
    state: TrialState,
    event: TestimonyEvent,
    config: StrategyConfig,
) -> list[TrialAction]:
    """Regain control when momentum is low and falling."""
    actions: list[TrialAction] = []

    if event.is_witness and event.credibility_signal == CredibilitySignal.HARMFUL:
        actions.append(
            TrialAction(
                priority=ActionPriority.P0,
                action_type=ActionType.REFRAME,
                target="narrative",
                suggested_language=(
                    "Consider reframing: redirect focus to established facts "
                    "and documented evidence"
                ),
                rationale=(
                    "Harmful testimony detected during declining momentum; "
                    "need to regain narrative control"
                ),
                risk_tradeoff="Reframing may appear defensive; balance with confident delivery",
                confidence=0.7,
            )
        )

    unexploited = state.unexploited_contradictions
    if unexploited and config.posture != Posture.DEFENSIVE:
        oldest = unexploited[0]
        actions.append(
            TrialAction(
                priority=ActionPriority.P1,
                action_type=ActionType.IMPEACHMENT,
                target=oldest.evidence_ref,
                suggested_language=f"Address contradiction: {oldest.contradicts}",
                rationale="Unexploited contradiction available during recovery phase",
                evidence_refs=(oldest.evidence_ref,),
                risk_tradeoff=(
                    "Impeachment during recovery may appear desperate; "
                    "ensure strong foundation"
                ),
                confidence=0.65,
            )
        )

    if event.exhibit_refs:
        exhibit = event.exhibit_refs[0]
        actions.append(
            TrialAction(
                priority=ActionPriority.P2,
                action_type=ActionType.EXHIBIT,
                target=exhibit,
                suggested_language=f"Direct attention to documentary evidence: {exhibit}",
                rationale="Documentary evidence can anchor testimony and rebuild credibility",
                evidence_refs=tuple(event.exhibit_refs),
                risk_tradeoff="Ensure exhibit is favorable before highlighting",
                confidence=0.6,
            )
        )

    return actions


def _pressure_actions(
    state: TrialState,
    event: TestimonyEvent,
    config: StrategyConfig,
) -> list[TrialAction]:
    """Press an advantage; only an aggressive posture does so."""
    if config.posture != Posture.AGGRESSIVE:
        return []

    actions: list[TrialAction] = []

    if event.is_witness:
        actions.append(
            TrialAction(
                priority=ActionPriority.P1,
                action_type=ActionType.REFRAME,
                target="closing_theme",
                suggested_language="Consider locking in favorable testimony for closing argument",
                rationale="Strong momentum presents opportunity to solidify key points",
                risk_tradeoff="Over-reaching may allow recovery; know when to consolidate",
                confidence=0.7,
            )
        )

    unexploited = state.unexploited_contradictions
    if unexploited:
        oldest = unexploited[0]
        actions.append(
            TrialAction(
                priority=ActionPriority.P0,
                action_type=ActionType.IMPEACHMENT,
                target=oldest.evidence_ref,
                suggested_language="Press advantage with remaining contradiction",
                rationale="Strong position increases impeachment impact",
                evidence_refs=(oldest.evidence_ref,),
                risk_tradeoff=(
                    "Aggressive impeachment may generate sympathy; calibrate intensity"
                ),
                confidence=0.75,
            )
        )

    return actions


def _maintenance_actions(
    event: TestimonyEvent,
    thresholds: StrategyThresholds,
) -> list[TrialAction]:
    """Low-priority theme reinforcement."""
    themes = {t.lower() for t in thresholds.key_themes}
    relevant = [t for t in event.topic_tags if t.lower() in themes]
    if not relevant:
        return []

    return [
        TrialAction(
            priority=ActionPriority.P2,
            action_type=ActionType.REFRAME,
            target=relevant[0],
            suggested_language=(
                f"Testimony touching on key theme: {', '.join(relevant)}. Consider emphasis."
            ),
            rationale="Relevant topic detected; opportunity for theme reinforcement",
            risk_tradeoff="Minimal risk; standard practice",
            confidence=0.5,
        )
    ]


def _cross_exam_actions(
    event: TestimonyEvent,
    thresholds: StrategyThresholds,
) -> list[TrialAction]:
    """Control the witness and secure admissions during cross."""
    if not event.is_witness:
        return []

    actions: list[TrialAction] = []

    if len(event.text) > thresholds.long_answer_chars:
        actions.append(
            TrialAction(
                priority=ActionPriority.P1,
                action_type=ActionType.OBJECTION,
                target="non-responsive",
                suggested_language=(
                    "Your Honor, the witness is being non-responsive. I would ask "
                    "that the answer be stricken and the witness instructed to "
                    "answer the question."
                ),
                rationale="Long, potentially evasive answer detected",
                risk_tradeoff="Judge may allow explanation; be prepared for follow-up",
                confidence=0.6,
            )
        )

    if event.credibility_signal == CredibilitySignal.HELPFUL:
        actions.append(
            TrialAction(
                priority=ActionPriority.P0,
                action_type=ActionType.REFRAME,
                target="admission",
                suggested_language="Lock in this admission: repeat or emphasize before moving on",
                rationale="Favorable admission detected; secure before witness reconsiders",
                risk_tradeoff="Over-emphasis may alert witness; be subtle",
                confidence=0.8,
            )
        )

    return actions


def _redirect_actions(
    state: TrialState,
    thresholds: StrategyThresholds,
) -> list[TrialAction]:
    """Rehabilitate after recent damage."""
    recent = state.key_moments[-thresholds.redirect_window:] if thresholds.redirect_window > 0 else ()
    recent_negative = [m for m in recent if m.impact == MomentImpact.NEGATIVE]
    if not recent_negative:
        return []

    return [
        TrialAction(
            priority=ActionPriority.P1,
            action_type=ActionType.REFRAME,
            target="rehabilitation",
            suggested_language="Address recent negative impression through clarifying questions",
            rationale=f"{len(recent_negative)} recent negative moment(s) need rehabilitation",
            risk_tradeoff="Rehabilitation may re-emphasize negative points; be strategic",
            confidence=0.65,
        )
    ]


def prioritize_actions(
    actions: Iterable[TrialAction],
    priorities: Sequence[ActionType] = (),
) -> list[TrialAction]:
    """
    Sort actions by priority tier, then by preferred action type.

    The tier always dominates: a P0 action of an unlisted type still sorts
    before any P1 action. Within a tier, types are ordered by their
    position in ``priorities``, with unlisted types last. The sort is
    stable, so ties keep their incoming order.
    """
    type_order = {action_type: idx for idx, action_type in enumerate(priorities)}
    unlisted = len(type_order)

    return sorted(
        actions,
        key=lambda a: (a.priority.rank, type_order.get(a.action_type, unlisted)),
    )


def evaluate_concession(
    state: TrialState,
    point: str,
    thresholds: Optional[StrategyThresholds] = None,
) -> Optional[TrialAction]:
    """
    Suggest conceding a point, but only from a position of weakness.

    Args:
        state: Current trial state
        point: The point that might be conceded
        thresholds: Momentum cutoffs (default from settings)

    Returns:
        A P2 concession action when momentum is below the concession
        cutoff, otherwise None
    """
    thresholds = thresholds or get_settings().strategy

    if state.momentum_score >= thresholds.concession_below:
        return None

    return TrialAction(
        priority=ActionPriority.P2,
        action_type=ActionType.CONCESSION,
        target=point,
        suggested_language=(
            f"Consider conceding: \"{point}\" to preserve credibility on stronger points"
        ),
        rationale="Weak position on this point; concession may strengthen overall credibility",
        risk_tradeoff="Concession admits weakness; ensure it does not undermine key elements",
        confidence=0.5,
    )


def generate_end_of_day_strategy(state: TrialState) -> list[str]:
    """Recommendations for counsel to work on after the court day ends."""
    recommendations: list[str] = []

    if state.momentum_score < 50:
        recommendations.append("Review testimony transcript for rehabilitation opportunities")
        recommendations.append("Prepare exhibits that counter negative impressions")

    unexploited = state.unexploited_contradictions
    if unexploited:
        recommendations.append(f"Prepare {len(unexploited)} impeachment point(s) for tomorrow")

    if state.momentum_trend == MomentumTrend.DECLINING:
        recommendations.append("Consider witness order adjustments if possible")
        recommendations.append("Review opening theme alignment with evidence presented")

    recommendations.append("Update settlement position based on trial developments")

    return recommendations
