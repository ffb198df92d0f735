"""Score calculator.

The three composite scores are rebuilt from the full trial state on every
update, never patched incrementally. Each driver's weighted contribution
adds up to the unclamped score value, so the explanation always matches
the number.
"""

from typing import Optional

from ..config import ScoringConfig, get_settings
from ..models import (
    MomentumTrend,
    Score,
    ScoreDriver,
    ScoreName,
    ScoreThresholds,
    TrialState,
)


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(0.0, min(100.0, value))


def score_confidence(events_processed: int, config: ScoringConfig) -> float:
    """Confidence grows with events processed and saturates."""
    saturation = max(config.confidence_saturation_events, 1)
    progress = min(events_processed / saturation, 1.0)
    span = config.confidence_ceiling - config.confidence_floor
    return round(config.confidence_floor + span * progress, 2)


def calculate_cross_exam_vulnerability(
    state: TrialState,
    config: Optional[ScoringConfig] = None,
) -> Score:
    """
    How exposed the represented party is on cross. Higher is worse.

    base + per-contradiction x unexploited contradictions
         + per-negative x negative key moments
         + bonus when negative moments exceed the ratio of processed events
    """
    config = config or get_settings().scoring

    unexploited = len(state.unexploited_contradictions)
    negative = len(state.negative_moments)
    events = state.events_processed
    negative_rate = negative / events if events > 0 else 0.0
    bonus = config.negative_ratio_bonus if negative_rate > config.negative_ratio_threshold else 0.0

    drivers = (
        ScoreDriver(
            factor="Baseline Exposure",
            weight=1.0,
            raw_score=config.cross_exam_base,
            weighted_contribution=config.cross_exam_base,
            explanation="Baseline vulnerability before any testimony",
        ),
        ScoreDriver(
            factor="Unexploited Contradictions",
            weight=config.per_unexploited_contradiction,
            raw_score=unexploited,
            weighted_contribution=unexploited * config.per_unexploited_contradiction,
            explanation=f"{unexploited} contradiction(s) not yet addressed",
        ),
        ScoreDriver(
            factor="Negative Testimony Signals",
            weight=config.per_negative_moment,
            raw_score=negative,
            weighted_contribution=negative * config.per_negative_moment,
            explanation=f"{negative} harmful testimony moment(s)",
        ),
        ScoreDriver(
            factor="Negative Signal Rate",
            weight=config.negative_ratio_bonus,
            raw_score=round(negative_rate * 100, 2),
            weighted_contribution=bonus,
            explanation=(
                f"{negative_rate:.0%} of {events} event(s) harmful "
                f"(bonus above {config.negative_ratio_threshold:.0%})"
            ),
        ),
    )

    value = clamp_score(sum(d.weighted_contribution for d in drivers))

    if value >= 70:
        interpretation = "High vulnerability - address contradictions urgently"
    elif value >= 50:
        interpretation = "Moderate vulnerability - monitor and prepare responses"
    else:
        interpretation = "Low vulnerability - case holding up well"

    recommendations = (
        ("Address remaining contradictions during cross/redirect",) if unexploited else ()
    )

    return Score(
        name=ScoreName.CROSS_EXAM_VULNERABILITY.value,
        label="Cross-Exam Vulnerability",
        value=round(value, 2),
        confidence=score_confidence(events, config),
        drivers=drivers,
        thresholds=ScoreThresholds(critical=70, high=50, medium=30, low=15),
        interpretation=interpretation,
        recommendations=recommendations,
        calculated_at=state.last_updated_at,
    )


def calculate_jury_persuasion(
    state: TrialState,
    config: Optional[ScoringConfig] = None,
) -> Score:
    """
    Average of momentum and the share of key moments that were positive.

    With no key moments yet, the score is the momentum alone.
    """
    config = config or get_settings().scoring

    momentum = float(state.momentum_score)
    positive = len(state.positive_moments)
    negative = len(state.negative_moments)
    total = positive + negative

    if total > 0:
        ratio_score = positive / total * 100
        momentum_weight = balance_weight = 0.5
    else:
        ratio_score = 0.0
        momentum_weight, balance_weight = 1.0, 0.0

    drivers = (
        ScoreDriver(
            factor="Testimony Momentum",
            weight=momentum_weight,
            raw_score=momentum,
            weighted_contribution=momentum * momentum_weight,
            explanation=f"Current momentum: {state.momentum_score}",
        ),
        ScoreDriver(
            factor="Signal Balance",
            weight=balance_weight,
            raw_score=round(ratio_score, 2),
            weighted_contribution=ratio_score * balance_weight,
            explanation=f"{positive} positive vs {negative} negative signals",
        ),
    )

    value = clamp_score(sum(d.weighted_contribution for d in drivers))

    if value >= 70:
        interpretation = "Strong jury appeal - narrative is compelling"
    elif value >= 50:
        interpretation = "Adequate jury appeal - maintain momentum"
    else:
        interpretation = "Jury appeal at risk - strengthen narrative"

    return Score(
        name=ScoreName.JURY_PERSUASION.value,
        label="Jury Persuasion",
        value=round(value, 2),
        confidence=score_confidence(state.events_processed, config),
        drivers=drivers,
        thresholds=ScoreThresholds(critical=30, high=40, medium=50, low=60),
        interpretation=interpretation,
        calculated_at=state.last_updated_at,
    )


def calculate_settlement_leverage(
    state: TrialState,
    cross_exam_vulnerability: float,
    jury_persuasion: float,
    config: Optional[ScoringConfig] = None,
) -> Score:
    """
    Negotiating strength from momentum, jury appeal and cross-exam resilience.
    """
    config = config or get_settings().scoring

    momentum = float(state.momentum_score)
    resilience = 100.0 - cross_exam_vulnerability

    drivers = (
        ScoreDriver(
            factor="Trial Momentum",
            weight=config.settlement_momentum_weight,
            raw_score=momentum,
            weighted_contribution=momentum * config.settlement_momentum_weight,
            explanation=f"Momentum score: {state.momentum_score}",
        ),
        ScoreDriver(
            factor="Jury Appeal",
            weight=config.settlement_jury_weight,
            raw_score=jury_persuasion,
            weighted_contribution=jury_persuasion * config.settlement_jury_weight,
            explanation=f"Jury persuasion score: {jury_persuasion:.1f}",
        ),
        ScoreDriver(
            factor="Cross-Exam Resilience",
            weight=config.settlement_resilience_weight,
            raw_score=resilience,
            weighted_contribution=resilience * config.settlement_resilience_weight,
            explanation=f"Resilience score: {resilience:.1f}",
        ),
    )

    value = clamp_score(sum(d.weighted_contribution for d in drivers))

    if value >= 70:
        interpretation = "Strong settlement position - leverage favorable terms"
        recommendations: tuple[str, ...] = ("Consider pushing for settlement discussion",)
    elif value >= 50:
        interpretation = "Moderate leverage - standard negotiation"
        recommendations = ()
    else:
        interpretation = "Weak leverage - consider settlement terms carefully"
        recommendations = ("Consider settlement to limit exposure",)

    return Score(
        name=ScoreName.SETTLEMENT_LEVERAGE.value,
        label="Settlement Leverage",
        value=round(value, 2),
        confidence=score_confidence(state.events_processed, config),
        drivers=drivers,
        thresholds=ScoreThresholds(critical=30, high=40, medium=50, low=60),
        interpretation=interpretation,
        recommendations=recommendations,
        calculated_at=state.last_updated_at,
    )


def calculate_scores(
    state: TrialState,
    config: Optional[ScoringConfig] = None,
) -> dict[str, Score]:
    """Rebuild all three composite scores from the full state."""
    config = config or get_settings().scoring

    cross_exam = calculate_cross_exam_vulnerability(state, config)
    jury = calculate_jury_persuasion(state, config)
    settlement = calculate_settlement_leverage(state, cross_exam.value, jury.value, config)

    return {
        cross_exam.name: cross_exam,
        jury.name: jury,
        settlement.name: settlement,
    }


# ---------------------------------------------------------------------------
# Summary and helper scores
# ---------------------------------------------------------------------------


def _momentum_interpretation(value: float) -> str:
    if value >= 80:
        return "Strong advantage - press forward aggressively"
    if value >= 60:
        return "Favorable position - maintain momentum"
    if value >= 40:
        return "Neutral position - look for opportunities"
    if value >= 20:
        return "Unfavorable position - implement recovery strategy"
    return "Critical position - focus on damage control"


def _momentum_recommendations(state: TrialState, value: float) -> list[str]:
    if value >= 70:
        recommendations = [
            "Consider pushing for settlement discussion",
            "Lock in key admissions before redirect",
        ]
    elif value >= 50:
        recommendations = [
            "Focus on unexploited contradictions",
            "Maintain steady pressure",
        ]
    elif value >= 30:
        recommendations = [
            "Prioritize credibility rehabilitation",
            "Consider strategic objections",
        ]
    else:
        recommendations = [
            "Request sidebar for strategy discussion",
            "Evaluate witness order changes",
            "Consider settlement to limit exposure",
        ]

    unexploited = len(state.unexploited_contradictions)
    if unexploited:
        recommendations.append(f"Exploit {unexploited} remaining contradiction(s)")

    return recommendations


def calculate_trial_momentum_score(
    state: TrialState,
    judge_interventions: int = 0,
    narrative_clarity: float = 70.0,
) -> Score:
    """
    Session-level momentum summary.

    Weighted blend of testimony signal balance (0.30), contradiction
    exploitation (0.25), judge favorability (0.20) and narrative clarity
    (0.25). Weights are normalized to sum to one.

    Args:
        state: Current trial state
        judge_interventions: Adverse interventions by the court so far
        narrative_clarity: Counsel's 0-100 assessment of narrative clarity
    """
    helpful = len(state.positive_moments)
    harmful = len(state.negative_moments)
    exploited = sum(1 for c in state.contradictions_found if c.exploited)
    remaining = len(state.contradictions_found) - exploited

    signal_ratio = helpful / max(1, helpful + harmful)
    exploitation = exploited / max(1, exploited + remaining)

    factors = [
        ("Testimony Signals", 0.30, signal_ratio * 100,
         f"{helpful} helpful vs {harmful} harmful signals"),
        ("Contradiction Exploitation", 0.25, exploitation * 100,
         f"{exploited} exploited, {remaining} remaining"),
        ("Judge Favorability", 0.20, max(0.0, 100.0 - judge_interventions * 10),
         f"{judge_interventions} adverse interventions"),
        ("Narrative Clarity", 0.25, clamp_score(narrative_clarity),
         "Counsel assessment of narrative clarity"),
    ]
    total_weight = sum(weight for _, weight, _, _ in factors)

    drivers = tuple(
        ScoreDriver(
            factor=factor,
            weight=weight / total_weight,
            raw_score=round(raw, 2),
            weighted_contribution=raw * weight / total_weight,
            explanation=explanation,
        )
        for factor, weight, raw, explanation in factors
    )

    value = round(clamp_score(sum(d.weighted_contribution for d in drivers)), 2)

    event_factor = min(state.events_processed / 50, 1.0)
    trend_factor = {
        MomentumTrend.STABLE: 1.0,
        MomentumTrend.IMPROVING: 0.9,
        MomentumTrend.DECLINING: 0.85,
    }[state.momentum_trend]

    return Score(
        name="trial_momentum",
        label="Trial Momentum",
        value=value,
        confidence=round(event_factor * 0.6 + trend_factor * 0.4, 2),
        drivers=drivers,
        thresholds=ScoreThresholds(critical=80, high=60, medium=40, low=20),
        interpretation=_momentum_interpretation(value),
        recommendations=tuple(_momentum_recommendations(state, value)),
        calculated_at=state.last_updated_at,
    )


def score_credibility_impact(starting_credibility: float, current_credibility: float) -> int:
    """Score how much damage has been done to a witness's credibility."""
    damage = starting_credibility - current_credibility

    if damage >= 50:
        return 95
    if damage >= 40:
        return 85
    if damage >= 30:
        return 70
    if damage >= 20:
        return 55
    if damage >= 10:
        return 40
    if damage > 0:
        return 25
    return 10


def score_impeachment_success(attempted: int, successful: int) -> int:
    """Score the impeachment success rate; neutral 50 with no attempts."""
    if attempted == 0:
        return 50

    rate = successful / attempted

    if rate >= 0.9:
        return 95
    if rate >= 0.75:
        return 80
    if rate >= 0.5:
        return 60
    if rate >= 0.25:
        return 35
    return 15


def score_objection_battle(
    our_successes: int,
    our_failures: int,
    their_successes: int,
    their_failures: int,
) -> int:
    """Blend our objection success rate with the inverse of theirs."""
    our_rate = our_successes / max(our_successes + our_failures, 1)
    their_rate = their_successes / max(their_successes + their_failures, 1)

    return round((our_rate * 0.5 + (1 - their_rate) * 0.5) * 100)
