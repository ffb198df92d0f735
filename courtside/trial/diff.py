"""Diff engine.

Compares two trial snapshots and reports what a live dashboard should
show. Pure comparison: neither input is modified.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..config import DiffConfig, get_settings
from ..models import MomentImpact, ScoreName, TrialState


class Significance(str, Enum):
    """How much a change matters to counsel."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class StateChange:
    """One named field that changed between snapshots."""

    field: str
    from_value: Any
    to_value: Any
    significance: Significance

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "from": self.from_value,
            "to": self.to_value,
            "significance": self.significance.value,
        }


@dataclass(frozen=True)
class StateDiff:
    """Changes between a prior and a current snapshot."""

    timestamp: datetime
    changes: tuple[StateChange, ...] = ()
    momentum_delta: int = 0
    new_contradictions: int = 0
    new_key_moments: int = 0
    summary: str = "No significant changes"

    @property
    def has_changes(self) -> bool:
        """True when any field changed or anything was appended.

        Counts are included so testimony at a momentum bound, which
        leaves the score clamped, still registers.
        """
        return bool(self.changes or self.new_contradictions or self.new_key_moments)

    @property
    def significant_changes(self) -> list[StateChange]:
        return [c for c in self.changes if c.significance == Significance.HIGH]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "changes": [c.to_dict() for c in self.changes],
            "momentum_delta": self.momentum_delta,
            "new_contradictions": self.new_contradictions,
            "new_key_moments": self.new_key_moments,
            "summary": self.summary,
        }


def momentum_significance(delta: int, config: DiffConfig) -> Significance:
    """Band a momentum change by its magnitude."""
    magnitude = abs(delta)
    if magnitude >= config.high_momentum_delta:
        return Significance.HIGH
    if magnitude >= config.medium_momentum_delta:
        return Significance.MEDIUM
    return Significance.LOW


def compute_state_diff(
    prior: TrialState,
    current: TrialState,
    config: Optional[DiffConfig] = None,
) -> StateDiff:
    """
    Compare two snapshots of the same session.

    Momentum, phase, witness and trend are reported whenever they differ.
    A composite score is reported only when it moved by at least the
    configured minimum, so confidence drift and rounding stay out of the
    diff. Count deltas are clamped at zero, which tolerates snapshots
    supplied out of order.

    Args:
        prior: Earlier snapshot
        current: Later snapshot
        config: Significance bands (default from settings)

    Returns:
        StateDiff with the changes and a one-line summary
    """
    config = config or get_settings().diff
    changes: list[StateChange] = []

    momentum_delta = current.momentum_score - prior.momentum_score
    if momentum_delta != 0:
        changes.append(
            StateChange(
                field="momentum_score",
                from_value=prior.momentum_score,
                to_value=current.momentum_score,
                significance=momentum_significance(momentum_delta, config),
            )
        )

    if current.current_phase != prior.current_phase:
        changes.append(
            StateChange(
                field="current_phase",
                from_value=prior.current_phase.value,
                to_value=current.current_phase.value,
                significance=Significance.HIGH,
            )
        )

    if current.current_witness != prior.current_witness:
        changes.append(
            StateChange(
                field="current_witness",
                from_value=prior.current_witness,
                to_value=current.current_witness,
                significance=Significance.HIGH,
            )
        )

    if current.momentum_trend != prior.momentum_trend:
        changes.append(
            StateChange(
                field="momentum_trend",
                from_value=prior.momentum_trend.value,
                to_value=current.momentum_trend.value,
                significance=Significance.MEDIUM,
            )
        )

    for name in ScoreName:
        before = prior.get_score(name)
        after = current.get_score(name)
        if before is None or after is None:
            continue

        delta = abs(after.value - before.value)
        if delta < config.min_score_delta:
            continue

        changes.append(
            StateChange(
                field=f"scores.{name.value}",
                from_value=before.value,
                to_value=after.value,
                significance=(
                    Significance.HIGH if delta >= config.high_score_delta else Significance.MEDIUM
                ),
            )
        )

    new_contradictions = max(0, len(current.contradictions_found) - len(prior.contradictions_found))
    new_key_moments = max(0, len(current.key_moments) - len(prior.key_moments))

    summary = _summarize(current, changes, momentum_delta, new_contradictions, new_key_moments)

    return StateDiff(
        timestamp=current.last_updated_at,
        changes=tuple(changes),
        momentum_delta=momentum_delta,
        new_contradictions=new_contradictions,
        new_key_moments=new_key_moments,
        summary=summary,
    )


def _summarize(
    current: TrialState,
    changes: list[StateChange],
    momentum_delta: int,
    new_contradictions: int,
    new_key_moments: int,
) -> str:
    parts: list[str] = []

    significant = sum(1 for c in changes if c.significance == Significance.HIGH)
    if significant:
        parts.append(f"{significant} significant change(s)")

    if new_contradictions:
        parts.append(f"{new_contradictions} new contradiction(s) detected")

    if momentum_delta != 0 and new_key_moments:
        recent = current.key_moments[-new_key_moments:]
        impact = MomentImpact.POSITIVE if momentum_delta > 0 else MomentImpact.NEGATIVE
        count = sum(1 for m in recent if m.impact == impact)
        if count:
            parts.append(f"{count} {impact.value} moment(s)")

    return "; ".join(parts) if parts else "No significant changes"
