"""Trial state models.

TrialState is a value: the engine never mutates a snapshot, it builds a new
one with ``dataclasses.replace``. That keeps "prior vs. current" comparisons
well defined and lets a session be replayed deterministically.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .action import ActionPriority, TrialAction
from .event import Phase
from .score import Score, ScoreName


class MomentumTrend(str, Enum):
    """Direction momentum is moving."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class MomentImpact(str, Enum):
    """Effect of a key moment on the represented party."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class ContradictionType(str, Enum):
    """How testimony conflicts with the record."""

    DIRECT = "direct"
    INCONSISTENT = "inconsistent"
    OMISSION = "omission"


class ContradictionStrength(str, Enum):
    """How strong a contradiction is."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


@dataclass(frozen=True)
class KeyMoment:
    """Testimony judged to meaningfully help or hurt the case."""

    timestamp: datetime
    description: str
    impact: MomentImpact

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "impact": self.impact.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeyMoment":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            description=data["description"],
            impact=MomentImpact(data["impact"]),
        )


@dataclass(frozen=True)
class Contradiction:
    """An inconsistency between testimony and a finding or prior statement.

    Only ``exploited`` ever changes after creation, and only when counsel
    has acted on the contradiction.
    """

    statement: str
    contradicts: str
    evidence_ref: str
    contradiction_type: ContradictionType
    strength: ContradictionStrength
    witness: Optional[str] = None
    exploited: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "statement": self.statement,
            "contradicts": self.contradicts,
            "evidence_ref": self.evidence_ref,
            "contradiction_type": self.contradiction_type.value,
            "strength": self.strength.value,
            "witness": self.witness,
            "exploited": self.exploited,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contradiction":
        return cls(
            statement=data["statement"],
            contradicts=data["contradicts"],
            evidence_ref=data["evidence_ref"],
            contradiction_type=ContradictionType(data.get("contradiction_type", "inconsistent")),
            strength=ContradictionStrength(data.get("strength", "moderate")),
            witness=data.get("witness"),
            exploited=data.get("exploited", False),
        )


@dataclass(frozen=True)
class TrialState:
    """Running history of one proceeding.

    Attributes:
        session_id: Session identifier (TRL-...)
        started_at: When the session was created
        last_updated_at: Timestamp of the last folded event
        events_processed: Number of events folded so far (never decreases)
        current_phase: Phase of the most recent event
        current_witness: Name of the most recent witness to speak
        momentum_score: Advantage indicator clamped to [0, 100]
        momentum_trend: Direction over the recent key moments
        key_moments: Append-only, in insertion order
        contradictions_found: Append-only; only ``exploited`` flips
        pending_actions: P0 actions awaiting counsel
        completed_actions: Actions counsel has carried out
        scores: The three composite scores keyed by ScoreName value (read-only)
    """

    session_id: str
    started_at: datetime
    last_updated_at: datetime
    events_processed: int = 0
    current_phase: Phase = Phase.OPENING
    current_witness: Optional[str] = None
    momentum_score: int = 50
    momentum_trend: MomentumTrend = MomentumTrend.STABLE
    key_moments: tuple[KeyMoment, ...] = ()
    contradictions_found: tuple[Contradiction, ...] = ()
    pending_actions: tuple[TrialAction, ...] = ()
    completed_actions: tuple[TrialAction, ...] = ()
    scores: Mapping[str, Score] = field(default_factory=dict)

    def __post_init__(self):
        # Snapshots share nothing mutable
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))

    @property
    def positive_moments(self) -> list[KeyMoment]:
        return [m for m in self.key_moments if m.impact == MomentImpact.POSITIVE]

    @property
    def negative_moments(self) -> list[KeyMoment]:
        return [m for m in self.key_moments if m.impact == MomentImpact.NEGATIVE]

    @property
    def unexploited_contradictions(self) -> list[Contradiction]:
        """Contradictions not yet acted on, oldest first."""
        return [c for c in self.contradictions_found if not c.exploited]

    def get_score(self, name: ScoreName) -> Optional[Score]:
        return self.scores.get(name.value)

    def pending_by_priority(self, priority: ActionPriority) -> list[TrialAction]:
        return [a for a in self.pending_actions if a.priority == priority]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "session_id": self.session_id,
            "started_at": self.started_at.isoformat(),
            "last_updated_at": self.last_updated_at.isoformat(),
            "events_processed": self.events_processed,
            "current_phase": self.current_phase.value,
            "current_witness": self.current_witness,
            "momentum_score": self.momentum_score,
            "momentum_trend": self.momentum_trend.value,
            "key_moments": [m.to_dict() for m in self.key_moments],
            "contradictions_found": [c.to_dict() for c in self.contradictions_found],
            "pending_actions": [a.to_dict() for a in self.pending_actions],
            "completed_actions": [a.to_dict() for a in self.completed_actions],
            "scores": {name: s.to_dict() for name, s in self.scores.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrialState":
        """Create from dictionary."""
        return cls(
            session_id=data["session_id"],
            started_at=datetime.fromisoformat(data["started_at"]),
            last_updated_at=datetime.fromisoformat(
                data.get("last_updated_at") or data["started_at"]
            ),
            events_processed=data.get("events_processed", 0),
            current_phase=Phase(data.get("current_phase", "opening")),
            current_witness=data.get("current_witness"),
            momentum_score=data.get("momentum_score", 50),
            momentum_trend=MomentumTrend(data.get("momentum_trend", "stable")),
            key_moments=tuple(KeyMoment.from_dict(m) for m in data.get("key_moments", [])),
            contradictions_found=tuple(
                Contradiction.from_dict(c) for c in data.get("contradictions_found", [])
            ),
            pending_actions=tuple(
                TrialAction.from_dict(a) for a in data.get("pending_actions", [])
            ),
            completed_actions=tuple(
                TrialAction.from_dict(a) for a in data.get("completed_actions", [])
            ),
            scores={
                name: Score.from_dict(s) for name, s in data.get("scores", {}).items()
            },
        )
