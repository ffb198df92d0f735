"""Suggested trial action models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionPriority(str, Enum):
    """How urgently counsel should act. P0 means act immediately."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"

    @property
    def rank(self) -> int:
        """Sort rank, lower is more urgent."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    ActionPriority.P0: 0,
    ActionPriority.P1: 1,
    ActionPriority.P2: 2,
}


class ActionType(str, Enum):
    """Kinds of tactical moves the engine can suggest."""

    IMPEACHMENT = "impeachment"
    OBJECTION = "objection"
    REFRAME = "reframe"
    EXHIBIT = "exhibit"
    CONCESSION = "concession"
    SIDEBAR_REQUEST = "sidebar_request"


class Posture(str, Enum):
    """Overall trial posture."""

    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    DEFENSIVE = "defensive"


class RiskTolerance(str, Enum):
    """Appetite for risky moves."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class TrialAction:
    """A suggested tactical move.

    Attributes:
        priority: P0/P1/P2 urgency tier
        action_type: Kind of move
        target: Witness name, topic, objection type or evidence ID
        suggested_language: Phrasing counsel can use
        rationale: Why the move is suggested
        evidence_refs: Supporting evidence references
        risk_tradeoff: Risk/benefit note
        confidence: Confidence in the suggestion, 0-1
    """

    priority: ActionPriority
    action_type: ActionType
    target: str
    suggested_language: str
    rationale: str
    evidence_refs: tuple[str, ...] = ()
    risk_tradeoff: str = ""
    confidence: float = 0.5

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "priority": self.priority.value,
            "type": self.action_type.value,
            "target": self.target,
            "suggested_language": self.suggested_language,
            "rationale": self.rationale,
            "evidence_refs": list(self.evidence_refs),
            "risk_tradeoff": self.risk_tradeoff,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrialAction":
        """Create from dictionary."""
        return cls(
            priority=ActionPriority(data["priority"]),
            action_type=ActionType(data["type"]),
            target=data["target"],
            suggested_language=data.get("suggested_language", ""),
            rationale=data.get("rationale", ""),
            evidence_refs=tuple(data.get("evidence_refs", [])),
            risk_tradeoff=data.get("risk_tradeoff", ""),
            confidence=data.get("confidence", 0.5),
        )


@dataclass
class StrategyConfig:
    """Counsel's strategic preferences.

    ``priorities`` orders action types within a priority tier; types not
    listed sort after every listed type. ``risk_tolerance`` is carried for
    consumers and does not change which actions are generated.
    """

    posture: Posture = Posture.BALANCED
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    priorities: list[ActionType] = field(
        default_factory=lambda: [
            ActionType.IMPEACHMENT,
            ActionType.OBJECTION,
            ActionType.REFRAME,
            ActionType.EXHIBIT,
            ActionType.SIDEBAR_REQUEST,
            ActionType.CONCESSION,
        ]
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "posture": self.posture.value,
            "risk_tolerance": self.risk_tolerance.value,
            "priorities": [p.value for p in self.priorities],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StrategyConfig":
        """Create from dictionary."""
        config = cls()
        if "posture" in data:
            config.posture = Posture(data["posture"])
        if "risk_tolerance" in data:
            config.risk_tolerance = RiskTolerance(data["risk_tolerance"])
        if "priorities" in data:
            config.priorities = [ActionType(p) for p in data["priorities"]]
        return config
