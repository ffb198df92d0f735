"""Composite score models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ScoreName(str, Enum):
    """The composite scores kept in trial state."""

    CROSS_EXAM_VULNERABILITY = "cross_exam_vulnerability"
    JURY_PERSUASION = "jury_persuasion"
    SETTLEMENT_LEVERAGE = "settlement_leverage"


@dataclass(frozen=True)
class ScoreDriver:
    """One factor contributing to a score."""

    factor: str
    weight: float
    raw_score: float
    weighted_contribution: float
    explanation: str
    evidence_refs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "factor": self.factor,
            "weight": self.weight,
            "raw_score": self.raw_score,
            "weighted_contribution": self.weighted_contribution,
            "explanation": self.explanation,
            "evidence_refs": list(self.evidence_refs),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoreDriver":
        return cls(
            factor=data["factor"],
            weight=data["weight"],
            raw_score=data["raw_score"],
            weighted_contribution=data["weighted_contribution"],
            explanation=data.get("explanation", ""),
            evidence_refs=tuple(data.get("evidence_refs", [])),
        )


@dataclass(frozen=True)
class ScoreThresholds:
    """Severity band cutoffs."""

    critical: float = 80
    high: float = 60
    medium: float = 40
    low: float = 20

    def to_dict(self) -> dict[str, float]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoreThresholds":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class Score:
    """A named composite metric.

    Scores are always rebuilt from the full trial state, never patched, so
    the drivers and the value cannot drift apart.
    """

    name: str
    label: str
    value: float
    confidence: float
    drivers: tuple[ScoreDriver, ...] = ()
    thresholds: ScoreThresholds = field(default_factory=ScoreThresholds)
    interpretation: str = ""
    recommendations: tuple[str, ...] = ()
    calculated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "label": self.label,
            "value": self.value,
            "confidence": self.confidence,
            "drivers": [d.to_dict() for d in self.drivers],
            "thresholds": self.thresholds.to_dict(),
            "interpretation": self.interpretation,
            "recommendations": list(self.recommendations),
            "calculated_at": self.calculated_at.isoformat() if self.calculated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Score":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            label=data.get("label", data["name"]),
            value=data["value"],
            confidence=data["confidence"],
            drivers=tuple(ScoreDriver.from_dict(d) for d in data.get("drivers", [])),
            thresholds=ScoreThresholds.from_dict(data.get("thresholds", {})),
            interpretation=data.get("interpretation", ""),
            recommendations=tuple(data.get("recommendations", [])),
            calculated_at=datetime.fromisoformat(data["calculated_at"])
            if data.get("calculated_at")
            else None,
        )


def baseline_score(name: ScoreName, calculated_at: Optional[datetime] = None) -> Score:
    """Neutral score used before any testimony has been processed."""
    return Score(
        name=name.value,
        label=name.value.replace("_", " ").title(),
        value=50.0,
        confidence=0.5,
        thresholds=ScoreThresholds(critical=80, high=60, medium=40, low=20),
        interpretation="Initial baseline score",
        calculated_at=calculated_at,
    )
