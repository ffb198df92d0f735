"""Testimony event and reference-record models.

A TestimonyEvent is one utterance delivered by the ingestion side. Findings
and prior statements are the reference material testimony is checked
against.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..exceptions import InvalidEventError


class Phase(str, Enum):
    """Phase of the proceeding."""

    OPENING = "opening"
    DIRECT = "direct"
    CROSS = "cross"
    REDIRECT = "redirect"
    RECROSS = "recross"
    CLOSING = "closing"
    SIDEBAR = "sidebar"


class SpeakerRole(str, Enum):
    """Who is speaking."""

    ATTORNEY = "attorney"
    WITNESS = "witness"
    JUDGE = "judge"


class CredibilitySignal(str, Enum):
    """Whether an utterance helps or hurts the represented party."""

    HELPFUL = "helpful"
    HARMFUL = "harmful"
    NEUTRAL = "neutral"


REQUIRED_EVENT_FIELDS = ("timestamp", "phase", "speaker_role", "speaker_name", "text")


def _enum_value(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise InvalidEventError(
            f"Invalid {field_name} '{value}' (expected one of: {allowed})"
        ) from None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise InvalidEventError(f"Invalid timestamp '{value}'") from None


def _string_tuple(value: Any, field_name: str) -> tuple[str, ...]:
    """Normalize a tag list; a bare string is one tag, not its characters."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple)):
        raise InvalidEventError(
            f"Invalid {field_name}: expected a list of strings, got {type(value).__name__}"
        )
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class TestimonyEvent:
    """One utterance in the proceeding. Immutable once created."""

    __test__ = False  # not a pytest class despite the name

    timestamp: datetime
    phase: Phase
    speaker_role: SpeakerRole
    speaker_name: str
    text: str
    topic_tags: tuple[str, ...] = ()
    exhibit_refs: tuple[str, ...] = ()
    credibility_signal: CredibilitySignal = CredibilitySignal.NEUTRAL

    @property
    def is_witness(self) -> bool:
        return self.speaker_role == SpeakerRole.WITNESS

    @property
    def is_attorney(self) -> bool:
        return self.speaker_role == SpeakerRole.ATTORNEY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "phase": self.phase.value,
            "speaker_role": self.speaker_role.value,
            "speaker_name": self.speaker_name,
            "text": self.text,
            "topic_tags": list(self.topic_tags),
            "exhibit_refs": list(self.exhibit_refs),
            "credibility_signal": self.credibility_signal.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TestimonyEvent":
        """Create from dictionary, rejecting malformed records.

        Raises:
            InvalidEventError: If a required field is missing, an enum
                value is not recognized, or a tag field is not a list.
        """
        missing = [name for name in REQUIRED_EVENT_FIELDS if data.get(name) in (None, "")]
        if missing:
            raise InvalidEventError(f"Missing required field(s): {', '.join(missing)}")

        return cls(
            timestamp=_parse_timestamp(data["timestamp"]),
            phase=_enum_value(Phase, data["phase"], "phase"),
            speaker_role=_enum_value(SpeakerRole, data["speaker_role"], "speaker_role"),
            speaker_name=str(data["speaker_name"]),
            text=str(data["text"]),
            topic_tags=_string_tuple(data.get("topic_tags"), "topic_tags"),
            exhibit_refs=_string_tuple(data.get("exhibit_refs"), "exhibit_refs"),
            credibility_signal=_enum_value(
                CredibilitySignal,
                data.get("credibility_signal") or "neutral",
                "credibility_signal",
            ),
        )


@dataclass
class Finding:
    """A documented fact from the case file that testimony can contradict."""

    id: str
    title: str
    description: str
    confidence: float = 0.5
    evidence_refs: list[str] = field(default_factory=list)
    category: Optional[str] = None

    @property
    def primary_ref(self) -> str:
        """First evidence reference, falling back to the finding ID."""
        return self.evidence_refs[0] if self.evidence_refs else self.id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "evidence_refs": self.evidence_refs,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        """Create from dictionary."""
        for name in ("id", "description"):
            if not data.get(name):
                raise InvalidEventError(f"Finding is missing required field: {name}")
        return cls(
            id=data["id"],
            title=data.get("title", data["id"]),
            description=data["description"],
            confidence=float(data.get("confidence", 0.5)),
            evidence_refs=list(_string_tuple(data.get("evidence_refs"), "evidence_refs")),
            category=data.get("category"),
        )


@dataclass
class PriorStatement:
    """A statement the witness made before trial (deposition, interview, email)."""

    source: str
    date: str
    content: str
    speaker: str

    @property
    def reference(self) -> str:
        """Evidence reference in the form source-date."""
        return f"{self.source}-{self.date}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "date": self.date,
            "content": self.content,
            "speaker": self.speaker,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PriorStatement":
        """Create from dictionary."""
        missing = [n for n in ("source", "date", "content", "speaker") if not data.get(n)]
        if missing:
            raise InvalidEventError(
                f"Prior statement is missing required field(s): {', '.join(missing)}"
            )
        return cls(
            source=data["source"],
            date=str(data["date"]),
            content=data["content"],
            speaker=data["speaker"],
        )
