"""Shared pytest fixtures for Courtside tests."""

from datetime import datetime, timedelta
from typing import Callable, Generator

import pytest

from courtside.config import Settings, configure
from courtside.models import (
    CredibilitySignal,
    Finding,
    Phase,
    PriorStatement,
    SpeakerRole,
    TestimonyEvent,
    TrialState,
)
from courtside.trial import initialize_trial_state


SESSION_START = datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture(autouse=True)
def default_settings() -> Generator[Settings, None, None]:
    """Pin built-in defaults so environment overrides never leak into tests."""
    settings = Settings()
    configure(settings)
    yield settings
    configure(None)


@pytest.fixture
def fresh_state() -> TrialState:
    """A new session with neutral defaults."""
    return initialize_trial_state(session_id="TRL-TEST0001", started_at=SESSION_START)


@pytest.fixture
def make_event() -> Callable[..., TestimonyEvent]:
    """Factory for testimony events with sensible defaults.

    Each call advances the timestamp by one second so sequences stay ordered.
    """
    counter = {"n": 0}

    def _make(
        text: str = "Yes.",
        phase: Phase = Phase.CROSS,
        role: SpeakerRole = SpeakerRole.WITNESS,
        speaker: str = "Jane Doe",
        signal: CredibilitySignal = CredibilitySignal.NEUTRAL,
        topic_tags: tuple[str, ...] = (),
        exhibit_refs: tuple[str, ...] = (),
    ) -> TestimonyEvent:
        counter["n"] += 1
        return TestimonyEvent(
            timestamp=SESSION_START + timedelta(seconds=counter["n"]),
            phase=phase,
            speaker_role=role,
            speaker_name=speaker,
            text=text,
            topic_tags=topic_tags,
            exhibit_refs=exhibit_refs,
            credibility_signal=signal,
        )

    return _make


@pytest.fixture
def attorney_question(make_event) -> Callable[..., TestimonyEvent]:
    """Factory for attorney questions."""

    def _make(text: str, phase: Phase = Phase.CROSS) -> TestimonyEvent:
        return make_event(text=text, phase=phase, role=SpeakerRole.ATTORNEY, speaker="Mr. Hale")

    return _make


@pytest.fixture
def cash_finding() -> Finding:
    """High-confidence finding about a cash payment."""
    return Finding(
        id="F-001",
        title="Cash payment from vendor",
        description="received $9,500 cash payment from vendor X",
        confidence=0.9,
        evidence_refs=["EX-14"],
    )


@pytest.fixture
def deposition() -> PriorStatement:
    """Deposition testimony from the witness."""
    return PriorStatement(
        source="deposition",
        date="2024-06-01",
        content="I approved the wire transfer to the vendor myself.",
        speaker="Jane Doe",
    )


@pytest.fixture
def sample_event_dict() -> dict:
    """A well-formed event record as delivered by ingestion."""
    return {
        "timestamp": "2025-03-10T10:15:00",
        "phase": "cross",
        "speaker_role": "witness",
        "speaker_name": "Jane Doe",
        "text": "I never received that cash payment",
        "topic_tags": ["payment"],
        "exhibit_refs": ["EX-14"],
        "credibility_signal": "harmful",
    }
