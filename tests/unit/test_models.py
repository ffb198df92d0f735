"""Tests for Courtside data models."""

from dataclasses import replace
from datetime import datetime

import pytest

from courtside.exceptions import CourtsideError, InvalidEventError
from courtside.models import (
    ActionPriority,
    ActionType,
    Contradiction,
    ContradictionStrength,
    ContradictionType,
    CredibilitySignal,
    Finding,
    KeyMoment,
    MomentImpact,
    Phase,
    Posture,
    PriorStatement,
    ScoreName,
    SpeakerRole,
    StrategyConfig,
    TestimonyEvent,
    TrialAction,
    TrialState,
)
from courtside.trial import calculate_scores, generate_actions


class TestTestimonyEvent:
    """Tests for TestimonyEvent parsing at the ingestion boundary."""

    def test_from_dict_parses_all_fields(self, sample_event_dict):
        """A complete record becomes a typed event."""
        event = TestimonyEvent.from_dict(sample_event_dict)

        assert event.timestamp == datetime(2025, 3, 10, 10, 15, 0)
        assert event.phase == Phase.CROSS
        assert event.speaker_role == SpeakerRole.WITNESS
        assert event.credibility_signal == CredibilitySignal.HARMFUL
        assert event.topic_tags == ("payment",)
        assert event.exhibit_refs == ("EX-14",)
        assert event.is_witness
        assert not event.is_attorney

    def test_signal_defaults_to_neutral(self, sample_event_dict):
        """A missing credibility signal means neutral."""
        del sample_event_dict["credibility_signal"]

        event = TestimonyEvent.from_dict(sample_event_dict)

        assert event.credibility_signal == CredibilitySignal.NEUTRAL

    @pytest.mark.parametrize("missing", ["timestamp", "phase", "speaker_role", "speaker_name", "text"])
    def test_missing_required_field_rejected(self, sample_event_dict, missing):
        """Each required field is enforced."""
        del sample_event_dict[missing]

        with pytest.raises(InvalidEventError, match=missing):
            TestimonyEvent.from_dict(sample_event_dict)

    def test_unknown_phase_rejected(self, sample_event_dict):
        """Enum values outside the closed set are rejected."""
        sample_event_dict["phase"] = "voir_dire"

        with pytest.raises(InvalidEventError, match="phase"):
            TestimonyEvent.from_dict(sample_event_dict)

    def test_bad_timestamp_rejected(self, sample_event_dict):
        """Timestamps must be ISO formatted."""
        sample_event_dict["timestamp"] = "yesterday"

        with pytest.raises(InvalidEventError):
            TestimonyEvent.from_dict(sample_event_dict)

    def test_invalid_event_is_courtside_error(self):
        """Ingestion errors share the package base exception."""
        assert issubclass(InvalidEventError, CourtsideError)


    @pytest.mark.parametrize("key", ["topic_tags", "exhibit_refs"])
    def test_bare_string_is_one_entry(self, sample_event_dict, key):
        """A single string is one tag, not a run of characters."""
        sample_event_dict[key] = "revenue"

        event = TestimonyEvent.from_dict(sample_event_dict)

        assert getattr(event, key) == ("revenue",)

    @pytest.mark.parametrize("value", [7, {"tag": "revenue"}])
    def test_non_list_tags_rejected(self, sample_event_dict, value):
        """Tag fields must be lists of strings."""
        sample_event_dict["topic_tags"] = value

        with pytest.raises(InvalidEventError, match="topic_tags"):
            TestimonyEvent.from_dict(sample_event_dict)

    def test_bare_string_tag_reaches_theme_match(
        self, sample_event_dict, fresh_state
    ):
        """A string tag from ingestion still drives the key-theme branch."""
        sample_event_dict.update(
            topic_tags="revenue",
            credibility_signal="neutral",
            text="Revenue was booked at quarter end.",
        )
        event = TestimonyEvent.from_dict(sample_event_dict)

        actions = generate_actions(fresh_state, event)

        assert [a.target for a in actions if a.action_type == ActionType.REFRAME] == ["revenue"]
    def test_to_dict_round_trip(self, sample_event_dict):
        """Event -> dict -> Event preserves all fields."""
        event = TestimonyEvent.from_dict(sample_event_dict)

        assert TestimonyEvent.from_dict(event.to_dict()) == event


class TestReferenceRecords:
    """Tests for Finding and PriorStatement."""

    def test_finding_primary_ref_prefers_evidence(self, cash_finding):
        """Primary reference is the first evidence ref."""
        assert cash_finding.primary_ref == "EX-14"

    def test_finding_primary_ref_falls_back_to_id(self):
        """Without evidence refs the finding ID is used."""
        finding = Finding(id="F-9", title="t", description="d")

        assert finding.primary_ref == "F-9"

    def test_finding_requires_description(self):
        """Findings need a description."""
        with pytest.raises(InvalidEventError):
            Finding.from_dict({"id": "F-1"})

    def test_prior_statement_reference(self, deposition):
        """References combine source and date."""
        assert deposition.reference == "deposition-2024-06-01"

    def test_prior_statement_requires_speaker(self):
        """Prior statements need a speaker."""
        with pytest.raises(InvalidEventError):
            PriorStatement.from_dict({"source": "email", "date": "2024-01-01", "content": "x"})


class TestTrialAction:
    """Tests for TrialAction and StrategyConfig."""

    def test_priority_rank_order(self):
        """P0 outranks P1 outranks P2."""
        ranks = [p.rank for p in (ActionPriority.P0, ActionPriority.P1, ActionPriority.P2)]

        assert ranks == [0, 1, 2]

    def test_to_dict_uses_type_key(self):
        """Consumers read the action kind from 'type'."""
        action = TrialAction(
            priority=ActionPriority.P1,
            action_type=ActionType.OBJECTION,
            target="hearsay",
            suggested_language="Objection, hearsay.",
            rationale="Out-of-court statement",
            evidence_refs=("EX-1",),
        )

        data = action.to_dict()

        assert data["type"] == "objection"
        assert data["evidence_refs"] == ["EX-1"]
        assert TrialAction.from_dict(data) == action

    def test_strategy_config_from_partial_dict(self):
        """Unspecified preferences keep their defaults."""
        config = StrategyConfig.from_dict({"posture": "aggressive", "priorities": ["reframe"]})

        assert config.posture == Posture.AGGRESSIVE
        assert config.priorities == [ActionType.REFRAME]
        assert config.risk_tolerance.value == "medium"


class TestTrialState:
    """Tests for TrialState serialization and accessors."""

    def test_fresh_state_has_baseline_scores(self, fresh_state):
        """Every composite score starts at the neutral baseline."""
        for name in ScoreName:
            score = fresh_state.get_score(name)
            assert score is not None
            assert score.value == 50.0
            assert score.confidence == 0.5
            assert score.interpretation == "Initial baseline score"

    def test_to_dict_round_trip(self, fresh_state):
        """State -> dict -> State preserves nested records."""
        when = datetime(2025, 3, 10, 11, 0, 0)
        state = TrialState(
            session_id=fresh_state.session_id,
            started_at=fresh_state.started_at,
            last_updated_at=when,
            events_processed=4,
            current_phase=Phase.REDIRECT,
            current_witness="Jane Doe",
            momentum_score=44,
            key_moments=(
                KeyMoment(when, "Harmful testimony: \"no\"", MomentImpact.NEGATIVE),
            ),
            contradictions_found=(
                Contradiction(
                    statement="I never signed it",
                    contradicts="Finding F-2: Signed contract",
                    evidence_ref="EX-2",
                    contradiction_type=ContradictionType.DIRECT,
                    strength=ContradictionStrength.STRONG,
                    witness="Jane Doe",
                ),
            ),
        )
        state = replace(state, scores=calculate_scores(state))

        restored = TrialState.from_dict(state.to_dict())

        assert restored == state

    def test_unexploited_contradictions_oldest_first(self, fresh_state):
        """Exploited contradictions are excluded and order is kept."""
        first = Contradiction("a", "b", "EX-1", ContradictionType.DIRECT, ContradictionStrength.WEAK)
        second = Contradiction("c", "d", "EX-2", ContradictionType.DIRECT, ContradictionStrength.WEAK)
        used = Contradiction(
            "e", "f", "EX-3", ContradictionType.DIRECT, ContradictionStrength.WEAK, exploited=True
        )
        state = TrialState(
            session_id="s",
            started_at=fresh_state.started_at,
            last_updated_at=fresh_state.started_at,
            contradictions_found=(first, used, second),
        )

        assert state.unexploited_contradictions == [first, second]

    def test_scores_are_read_only(self, fresh_state):
        """Score maps cannot be mutated through a snapshot."""
        with pytest.raises(TypeError):
            fresh_state.scores["jury_persuasion"] = None

    def test_replaced_snapshot_does_not_share_scores(self, fresh_state):
        """A snapshot built from a dict keeps its own copy."""
        scores = dict(fresh_state.scores)
        state = replace(fresh_state, scores=scores)

        del scores["jury_persuasion"]

        assert state.get_score(ScoreName.JURY_PERSUASION) is not None
