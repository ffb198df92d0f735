"""Tests for contradiction detection and impeachment actions."""

from datetime import date

import pytest

from courtside.detection import (
    compare_with_prior_statements,
    detect_contradictions,
    extract_key_phrases,
    extract_keywords,
    generate_impeachment_actions,
    parse_amount,
    parse_date,
)
from courtside.models import (
    ActionPriority,
    ActionType,
    Contradiction,
    ContradictionStrength,
    ContradictionType,
    Finding,
    PriorStatement,
)


def amount_finding(description: str = "Paid $100 by the vendor for consulting") -> Finding:
    return Finding(id="F-100", title="Consulting fee", description=description, evidence_refs=["EX-7"])


class TestParsing:
    """Tests for the text helpers detectors rely on."""

    def test_extract_keywords_drops_short_and_stop_words(self):
        """Short words and stop words are not keywords."""
        keywords = extract_keywords("received $9,500 cash payment from vendor X")

        assert keywords == ["received", "9500", "cash", "payment", "vendor"]

    def test_extract_key_phrases(self):
        """Multi-word phrases are pulled from prior statements."""
        phrases = extract_key_phrases("I approved the wire")

        assert "approved the" in phrases
        assert "approved the wire" in phrases
        assert "i approved" in phrases
        assert "the wire" in phrases

    @pytest.mark.parametrize(
        "text,expected",
        [("$9,500", 9500.0), ("$12.50", 12.5), ("1,200 dollars", 1200.0), ("$", None)],
    )
    def test_parse_amount(self, text, expected):
        """Dollar amounts parse to numbers."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("03/15/2023", date(2023, 3, 15)),
            ("2023-03-15", date(2023, 3, 15)),
            ("March 20, 2023", date(2023, 3, 20)),
            ("Sept. 3rd, 2022", date(2022, 9, 3)),
            ("13/45/2023", None),
        ],
    )
    def test_parse_date(self, text, expected):
        """Dates parse from the supported formats."""
        assert parse_date(text) == expected


class TestKeywordNegation:
    """Testimony negating a finding's keyword."""

    def test_high_confidence_finding_is_strong(self, make_event, cash_finding):
        """Denying a confident finding is a strong direct contradiction."""
        event = make_event("I never received that cash payment")

        [contradiction] = detect_contradictions(event, [cash_finding])

        assert contradiction.contradiction_type == ContradictionType.DIRECT
        assert contradiction.strength == ContradictionStrength.STRONG
        assert contradiction.evidence_ref == "EX-14"
        assert contradiction.contradicts == "Finding F-001: Cash payment from vendor"
        assert contradiction.witness == "Jane Doe"

    def test_low_confidence_finding_is_moderate(self, make_event, cash_finding):
        """Denying a low-confidence finding is only moderate."""
        cash_finding.confidence = 0.7
        event = make_event("It was not cash, it was a check")

        [contradiction] = detect_contradictions(event, [cash_finding])

        assert contradiction.strength == ContradictionStrength.MODERATE

    def test_negative_finding_skipped(self, make_event):
        """Findings that are themselves negative are not checked for negation."""
        finding = Finding(id="F-2", title="No audit", description="The company did not audit revenue")

        assert detect_contradictions(make_event("We never audit revenue"), [finding]) == []

    def test_affirmation_is_not_contradiction(self, make_event, cash_finding):
        """Agreeing with a finding is not a contradiction."""
        assert detect_contradictions(make_event("Yes, I received the payment"), [cash_finding]) == []

    def test_already_recorded_not_repeated(self, make_event, cash_finding):
        """A contradiction already in the session is not reported twice."""
        event = make_event("I never received that cash payment")
        first = detect_contradictions(event, [cash_finding])

        again = detect_contradictions(event, [cash_finding], prior_contradictions=first)

        assert again == []


class TestAmountMismatch:
    """Numeric divergence boundaries."""

    def test_nineteen_percent_is_not_a_contradiction(self, make_event):
        """A 19% divergence is within tolerance."""
        assert detect_contradictions(make_event("The fee was $119"), [amount_finding()]) == []

    def test_twenty_one_percent_is_moderate(self, make_event):
        """A 21% divergence is a moderate contradiction."""
        [contradiction] = detect_contradictions(make_event("The fee was $121"), [amount_finding()])

        assert contradiction.contradiction_type == ContradictionType.INCONSISTENT
        assert contradiction.strength == ContradictionStrength.MODERATE
        assert contradiction.contradicts == "Amount discrepancy in F-100: stated $121 vs finding $100"

    def test_fifty_one_percent_is_strong(self, make_event):
        """Above 50% divergence the contradiction is strong."""
        [contradiction] = detect_contradictions(make_event("The fee was $151"), [amount_finding()])

        assert contradiction.strength == ContradictionStrength.STRONG

    def test_lower_amount_also_diverges(self, make_event):
        """Understating an amount counts the same as overstating it."""
        [contradiction] = detect_contradictions(make_event("The fee was $40"), [amount_finding()])

        assert contradiction.strength == ContradictionStrength.STRONG

    def test_zero_finding_amount_skipped(self, make_event):
        """A zero reference amount skips the comparison."""
        finding = amount_finding("Paid $0 by the vendor for consulting")

        assert detect_contradictions(make_event("The fee was $500"), [finding]) == []

    def test_only_first_amounts_compared(self, make_event):
        """Only the first amount on each side is compared."""
        event = make_event("The fee was $100, and later $900 for travel")

        assert detect_contradictions(event, [amount_finding()]) == []


class TestDateMismatch:
    """Date divergence."""

    def test_different_date_is_moderate(self, make_event):
        """A different date is a moderate contradiction."""
        finding = Finding(id="F-3", title="Wire", description="Wire transfer sent on 03/15/2023")

        [contradiction] = detect_contradictions(
            make_event("The transfer went out on March 20, 2023"), [finding]
        )

        assert contradiction.strength == ContradictionStrength.MODERATE
        assert "2023-03-20 vs finding 2023-03-15" in contradiction.contradicts

    def test_same_date_in_other_format_matches(self, make_event):
        """The same date written differently is not a contradiction."""
        finding = Finding(id="F-3", title="Wire", description="Wire transfer sent on 03/15/2023")

        assert detect_contradictions(make_event("It went out 2023-03-15"), [finding]) == []


class TestPriorStatements:
    """Comparison against the witness's own earlier statements."""

    def test_negated_phrase_is_strong_direct(self, make_event, deposition):
        """Negating a prior statement is a strong direct contradiction."""
        event = make_event("I never approved the wire transfer")

        [contradiction] = compare_with_prior_statements(event, [deposition])

        assert contradiction.contradiction_type == ContradictionType.DIRECT
        assert contradiction.strength == ContradictionStrength.STRONG
        assert contradiction.evidence_ref == "deposition-2024-06-01"
        assert contradiction.contradicts == "Prior deposition: claimed \"approved the wire\""

    def test_claimed_lack_of_memory_is_moderate(self, make_event, deposition):
        """Claiming not to recall a documented topic is moderate."""
        event = make_event("I don't recall the wire transfer", topic_tags=("wire",))

        [contradiction] = compare_with_prior_statements(event, [deposition])

        assert contradiction.contradiction_type == ContradictionType.INCONSISTENT
        assert contradiction.strength == ContradictionStrength.MODERATE

    def test_evasive_prior_statement_ignored(self, make_event):
        """Prior statements that were themselves evasive are skipped."""
        prior = PriorStatement(
            source="interview", date="2024-02-02",
            content="I do not recall anything about the wire.", speaker="Jane Doe",
        )
        event = make_event("I don't recall the wire transfer", topic_tags=("wire",))

        assert compare_with_prior_statements(event, [prior]) == []

    def test_other_speakers_ignored(self, make_event, deposition):
        """Statements by other people are not compared."""
        event = make_event("I never approved the wire transfer", speaker="John Roe")

        assert compare_with_prior_statements(event, [deposition]) == []

    def test_speaker_match_ignores_case(self, make_event, deposition):
        """Speaker names match regardless of case."""
        event = make_event("I never approved the wire transfer", speaker="JANE DOE")

        assert len(compare_with_prior_statements(event, [deposition])) == 1


class TestImpeachmentActions:
    """Contradictions become impeachment suggestions."""

    def _contradiction(self, kind, strength):
        return Contradiction(
            statement="I never received that cash payment",
            contradicts="Finding F-001: Cash payment from vendor",
            evidence_ref="EX-14",
            contradiction_type=kind,
            strength=strength,
            witness="Jane Doe",
        )

    def test_strong_direct_is_p0(self, make_event):
        """Strong direct contradictions become P0 impeachments."""
        contradiction = self._contradiction(ContradictionType.DIRECT, ContradictionStrength.STRONG)

        [action] = generate_impeachment_actions([contradiction], make_event())

        assert action.priority == ActionPriority.P0
        assert action.action_type == ActionType.IMPEACHMENT
        assert action.evidence_refs == ("EX-14",)
        assert action.suggested_language.startswith("Doe, you just testified")

    def test_moderate_direct_is_p1(self, make_event):
        """Moderate direct contradictions become P1 impeachments."""
        contradiction = self._contradiction(ContradictionType.DIRECT, ContradictionStrength.MODERATE)

        [action] = generate_impeachment_actions([contradiction], make_event())

        assert action.priority == ActionPriority.P1
        assert action.confidence == 0.65

    def test_inconsistency_uses_discrepancy_template(self, make_event):
        """Inconsistencies use the discrepancy wording."""
        contradiction = self._contradiction(ContradictionType.INCONSISTENT, ContradictionStrength.STRONG)

        [action] = generate_impeachment_actions([contradiction], make_event())

        assert action.priority == ActionPriority.P1
        assert "Can you explain this discrepancy?" in action.suggested_language
