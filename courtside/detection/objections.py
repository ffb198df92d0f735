"""Objection detection for attorney questions.

Each objection is a declarative rule: trigger patterns plus metadata. One
generic matcher evaluates every rule, so objection types can be added or
removed without touching control flow.
"""

import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Pattern

from ..models import ActionPriority, ActionType, Phase, TestimonyEvent, TrialAction
from ..utils.logging import get_logger

logger = get_logger(__name__)


class Applicability(str, Enum):
    """Examination phases an objection applies to."""

    DIRECT = "direct"
    CROSS = "cross"
    BOTH = "both"


class RiskLevel(str, Enum):
    """Risk of raising an objection."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RISK_ASSESSMENTS = {
    RiskLevel.LOW: "Low risk - standard objection likely to be sustained if pattern applies",
    RiskLevel.MEDIUM: "Medium risk - may require foundation or argument; judge discretion applies",
    RiskLevel.HIGH: "High risk - may appear obstructive; use strategically",
}

HEARSAY_EXCEPTION_NOTE = (
    " Note: Multiple hearsay exceptions may apply (business records, excited "
    "utterance, present sense impression, etc.)"
)

OBJECTION_CONFIDENCE = 0.6


@dataclass(frozen=True)
class ObjectionRule:
    """A named objection with its trigger patterns."""

    objection_type: str
    patterns: tuple[Pattern[str], ...]
    basis: str
    suggested_language: str
    applicability: Applicability
    risk_level: RiskLevel

    def applies_to(self, phase: Phase) -> bool:
        """Check whether the rule is in play during a phase."""
        if self.applicability == Applicability.DIRECT:
            return phase == Phase.DIRECT
        if self.applicability == Applicability.CROSS:
            return phase == Phase.CROSS
        return True

    def matches(self, text: str) -> bool:
        """Check whether any trigger pattern appears in the text."""
        return any(pattern.search(text) for pattern in self.patterns)


def _rule(
    objection_type: str,
    patterns: list[str],
    basis: str,
    suggested_language: str,
    applicability: Applicability,
    risk_level: RiskLevel,
) -> ObjectionRule:
    return ObjectionRule(
        objection_type=objection_type,
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        basis=basis,
        suggested_language=suggested_language,
        applicability=applicability,
        risk_level=risk_level,
    )


_AUX = r"(?:did|was|were|is|are|have|has)"

# Declaration order is output order.
OBJECTION_RULES: tuple[ObjectionRule, ...] = (
    _rule(
        "hearsay",
        [
            r"\b(?:he|she|they)\s+(?:said|told|mentioned|stated)\b",
            r"\bI\s+(?:heard|was\s+told)\s+that\b",
            r"\b(?:someone|another\s+person)\s+(?:said|told)\b",
            r"\baccording\s+to\s+(?:him|her|them|someone)\b",
        ],
        "Hearsay - FRE 802",
        "Objection, hearsay. The witness is testifying to an out-of-court "
        "statement offered for the truth of the matter asserted.",
        Applicability.BOTH,
        RiskLevel.LOW,
    ),
    _rule(
        "speculation",
        [
            r"\bI\s+(?:think|believe|assume|guess|suppose)\b",
            r"\b(?:probably|maybe|perhaps|possibly)\b",
            r"\bI\s+would\s+(?:imagine|assume|guess)\b",
            r"\bit\s+seems?\s+(?:like|to\s+me)\b",
        ],
        "Speculation/Lack of foundation - FRE 602",
        "Objection, speculation. The witness is speculating rather than "
        "testifying to personal knowledge.",
        Applicability.BOTH,
        RiskLevel.LOW,
    ),
    _rule(
        "leading",
        [
            r"\bisn't\s+it\s+true\s+that\b",
            r"\bwouldn't\s+you\s+agree\b",
            r"\byou\s+(?:did|would|should),?\s+(?:didn't|wouldn't|shouldn't)\s+you\b",
            r"\bthat's\s+correct,?\s+isn't\s+it\b",
        ],
        "Leading question - FRE 611(c)",
        "Objection, leading. Counsel is testifying for the witness.",
        Applicability.DIRECT,
        RiskLevel.MEDIUM,
    ),
    _rule(
        "compound",
        [
            rf"\?\s*(?:and|or)\s+{_AUX}\b",
            rf"\b{_AUX}\b[^?]*\b(?:and|or)\b[^?]*\b{_AUX}\b[^?]*\?",
        ],
        "Compound question",
        "Objection, compound question. The question contains multiple "
        "questions that should be asked separately.",
        Applicability.BOTH,
        RiskLevel.LOW,
    ),
    _rule(
        "argumentative",
        [
            r"\bisn't\s+it\s+(?:really|actually|true)\s+that\s+you're\b",
            r"\byou're\s+(?:just|simply|only)\s+(?:lying|making)\b",
            r"\bso\s+(?:basically|essentially)\s+you(?:'re|'ve)\b",
        ],
        "Argumentative",
        "Objection, argumentative. Counsel is arguing rather than asking a question.",
        Applicability.CROSS,
        RiskLevel.MEDIUM,
    ),
    _rule(
        "assumes_facts",
        [
            r"\bafter\s+you\s+(?:stole|lied|cheated|defrauded)\b",
            r"\bwhen\s+you\s+(?:committed|perpetrated)\b",
            r"\bthe\s+(?:fraud|theft|crime)\s+you\s+committed\b",
        ],
        "Assumes facts not in evidence",
        "Objection, assumes facts not in evidence. The question assumes a "
        "fact that has not been established.",
        Applicability.CROSS,
        RiskLevel.LOW,
    ),
    _rule(
        "narrative",
        [
            r"\btell\s+(?:us|the\s+jury|me)\s+(?:everything|all\s+about|the\s+whole)\b",
            r"\bdescribe\s+(?:everything|all\s+that|what\s+happened)\b",
        ],
        "Calls for narrative response",
        "Objection, calls for a narrative response.",
        Applicability.DIRECT,
        RiskLevel.LOW,
    ),
    _rule(
        "opinion",
        [
            r"\bwhat\s+do\s+you\s+think\s+(?:caused|happened|motivated)\b",
            r"\bin\s+your\s+opinion\b",
            r"\bwould\s+you\s+say\s+that\b",
        ],
        "Opinion - FRE 701/702",
        "Objection. The witness is being asked for an opinion beyond their "
        "expertise or the scope of lay opinion.",
        Applicability.BOTH,
        RiskLevel.MEDIUM,
    ),
)


def get_risk_assessment(risk_level: RiskLevel) -> str:
    """Describe the tradeoff of raising an objection at a risk tier."""
    return RISK_ASSESSMENTS.get(risk_level, "Assess based on judge and context")


def detect_objections(
    event: TestimonyEvent,
    rules: tuple[ObjectionRule, ...] = OBJECTION_RULES,
) -> list[TrialAction]:
    """
    Map an attorney's question to potential objections.

    Objections are raised against questions, so only attorney speech is
    evaluated. A rule fires when it applies to the event's phase and at
    least one of its patterns matches. Actions come back in rule
    declaration order; prioritization happens in the strategy engine.

    Args:
        event: The utterance to scan
        rules: Rule table to evaluate

    Returns:
        One objection action per rule that fired
    """
    if not event.is_attorney:
        return []

    actions: list[TrialAction] = []

    for rule in rules:
        if not rule.applies_to(event.phase):
            continue
        if not rule.matches(event.text):
            continue

        risk_tradeoff = get_risk_assessment(rule.risk_level)
        if rule.objection_type == "hearsay":
            risk_tradeoff += HEARSAY_EXCEPTION_NOTE

        actions.append(
            TrialAction(
                priority=ActionPriority.P1 if rule.risk_level == RiskLevel.LOW else ActionPriority.P2,
                action_type=ActionType.OBJECTION,
                target=rule.objection_type,
                suggested_language=rule.suggested_language,
                rationale=f"Potential {rule.objection_type} objection. Basis: {rule.basis}",
                risk_tradeoff=risk_tradeoff,
                confidence=OBJECTION_CONFIDENCE,
            )
        )

    if actions:
        logger.debug(
            f"Objections matched for {event.speaker_name}: "
            f"{', '.join(a.target for a in actions)}"
        )

    return actions


def detect_speaking_objection(event: TestimonyEvent, min_words: int = 20) -> bool:
    """Detect an improper speaking objection by counsel.

    Speaking objections argue beyond the stated basis, so they tend to be
    verbose.
    """
    if not event.is_attorney:
        return False

    text = event.text.lower()
    return "objection" in text and len(text.split()) > min_words


class ObjectionRuling(str, Enum):
    """How the court ruled on an objection."""

    SUSTAINED = "sustained"
    OVERRULED = "overruled"
    PENDING = "pending"


@dataclass
class ObjectionRecord:
    """An objection raised during the session."""

    timestamp: datetime
    objection_type: str
    basis: str
    ruling: ObjectionRuling = ObjectionRuling.PENDING
    notes: Optional[str] = None


@dataclass
class _RulingTally:
    sustained: int = 0
    overruled: int = 0


@dataclass
class ObjectionTracker:
    """Tracks objections and how this judge has ruled on each type."""

    records: list[ObjectionRecord] = field(default_factory=list)
    _tallies: dict[str, _RulingTally] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._tallies = defaultdict(_RulingTally)
        for objection in self.records:
            self._tally(objection)

    def record(self, objection: ObjectionRecord) -> None:
        """Record an objection and its ruling."""
        self.records.append(objection)
        self._tally(objection)

    def _tally(self, objection: ObjectionRecord) -> None:
        tally = self._tallies[objection.objection_type]
        if objection.ruling == ObjectionRuling.SUSTAINED:
            tally.sustained += 1
        elif objection.ruling == ObjectionRuling.OVERRULED:
            tally.overruled += 1

    def get_success_rate(self, objection_type: str) -> float:
        """Share of ruled objections of this type that were sustained.

        Returns 0.5 when there is no ruling history.
        """
        tally = self._tallies.get(objection_type)
        if tally is None:
            return 0.5

        total = tally.sustained + tally.overruled
        if total == 0:
            return 0.5

        return tally.sustained / total

    def get_recommendation(self, objection_type: str) -> str:
        """Advise whether to press an objection type with this judge."""
        rate = self.get_success_rate(objection_type)
        pct = f"{rate * 100:.0f}%"

        if rate >= 0.7:
            return (
                f"{objection_type} objections have been successful ({pct}). "
                "Consider making this objection."
            )
        if rate >= 0.4:
            return f"{objection_type} objections have mixed results ({pct}). Use strategically."
        return (
            f"{objection_type} objections have been unsuccessful ({pct}). "
            "Consider alternative approach."
        )

    def pending_count(self) -> int:
        """Number of objections still awaiting a ruling."""
        return sum(1 for r in self.records if r.ruling == ObjectionRuling.PENDING)


def evaluate_sidebar_need(
    objections_pending: int,
    evidence_issue: bool = False,
    jury_prejudice: bool = False,
    witness_issue: bool = False,
) -> Optional[TrialAction]:
    """
    Decide whether to request a sidebar.

    Args:
        objections_pending: Objections still awaiting a ruling
        evidence_issue: A complex evidentiary question is open
        jury_prejudice: Something prejudicial needs discussing outside the jury
        witness_issue: A witness problem has come up (recorded, not decisive)

    Returns:
        A P1 sidebar request, or None when no sidebar is warranted
    """
    if not (objections_pending >= 3 or evidence_issue or jury_prejudice):
        return None

    if jury_prejudice:
        rationale = "Need to address potential jury prejudice outside their presence"
    elif evidence_issue:
        rationale = "Complex evidentiary issue requires discussion"
    else:
        rationale = "Multiple pending objections require resolution"

    if witness_issue:
        rationale += "; witness issue also pending"

    return TrialAction(
        priority=ActionPriority.P1,
        action_type=ActionType.SIDEBAR_REQUEST,
        target="court",
        suggested_language="Your Honor, may we approach the bench?",
        rationale=rationale,
        risk_tradeoff="Sidebars interrupt flow but may be necessary for complex issues",
        confidence=0.7,
    )
