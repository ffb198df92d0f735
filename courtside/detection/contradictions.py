"""Contradiction detection and impeachment suggestions.

Testimony is checked against documented findings by independent detectors
(keyword negation, amount mismatch, date mismatch) and, through a separate
entry point, against the witness's own prior statements. Detectors overlap
on purpose: one utterance may trip several, which consumers can read as
corroborating signal.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Pattern

from ..config import ContradictionConfig, get_settings
from ..models import (
    ActionPriority,
    ActionType,
    Contradiction,
    ContradictionStrength,
    ContradictionType,
    Finding,
    PriorStatement,
    TestimonyEvent,
    TrialAction,
)
from ..utils.logging import get_logger
from ..utils.text import last_name, truncate, words

logger = get_logger(__name__)


STOP_WORDS = frozenset({
    "the", "a", "an", "is", "was", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might",
    "must", "shall", "can", "need", "dare", "ought", "used", "to", "of", "in",
    "for", "on", "with", "at", "by", "from", "as", "into", "through", "during",
    "before", "after", "above", "below", "between", "under", "again",
    "further", "then", "once", "here", "there", "when", "where", "why", "how",
    "all", "each", "few", "more", "most", "other", "some", "such", "no", "nor",
    "not", "only", "own", "same", "so", "than", "too", "very", "just", "and",
    "but", "if", "or", "because", "until", "while", "this", "that", "these",
    "those",
})

AMOUNT_PATTERN = re.compile(
    r"\$[\d,]+(?:\.\d{2})?|\d+(?:,\d{3})*(?:\.\d{2})?\s*(?:dollars|USD)",
    re.IGNORECASE,
)

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)

DATE_PATTERN = re.compile(
    r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"
    r"|\b\d{4}-\d{2}-\d{2}\b"
    rf"|\b{_MONTH}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b",
    re.IGNORECASE,
)

_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d", "%B %d %Y", "%b %d %Y")


def _normalize(text: str) -> str:
    """Lowercase, straighten apostrophes, collapse to word tokens."""
    return " ".join(words(text.replace("’", "'")))


def extract_keywords(text: str, min_length: int = 4) -> list[str]:
    """
    Extract content keywords for negation matching.

    Args:
        text: Source text (usually a finding description)
        min_length: Minimum keyword length

    Returns:
        Stopword-filtered tokens in order of appearance
    """
    cleaned = re.sub(r"[^\w\s]", "", text.lower())
    return [
        word for word in cleaned.split()
        if len(word) >= min_length and word not in STOP_WORDS
    ]


def extract_key_phrases(text: str, min_length: int = 6) -> list[str]:
    """Extract the 2- and 3-word phrases of a statement."""
    tokens = words(text.replace("’", "'"))
    phrases: list[str] = []

    for i in range(len(tokens) - 1):
        phrases.append(f"{tokens[i]} {tokens[i + 1]}")
        if i < len(tokens) - 2:
            phrases.append(f"{tokens[i]} {tokens[i + 1]} {tokens[i + 2]}")

    return [p for p in phrases if len(p) >= min_length]


def parse_amount(amount_text: str) -> Optional[float]:
    """Parse a money-shaped substring, returning None if it is not a number."""
    cleaned = re.sub(r"\s*(?:dollars|usd)", "", amount_text, flags=re.IGNORECASE)
    cleaned = cleaned.replace("$", "").replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_date(date_text: str) -> Optional[date]:
    """Parse a date-shaped substring, returning None if no format fits."""
    cleaned = re.sub(r"(\d)(?:st|nd|rd|th)\b", r"\1", date_text.lower())
    cleaned = cleaned.replace(",", " ").replace(".", " ")
    cleaned = re.sub(r"\bsept\b", "sep", cleaned)
    cleaned = " ".join(cleaned.split())

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def _format_amount(amount: float) -> str:
    if amount.is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def _negation_regex(prefixes: Iterable[str], target: str) -> Pattern:
    alternatives = "|".join(re.escape(p) for p in prefixes)
    return re.compile(rf"\b(?:{alternatives})\s+{re.escape(target)}\b")


# ---------------------------------------------------------------------------
# Finding detectors
# ---------------------------------------------------------------------------

FindingCheck = Callable[[TestimonyEvent, Finding, ContradictionConfig], Optional[Contradiction]]


@dataclass(frozen=True)
class ContradictionDetector:
    """A named strategy for comparing testimony against one finding."""

    name: str
    check: FindingCheck


def _check_keyword_negation(
    event: TestimonyEvent,
    finding: Finding,
    config: ContradictionConfig,
) -> Optional[Contradiction]:
    """Testimony negates a keyword the finding asserts positively."""
    description = finding.description.lower()
    if re.search(r"\bnot\b", description):
        return None

    event_text = _normalize(event.text)

    for keyword in extract_keywords(finding.description, config.min_keyword_length):
        if not _negation_regex(config.negation_prefixes, keyword).search(event_text):
            continue

        strength = (
            ContradictionStrength.STRONG
            if finding.confidence > config.strong_confidence
            else ContradictionStrength.MODERATE
        )
        return Contradiction(
            statement=truncate(event.text, config.statement_length),
            contradicts=f"Finding {finding.id}: {finding.title}",
            evidence_ref=finding.primary_ref,
            contradiction_type=ContradictionType.DIRECT,
            strength=strength,
            witness=event.speaker_name,
        )

    return None


def _check_amounts(
    event: TestimonyEvent,
    finding: Finding,
    config: ContradictionConfig,
) -> Optional[Contradiction]:
    """First amount in testimony diverges from the finding's first amount."""
    event_match = AMOUNT_PATTERN.search(event.text)
    finding_match = AMOUNT_PATTERN.search(finding.description)
    if not event_match or not finding_match:
        return None

    event_amount = parse_amount(event_match.group(0))
    finding_amount = parse_amount(finding_match.group(0))
    if event_amount is None or finding_amount is None or finding_amount == 0:
        logger.debug(
            f"Skipping amount comparison for {finding.id}: "
            f"'{event_match.group(0)}' vs '{finding_match.group(0)}'"
        )
        return None

    divergence = abs(event_amount - finding_amount) / abs(finding_amount)
    if divergence <= config.amount_divergence:
        return None

    strength = (
        ContradictionStrength.STRONG
        if divergence > config.strong_amount_divergence
        else ContradictionStrength.MODERATE
    )
    return Contradiction(
        statement=truncate(event.text, config.statement_length),
        contradicts=(
            f"Amount discrepancy in {finding.id}: stated {_format_amount(event_amount)} "
            f"vs finding {_format_amount(finding_amount)}"
        ),
        evidence_ref=finding.primary_ref,
        contradiction_type=ContradictionType.INCONSISTENT,
        strength=strength,
        witness=event.speaker_name,
    )


def _check_dates(
    event: TestimonyEvent,
    finding: Finding,
    config: ContradictionConfig,
) -> Optional[Contradiction]:
    """First date in testimony differs from the finding's first date."""
    event_match = DATE_PATTERN.search(event.text)
    finding_match = DATE_PATTERN.search(finding.description)
    if not event_match or not finding_match:
        return None

    event_date = parse_date(event_match.group(0))
    finding_date = parse_date(finding_match.group(0))
    if event_date is None or finding_date is None:
        logger.debug(
            f"Skipping date comparison for {finding.id}: "
            f"'{event_match.group(0)}' vs '{finding_match.group(0)}'"
        )
        return None

    if event_date == finding_date:
        return None

    return Contradiction(
        statement=truncate(event.text, config.statement_length),
        contradicts=(
            f"Date discrepancy in {finding.id}: stated {event_date.isoformat()} "
            f"vs finding {finding_date.isoformat()}"
        ),
        evidence_ref=finding.primary_ref,
        contradiction_type=ContradictionType.INCONSISTENT,
        strength=ContradictionStrength.MODERATE,
        witness=event.speaker_name,
    )


FINDING_DETECTORS: tuple[ContradictionDetector, ...] = (
    ContradictionDetector("keyword_negation", _check_keyword_negation),
    ContradictionDetector("amount_mismatch", _check_amounts),
    ContradictionDetector("date_mismatch", _check_dates),
)


def _already_recorded(candidate: Contradiction, recorded: Iterable[Contradiction]) -> bool:
    return any(
        c.statement == candidate.statement
        and c.contradicts == candidate.contradicts
        and c.evidence_ref == candidate.evidence_ref
        for c in recorded
    )


def detect_contradictions(
    event: TestimonyEvent,
    prior_findings: list[Finding],
    prior_contradictions: Iterable[Contradiction] = (),
    config: Optional[ContradictionConfig] = None,
    detectors: tuple[ContradictionDetector, ...] = FINDING_DETECTORS,
) -> list[Contradiction]:
    """
    Compare an utterance against documented findings.

    Every detector runs against every finding and the results are
    concatenated. A contradiction identical to one already recorded in the
    session (same statement, same target) is not reported again.

    Args:
        event: The utterance to check
        prior_findings: Findings from the case file
        prior_contradictions: Contradictions already recorded this session
        config: Detection thresholds (default from settings)
        detectors: Detector table to run

    Returns:
        New contradictions, grouped by finding then detector
    """
    config = config or get_settings().contradictions
    recorded = list(prior_contradictions)
    contradictions: list[Contradiction] = []

    for finding in prior_findings:
        for detector in detectors:
            contradiction = detector.check(event, finding, config)
            if contradiction is None:
                continue
            if _already_recorded(contradiction, recorded):
                continue
            logger.debug(
                f"{detector.name}: {contradiction.strength.value} "
                f"{contradiction.contradiction_type.value} contradiction with {finding.id}"
            )
            contradictions.append(contradiction)

    return contradictions


def compare_with_prior_statements(
    event: TestimonyEvent,
    prior_statements: list[PriorStatement],
    config: Optional[ContradictionConfig] = None,
) -> list[Contradiction]:
    """
    Compare testimony against the same witness's prior statements.

    Two checks per matching statement:
    - Claimed lack of memory ("I don't recall") on a topic the prior
      statement covers concretely -> moderate inconsistency.
    - Negation of a 2-3 word phrase the prior statement asserts
      affirmatively -> strong direct contradiction.

    Args:
        event: The utterance to check
        prior_statements: Depositions, interviews, emails, etc.
        config: Detection thresholds (default from settings)

    Returns:
        Contradictions found, in statement order
    """
    config = config or get_settings().contradictions
    speaker = event.speaker_name.strip().lower()
    current = _normalize(event.text)
    claims_no_memory = any(phrase in current for phrase in config.recall_phrases)

    contradictions: list[Contradiction] = []

    for prior in prior_statements:
        if prior.speaker.strip().lower() != speaker:
            continue

        prior_text = _normalize(prior.content)

        if claims_no_memory and not any(p in prior_text for p in config.recall_phrases):
            for topic in event.topic_tags:
                if topic.lower() in prior_text:
                    contradictions.append(
                        Contradiction(
                            statement=truncate(event.text, config.statement_length),
                            contradicts=(
                                f"Prior {prior.source} ({prior.date}): "
                                f"\"{truncate(prior.content, 100)}\""
                            ),
                            evidence_ref=prior.reference,
                            contradiction_type=ContradictionType.INCONSISTENT,
                            strength=ContradictionStrength.MODERATE,
                            witness=event.speaker_name,
                        )
                    )
                    break

        # Longest phrases first so the most specific claim is reported
        phrases = sorted(
            dict.fromkeys(extract_key_phrases(prior.content, config.min_phrase_length)),
            key=lambda p: len(p.split()),
            reverse=True,
        )
        for phrase in phrases:
            if not _negation_regex(config.negation_prefixes, phrase).search(current):
                continue
            if _negation_regex(["not"], phrase).search(prior_text):
                continue

            contradictions.append(
                Contradiction(
                    statement=truncate(event.text, config.statement_length),
                    contradicts=f"Prior {prior.source}: claimed \"{phrase}\"",
                    evidence_ref=prior.reference,
                    contradiction_type=ContradictionType.DIRECT,
                    strength=ContradictionStrength.STRONG,
                    witness=event.speaker_name,
                )
            )
            break

    if contradictions:
        logger.debug(
            f"{len(contradictions)} prior-statement contradiction(s) for {event.speaker_name}"
        )

    return contradictions


# ---------------------------------------------------------------------------
# Impeachment actions
# ---------------------------------------------------------------------------


def _impeachment_language(contradiction: Contradiction, witness: str) -> str:
    return (
        f"{last_name(witness)}, you just testified that "
        f"\"{truncate(contradiction.statement, 50)}.\" "
        f"I'd like to direct your attention to [EXHIBIT], which shows "
        f"{truncate(contradiction.contradicts, 50)}. "
        "Were you being truthful in your testimony just now?"
    )


def generate_impeachment_actions(
    contradictions: list[Contradiction],
    event: TestimonyEvent,
) -> list[TrialAction]:
    """
    Turn detected contradictions into impeachment suggestions.

    Strong direct contradictions are P0; everything else is P1.
    """
    actions: list[TrialAction] = []

    for contradiction in contradictions:
        witness = contradiction.witness or event.speaker_name

        if contradiction.contradiction_type == ContradictionType.DIRECT:
            strong = contradiction.strength == ContradictionStrength.STRONG
            actions.append(
                TrialAction(
                    priority=ActionPriority.P0 if strong else ActionPriority.P1,
                    action_type=ActionType.IMPEACHMENT,
                    target=witness,
                    suggested_language=_impeachment_language(contradiction, witness),
                    rationale=(
                        "Witness testimony directly contradicts documented evidence "
                        f"in {contradiction.evidence_ref}"
                    ),
                    evidence_refs=(contradiction.evidence_ref,),
                    risk_tradeoff=(
                        "May damage rapport with jury if handled aggressively; "
                        "recommend measured approach"
                    ),
                    confidence=0.85 if strong else 0.65,
                )
            )
        else:
            actions.append(
                TrialAction(
                    priority=ActionPriority.P1,
                    action_type=ActionType.IMPEACHMENT,
                    target=witness,
                    suggested_language=(
                        "Your testimony today states [X]. However, [exhibit/prior "
                        "statement] indicates [Y]. Can you explain this discrepancy?"
                    ),
                    rationale=(
                        f"Inconsistency between current testimony and "
                        f"{contradiction.contradicts}"
                    ),
                    evidence_refs=(contradiction.evidence_ref,),
                    risk_tradeoff=(
                        "Witness may have reasonable explanation; be prepared for clarification"
                    ),
                    confidence=0.6,
                )
            )

    return actions
