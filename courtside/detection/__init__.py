"""Pattern detectors for live testimony."""

from .contradictions import (
    FINDING_DETECTORS,
    ContradictionDetector,
    compare_with_prior_statements,
    detect_contradictions,
    extract_key_phrases,
    extract_keywords,
    generate_impeachment_actions,
    parse_amount,
    parse_date,
)
from .objections import (
    OBJECTION_RULES,
    Applicability,
    ObjectionRecord,
    ObjectionRule,
    ObjectionRuling,
    ObjectionTracker,
    RiskLevel,
    detect_objections,
    detect_speaking_objection,
    evaluate_sidebar_need,
)

__all__ = [
    # Contradictions
    "FINDING_DETECTORS",
    "ContradictionDetector",
    "compare_with_prior_statements",
    "detect_contradictions",
    "extract_key_phrases",
    "extract_keywords",
    "generate_impeachment_actions",
    "parse_amount",
    "parse_date",
    # Objections
    "OBJECTION_RULES",
    "Applicability",
    "ObjectionRecord",
    "ObjectionRule",
    "ObjectionRuling",
    "ObjectionTracker",
    "RiskLevel",
    "detect_objections",
    "detect_speaking_objection",
    "evaluate_sidebar_need",
]
