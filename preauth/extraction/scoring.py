"""Confidence scoring and missing-field detection for extracted values."""

from typing import Dict, List, Optional

from ..models.core import ConfidenceLevel
from ..models.rules import ProcedureRule
from ..models.validation import ValidationUtils


# Values produced by the weaker heuristic path carry this marker.
HEURISTIC_MARKER = "extracted from"


def score_confidence(field_key: str, value: Optional[str]) -> ConfidenceLevel:
    """Classify a single extracted value."""
    if not ValidationUtils.is_present(value):
        return ConfidenceLevel.LOW
    if HEURISTIC_MARKER in value:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.HIGH


def build_confidence_map(fields: Dict[str, str], procedure_rule: ProcedureRule) -> Dict[str, ConfidenceLevel]:
    """One confidence entry per requirement of the rule."""
    return {
        requirement.key: score_confidence(requirement.key, fields.get(requirement.key))
        for requirement in procedure_rule.resolved
    }


def find_missing(fields: Dict[str, str], procedure_rule: ProcedureRule) -> List[str]:
    """
    Requirement labels with no usable value, in the rule's declared order.

    The original label is reported, not the normalized key.
    """
    return [
        requirement.label
        for requirement in procedure_rule.resolved
        if not ValidationUtils.is_present(fields.get(requirement.key))
    ]
