"""Rule-driven field extraction, confidence scoring and draft composition."""

from typing import Optional

from ..errors import MalformedInput
from ..models.core import ClinicalNote, PriorAuthDraft
from ..models.rules import RuleSet
from ..models.validation import ValidationUtils
from .extractor import extract_fields, EXTRACTORS
from .scoring import score_confidence, build_confidence_map, find_missing
from .draft import compose_draft, SECTION_DEFAULTS


def prepare_prior_auth(
    rules: RuleSet,
    payer: str,
    procedure_code: str,
    clinical_note: Optional[ClinicalNote],
    transcript: str = "",
    specialty: str = "orthopedics",
) -> PriorAuthDraft:
    """
    Run rule lookup, extraction, scoring and composition for one request.

    Raises:
        MalformedInput: clinical note, payer or procedure code missing
        UnknownPayer / UnknownProcedure: no rule for the request
    """
    if clinical_note is None:
        raise MalformedInput("Clinical note is required")
    missing_inputs = ValidationUtils.validate_required_fields(
        {"payer": payer, "procedure_code": procedure_code}, ["payer", "procedure_code"]
    )
    if missing_inputs:
        raise MalformedInput(f"Missing required fields: {missing_inputs}")

    procedure_rule = rules.get_rule(payer, procedure_code)
    fields = extract_fields(clinical_note, transcript or "", procedure_rule)

    return PriorAuthDraft(
        fields=fields,
        attachments=tuple(procedure_rule.attachments),
        missing=find_missing(fields, procedure_rule),
        draft=compose_draft(payer, procedure_code, clinical_note, fields, procedure_rule, specialty),
        confidence=build_confidence_map(fields, procedure_rule),
    )


__all__ = [
    "prepare_prior_auth",
    "extract_fields",
    "EXTRACTORS",
    "score_confidence",
    "build_confidence_map",
    "find_missing",
    "compose_draft",
    "SECTION_DEFAULTS",
]
