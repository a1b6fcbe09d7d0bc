"""LangGraph state schema for the drafting workflow."""

from typing import Dict, List, Optional, TypedDict

from ..models import (
    ClinicalNote,
    ConfidenceLevel,
    PrepareIntake,
    ProcedureRule,
)


class PrepareState(TypedDict, total=False):
    # Intake
    payer: str
    procedure_code: str
    specialty: str
    clinical_note: Optional[ClinicalNote]
    soap_text: Optional[str]
    transcript: str
    request_id: Optional[str]
    submitted_by: str
    summarized: bool

    # Rule lookup
    rule_version: int
    procedure_rule: ProcedureRule
    attachments: List[str]

    # Extraction and assessment
    fields: Dict[str, str]
    confidence: Dict[str, ConfidenceLevel]
    missing: List[str]

    # Output
    draft: str


__all__ = ["PrepareIntake", "PrepareState"]
