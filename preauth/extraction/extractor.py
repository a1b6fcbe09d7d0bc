"""
Field extraction from SOAP notes and consultation transcripts.

Each requirement of a procedure rule carries a resolved RequirementKind; one
handler per kind pulls a value from the clinical material. Transcript text is
searched before the subjective section, and the first regex match wins.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from ..models.core import ClinicalNote
from ..models.rules import ProcedureRule, RequirementKind
from ..models.validation import ValidationUtils


AGE_PATTERN = re.compile(r'(\d+)[- ]?years?[- ]?old', re.IGNORECASE)
DURATION_PATTERN = re.compile(r'(\d+)[- ]?(day|week|month|year)(?!s?[- ]?old)s?', re.IGNORECASE)

# canonical label -> trigger keywords, in output order
TREATMENT_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Physiotherapy", ("physiotherapy", "physical therapy")),
    ("NSAIDs", ("nsaid", "ibuprofen", "anti-inflammatory", "medication")),
    ("Intra-articular injection", ("injection",)),
]

LIMITATION_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Difficulty walking", ("walking",)),
    ("Difficulty climbing stairs", ("stairs",)),
    ("Sleep disturbance", ("sleep",)),
]


def _first_match(pattern: re.Pattern, *sources: str) -> Optional[re.Match]:
    for text in sources:
        match = pattern.search(text or "")
        if match:
            return match
    return None


def _scan_keywords(keywords: List[Tuple[str, Tuple[str, ...]]], *sources: str) -> Optional[str]:
    haystack = " ".join(text or "" for text in sources).lower()
    found = [label for label, triggers in keywords if any(trigger in haystack for trigger in triggers)]
    return ", ".join(found) if found else None


def _section(text: str) -> Optional[str]:
    return text if ValidationUtils.is_present(text) else None


def extract_age(note: ClinicalNote, transcript: str) -> Optional[str]:
    match = _first_match(AGE_PATTERN, transcript, note.subjective)
    return match.group(1) if match else None


def extract_diagnosis(note: ClinicalNote, transcript: str) -> Optional[str]:
    return _section(note.assessment)


def extract_duration(note: ClinicalNote, transcript: str) -> Optional[str]:
    match = _first_match(DURATION_PATTERN, transcript, note.subjective)
    if not match:
        return None
    return f"{match.group(1)} {match.group(2).lower()}s"


def extract_failed_treatments(note: ClinicalNote, transcript: str) -> Optional[str]:
    return _scan_keywords(TREATMENT_KEYWORDS, note.subjective, transcript)


def extract_functional_limitations(note: ClinicalNote, transcript: str) -> Optional[str]:
    return _scan_keywords(LIMITATION_KEYWORDS, note.subjective, transcript)


def extract_imaging(note: ClinicalNote, transcript: str) -> Optional[str]:
    return _section(note.objective)


def extract_plan(note: ClinicalNote, transcript: str) -> Optional[str]:
    return _section(note.plan)


Extractor = Callable[[ClinicalNote, str], Optional[str]]

EXTRACTORS: Dict[RequirementKind, Extractor] = {
    RequirementKind.AGE: extract_age,
    RequirementKind.DIAGNOSIS: extract_diagnosis,
    RequirementKind.DURATION: extract_duration,
    RequirementKind.FAILED_TREATMENT: extract_failed_treatments,
    RequirementKind.FUNCTIONAL_LIMITATION: extract_functional_limitations,
    RequirementKind.IMAGING: extract_imaging,
    RequirementKind.PLAN: extract_plan,
}


def extract_fields(clinical_note: ClinicalNote, transcript: str, procedure_rule: ProcedureRule) -> Dict[str, str]:
    """
    Extract a value for every requirement of the procedure rule.

    Args:
        clinical_note: Structured SOAP note
        transcript: Consultation transcript text, may be empty
        procedure_rule: Rule whose requirements drive extraction

    Returns:
        Field key -> value, holding only requirements with a present value.
        Requirements of kind OTHER never appear.
    """
    transcript = transcript or ""
    fields: Dict[str, str] = {}
    for requirement in procedure_rule.resolved:
        extractor = EXTRACTORS.get(requirement.kind)
        if extractor is None:
            continue
        value = extractor(clinical_note, transcript)
        if ValidationUtils.is_present(value):
            fields[requirement.key] = value
    return fields
