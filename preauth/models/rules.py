"""Payer rule models: which fields and attachments a procedure requires."""

import re
from typing import Any, Dict, List
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator

from ..errors import UnknownPayer, UnknownProcedure
from .validation import ValidationUtils


class RequirementKind(str, Enum):
    """How a requirement label is extracted from clinical material."""
    AGE = "age"
    DIAGNOSIS = "diagnosis"
    DURATION = "duration"
    FAILED_TREATMENT = "failed_treatment"
    FUNCTIONAL_LIMITATION = "functional_limitation"
    IMAGING = "imaging"
    PLAN = "plan"
    OTHER = "other"


_IMAGING_TOKENS = {"imaging", "x-ray", "xray", "mri", "radiology", "radiological", "radiograph", "radiographs"}
_TOKEN_SPLIT = re.compile(r"[^a-z0-9-]+")


def classify_requirement(label: str) -> RequirementKind:
    """Resolve a requirement label to its kind. First matching rule wins."""
    key = ValidationUtils.normalize_field_key(label.strip())
    tokens = set(_TOKEN_SPLIT.split(key)) - {""}

    if "age" in tokens:
        return RequirementKind.AGE
    if "diagnos" in key:
        return RequirementKind.DIAGNOSIS
    if "duration" in key:
        return RequirementKind.DURATION
    if ("treatment" in key or "therap" in key) and ("failed" in key or "conservative" in key):
        return RequirementKind.FAILED_TREATMENT
    if "limitation" in key or "functional" in key:
        return RequirementKind.FUNCTIONAL_LIMITATION
    if tokens & _IMAGING_TOKENS:
        return RequirementKind.IMAGING
    if "plan" in tokens or "treatment" in key:
        return RequirementKind.PLAN
    return RequirementKind.OTHER


class RequirementField(BaseModel):
    """A requirement label resolved to its field key and extraction kind."""
    label: str = Field(..., description="Requirement label as declared by the payer rule")
    key: str = Field(..., description="Normalized field key")
    kind: RequirementKind = Field(..., description="Extraction strategy")

    @classmethod
    def from_label(cls, label: str) -> "RequirementField":
        return cls(
            label=label,
            key=ValidationUtils.normalize_field_key(label),
            kind=classify_requirement(label),
        )


class ProcedureRule(BaseModel):
    """Requirements a payer attaches to one procedure."""
    code: str = Field(default="", description="Procedure code, defaults to its key in the rule document")
    name: str = Field(..., description="Procedure display name")
    requirements: List[str] = Field(default_factory=list, description="Required fields, in display order")
    attachments: List[str] = Field(default_factory=list, description="Required attachments, in display order")
    criteria: Dict[str, Any] = Field(default_factory=dict, description="Free-form payer criteria")
    resolved: List[RequirementField] = Field(default_factory=list, exclude=True, description="Resolved requirements")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Procedure name cannot be empty")
        return v.strip()

    @field_validator('requirements', 'attachments')
    @classmethod
    def validate_labels(cls, v, info):
        blank = [index for index, label in enumerate(v) if not label or not label.strip()]
        if blank:
            raise ValueError(f"Blank {info.field_name} labels at positions: {blank}")
        return [label.strip() for label in v]

    @model_validator(mode='after')
    def resolve_fields(self):
        """Resolve each requirement label once, when the rule is loaded."""
        duplicates = ValidationUtils.find_duplicates(self.requirements)
        if duplicates:
            raise ValueError(f"Duplicate requirements: {duplicates}")
        self.resolved = [RequirementField.from_label(label) for label in self.requirements]
        return self

    def fields_of_kind(self, kind: RequirementKind) -> List[RequirementField]:
        """Resolved requirements of the given kind, in declared order."""
        return [field for field in self.resolved if field.kind == kind]

    @property
    def display_name(self) -> str:
        return self.name or self.code


class PayerRules(BaseModel):
    """All procedure rules of one payer."""
    procedures: Dict[str, ProcedureRule] = Field(default_factory=dict)

    @model_validator(mode='after')
    def assign_codes(self):
        invalid = [code for code in self.procedures if not ValidationUtils.validate_procedure_code(code)]
        if invalid:
            raise ValueError(f"Invalid procedure codes: {invalid}")
        for code, rule in self.procedures.items():
            if not rule.code:
                rule.code = code
        return self


class RuleSet(BaseModel):
    """The complete payer rule document."""
    payers: Dict[str, PayerRules] = Field(default_factory=dict)

    @field_validator('payers')
    @classmethod
    def validate_payer_names(cls, v):
        blank = [name for name in v if not name or not name.strip()]
        if blank:
            raise ValueError("Payer names cannot be empty")
        return v

    def to_document(self) -> Dict[str, Any]:
        """Serialize back to the on-disk document shape."""
        return self.model_dump(mode="json")

    def get_rule(self, payer: str, procedure_code: str) -> ProcedureRule:
        """Look up the rule for a payer's procedure."""
        payer_rules = self.payers.get(payer)
        if payer_rules is None:
            raise UnknownPayer(payer)
        procedure_rule = payer_rules.procedures.get(procedure_code)
        if procedure_rule is None:
            raise UnknownProcedure(payer, procedure_code)
        return procedure_rule
