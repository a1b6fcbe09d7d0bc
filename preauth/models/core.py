"""Core data models for the prior-authorization drafting assistant."""

from types import MappingProxyType
from typing import List, Mapping, Optional, Dict, Any, Tuple
from datetime import datetime, UTC
from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_serializer, field_validator, model_validator
from enum import Enum

from ..errors import MalformedInput
from .validation import ValidationUtils


class ConfidenceLevel(str, Enum):
    """Trust level assigned to an automatically extracted field value."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RequestStatus(str, Enum):
    """Lifecycle status of a tracked prior-authorization request."""
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


class MaterialKind(str, Enum):
    """Kinds of material attached to a request."""
    TRANSCRIPT = "transcript"
    SUMMARY = "summary"
    DRAFT = "draft"
    PACKET = "packet"


class ClinicalNote(BaseModel):
    """Structured SOAP summary of a consultation. Any section may be empty."""
    subjective: str = Field(default="", description="Patient's reported symptoms, concerns, and history")
    objective: str = Field(default="", description="Clinical findings, examination results, and diagnostic tests")
    assessment: str = Field(default="", description="Clinical diagnosis and reasoning")
    plan: str = Field(default="", description="Recommended treatment plan and next steps")

    @field_validator('subjective', 'objective', 'assessment', 'plan', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    def is_empty(self) -> bool:
        return not any(ValidationUtils.is_present(section) for section in
                       (self.subjective, self.objective, self.assessment, self.plan))


class PrepareIntake(BaseModel):
    """Request to prepare a prior-authorization draft."""
    payer: str = Field(..., description="Medical aid receiving the request")
    procedure_code: str = Field(..., description="Procedure code under the payer's rules")
    specialty: str = Field(default="orthopedics", description="Clinical specialty of the request")
    clinical_note: Optional[ClinicalNote] = Field(None, description="Structured SOAP note")
    soap_text: Optional[str] = Field(None, description="SOAP note as free text with section headers")
    transcript: str = Field(default="", description="Consultation transcript text")
    request_id: Optional[str] = Field(None, description="Tracked request the draft belongs to")
    submitted_by: str = Field(default="system", description="Clinician preparing the draft")

    @field_validator('payer', 'procedure_code')
    @classmethod
    def validate_required(cls, v, info):
        cleaned = ValidationUtils.sanitize_string(v)
        if not cleaned:
            raise ValueError(f"{info.field_name} cannot be empty")
        return cleaned

    @field_validator('transcript', mode='before')
    @classmethod
    def none_transcript_as_empty(cls, v):
        return "" if v is None else v

    @model_validator(mode='after')
    def validate_material(self):
        """Something must describe the consultation."""
        if self.clinical_note is None and not self.soap_text and not self.transcript.strip():
            raise ValueError("A clinical note, SOAP text or transcript is required")
        return self

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PrepareIntake":
        """Build an intake from a raw request body."""
        if not isinstance(payload, dict):
            raise MalformedInput("Request body must be an object")
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise MalformedInput(f"Missing required fields: {e.errors(include_url=False)}") from e


class PriorAuthDraft(BaseModel):
    """Result of preparing a prior-authorization request."""
    model_config = ConfigDict(frozen=True)

    fields: Mapping[str, str] = Field(default_factory=dict, validate_default=True, description="Extracted values by field key")
    attachments: Tuple[str, ...] = Field(default_factory=tuple, description="Attachments required by the payer")
    missing: Tuple[str, ...] = Field(default_factory=tuple, description="Requirement labels with no usable value")
    draft: str = Field(..., description="Rendered request document")
    confidence: Mapping[str, ConfidenceLevel] = Field(default_factory=dict, validate_default=True, description="Confidence per field key")

    @field_validator("fields", "confidence", mode="after")
    @classmethod
    def freeze_mapping(cls, v):
        # read-only view so a returned draft cannot be edited in place
        return MappingProxyType(dict(v))

    @field_serializer("fields", "confidence")
    def serialize_mapping(self, v):
        return dict(v)


class AuditEntry(BaseModel):
    """Audit trail entry for system actions."""
    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the action occurred")
    user_id: str = Field(..., description="User who initiated the action")
    action_type: str = Field(..., description="Type of action performed")
    resource_type: str = Field(..., description="Type of resource affected")
    resource_id: str = Field(..., description="ID of the resource affected")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional action details")
    phi_accessed: bool = Field(default=False, description="Whether PHI was accessed")
    justification: Optional[str] = Field(None, description="Justification for PHI access")

    @model_validator(mode='after')
    def validate_phi_justification(self):
        """Require justification when PHI is accessed."""
        if self.phi_accessed and not self.justification:
            raise ValueError("Justification required when PHI is accessed")
        return self


class Material(BaseModel):
    """A transcript, summary, draft or packet stored against a request."""
    material_id: str = Field(..., description="Unique material identifier")
    request_id: str = Field(..., description="Owning request")
    kind: MaterialKind = Field(..., description="Kind of material")
    content: Any = Field(..., description="Text or structured content")
    created_at: datetime = Field(..., description="When the material was stored")


class PARequestRecord(BaseModel):
    """A tracked prior-authorization request."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., description="Unique identifier for the request")
    org_id: str = Field(..., description="Owning organization")
    payer: str = Field(..., description="Medical aid")
    specialty: str = Field(..., description="Clinical specialty")
    procedure_code: str = Field(..., description="Procedure code")
    status: RequestStatus = Field(default=RequestStatus.DRAFT, description="Lifecycle status")
    patient_name: Optional[str] = Field(None, description="Patient display name")
    procedure_name: Optional[str] = Field(None, description="Procedure display name")
    created_at: datetime = Field(..., description="When the request was created")
    updated_at: datetime = Field(..., description="When the request was last updated")
    decided_at: Optional[datetime] = Field(None, description="When the payer decision was recorded")
    last_missing: Optional[List[str]] = Field(None, description="Missing fields of the latest draft, None if never drafted")

    @field_validator('payer', 'procedure_code')
    @classmethod
    def validate_required(cls, v, info):
        cleaned = ValidationUtils.sanitize_string(v)
        if not cleaned:
            raise ValueError(f"{info.field_name} cannot be empty")
        return cleaned
