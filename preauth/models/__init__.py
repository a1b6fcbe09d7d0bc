"""Data models for the prior-authorization drafting assistant."""

from .core import (
    ConfidenceLevel,
    RequestStatus,
    MaterialKind,
    ClinicalNote,
    PrepareIntake,
    PriorAuthDraft,
    AuditEntry,
    Material,
    PARequestRecord,
)

from .rules import (
    RequirementKind,
    RequirementField,
    ProcedureRule,
    PayerRules,
    RuleSet,
    classify_requirement,
)

from .reporting import (
    PayerCount,
    ProcedureCount,
    MonthlyTrend,
    ReportSummary,
)

from .validation import (
    ValidationUtils
)

__all__ = [
    # Core models
    "ConfidenceLevel",
    "RequestStatus",
    "MaterialKind",
    "ClinicalNote",
    "PrepareIntake",
    "PriorAuthDraft",
    "AuditEntry",
    "Material",
    "PARequestRecord",
    # Rule models
    "RequirementKind",
    "RequirementField",
    "ProcedureRule",
    "PayerRules",
    "RuleSet",
    "classify_requirement",
    # Reporting models
    "PayerCount",
    "ProcedureCount",
    "MonthlyTrend",
    "ReportSummary",
    # Validation utilities
    "ValidationUtils",
]
