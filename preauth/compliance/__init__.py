"""Compliance engine and audit trail management."""

from .audit_logger import AuditLogger, audit_logger

__all__ = [
    "AuditLogger",
    "audit_logger",
]
