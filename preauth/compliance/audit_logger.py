"""Audit trail for drafting, rule changes and request status changes."""

import logging
from typing import Any, Dict, List, Optional

from ..models.core import AuditEntry


DRAFT_JUSTIFICATION = "Prior authorization draft preparation"


class AuditLogger:
    """
    Records audit entries in memory and emits each one as a JSON log line.

    Entries without an explicit user are attributed to "system".
    """

    def __init__(self, logger_name: str = "preauth.audit"):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(logging.INFO)
        # in production this would be an append-only store
        self._entries: List[AuditEntry] = []

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(handler)

    def _record(self, entry: AuditEntry) -> AuditEntry:
        self._entries.append(entry)
        self.logger.info(f"AUDIT: {entry.model_dump_json()}")
        return entry

    def log_action(
        self,
        action_type: str,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ) -> AuditEntry:
        """Record a non-PHI action such as request creation."""
        return self._record(AuditEntry(
            user_id=user_id or "system",
            action_type=action_type,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details or {},
        ))

    def log_workflow_transition(
        self,
        pa_request_id: str,
        old_status: str,
        new_status: str,
        user_id: Optional[str] = None
    ) -> AuditEntry:
        """Record a request status change."""
        return self.log_action(
            action_type="workflow_transition",
            resource_type="pa_request",
            resource_id=pa_request_id,
            details={"old_status": old_status, "new_status": new_status},
            user_id=user_id,
        )

    def log_rules_update(
        self,
        version: int,
        payers: List[str],
        user_id: Optional[str] = None
    ) -> AuditEntry:
        """Record replacement of the payer rule document."""
        return self.log_action(
            action_type="rules_update",
            resource_type="payer_rules",
            resource_id=f"v{version}",
            details={"version": version, "payers": payers},
            user_id=user_id,
        )

    def log_draft_prepared(
        self,
        resource_id: str,
        payer: str,
        procedure_code: str,
        missing: List[str],
        user_id: Optional[str] = None
    ) -> AuditEntry:
        """Drafting reads clinical notes, so it is recorded as PHI access."""
        return self._record(AuditEntry(
            user_id=user_id or "system",
            action_type="phi_access",
            resource_type="pa_request",
            resource_id=resource_id,
            details={
                "payer": payer,
                "procedure_code": procedure_code,
                "missing_count": len(missing),
            },
            phi_accessed=True,
            justification=DRAFT_JUSTIFICATION,
        ))

    def get_audit_trail(
        self,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[AuditEntry]:
        """Entries matching every given filter, oldest first."""
        criteria = {"resource_type": resource_type, "resource_id": resource_id, "user_id": user_id}
        wanted = {name: value for name, value in criteria.items() if value}
        matches = [
            entry for entry in self._entries
            if all(getattr(entry, name) == value for name, value in wanted.items())
        ]
        return sorted(matches, key=lambda entry: entry.timestamp)


# Global audit logger instance
audit_logger = AuditLogger()
