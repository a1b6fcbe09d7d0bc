"""
Request tracking: prior-authorization requests, their status lifecycle and
attached materials. Kept in memory; in production this would be a database.
"""

import logging
from datetime import datetime, UTC
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Set
from uuid import uuid4

from pydantic import ValidationError

from ..compliance.audit_logger import AuditLogger, audit_logger
from ..config import get_settings
from ..errors import InvalidStatusTransition, MalformedInput, RequestNotFound
from ..models.core import Material, MaterialKind, PARequestRecord, RequestStatus

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
    RequestStatus.DRAFT: {RequestStatus.PENDING, RequestStatus.CANCELLED},
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.DENIED, RequestStatus.CANCELLED},
    RequestStatus.DENIED: {RequestStatus.PENDING},
    RequestStatus.APPROVED: set(),
    RequestStatus.CANCELLED: set(),
}

DECISION_STATUSES = {RequestStatus.APPROVED, RequestStatus.DENIED}

# Descriptive fields editable through update_request
EDITABLE_FIELDS = {"patient_name", "procedure_name", "payer", "specialty", "procedure_code"}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RequestStore:
    """In-memory store of tracked requests and their materials."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        audit: Optional[AuditLogger] = None,
    ):
        self._clock = clock
        self._audit = audit or audit_logger
        self._lock = Lock()
        self._requests: Dict[str, PARequestRecord] = {}
        self._materials: Dict[str, List[Material]] = {}

    def create_request(
        self,
        payer: str,
        specialty: str,
        procedure_code: str,
        patient_name: Optional[str] = None,
        procedure_name: Optional[str] = None,
        status: RequestStatus = RequestStatus.DRAFT,
        org_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> PARequestRecord:
        """Create a tracked request."""
        now = self._clock()
        record = PARequestRecord(
            id="PA-" + str(uuid4()),
            org_id=org_id or get_settings().org_id,
            payer=payer,
            specialty=specialty,
            procedure_code=procedure_code,
            status=status,
            patient_name=patient_name,
            procedure_name=procedure_name,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._requests[record.id] = record
            self._materials[record.id] = []

        logger.info(f"Created request {record.id} ({payer} / {procedure_code})")
        self._audit.log_action(
            action_type="request_created",
            resource_type="pa_request",
            resource_id=record.id,
            details={"payer": payer, "procedure_code": procedure_code, "status": RequestStatus(status).value},
            user_id=user_id,
        )
        return record.model_copy()

    def _get(self, request_id: str) -> PARequestRecord:
        record = self._requests.get(request_id)
        if record is None:
            raise RequestNotFound(request_id)
        return record

    def get_request(self, request_id: str) -> PARequestRecord:
        with self._lock:
            return self._get(request_id).model_copy()

    def list_requests(self, org_id: Optional[str] = None) -> List[PARequestRecord]:
        """Requests of an organization, newest first."""
        org_id = org_id or get_settings().org_id
        with self._lock:
            records = [r.model_copy() for r in self._requests.values() if r.org_id == org_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def update_request(self, request_id: str, **changes: Any) -> PARequestRecord:
        """
        Update descriptive fields, all or nothing. Status changes go through update_status.

        Raises:
            MalformedInput: a changed value fails validation; the record is left as it was
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated directly: {sorted(unknown)}")
        with self._lock:
            record = self._get(request_id)
            try:
                updated = PARequestRecord.model_validate(
                    {**record.model_dump(), **changes, "updated_at": self._clock()}
                )
            except ValidationError as e:
                raise MalformedInput(f"Invalid request update: {e.errors(include_url=False)}") from e
            self._requests[request_id] = updated
            return updated.model_copy()

    def update_status(
        self,
        request_id: str,
        new_status: RequestStatus,
        user_id: Optional[str] = None,
    ) -> PARequestRecord:
        """
        Move a request to a new status.

        Raises:
            RequestNotFound: unknown request id
            InvalidStatusTransition: the lifecycle does not allow the move
        """
        new_status = RequestStatus(new_status)
        with self._lock:
            record = self._get(request_id)
            old_status = RequestStatus(record.status)
            if new_status not in ALLOWED_TRANSITIONS[old_status]:
                raise InvalidStatusTransition(request_id, old_status.value, new_status.value)
            now = self._clock()
            record.status = new_status
            record.updated_at = now
            record.decided_at = now if new_status in DECISION_STATUSES else None
            updated = record.model_copy()

        logger.info(f"Request {request_id}: {old_status.value} -> {new_status.value}")
        self._audit.log_workflow_transition(
            pa_request_id=request_id,
            old_status=old_status.value,
            new_status=new_status.value,
            user_id=user_id,
        )
        return updated

    def record_missing(self, request_id: str, missing: List[str]) -> PARequestRecord:
        """Remember the missing fields of the latest draft."""
        with self._lock:
            record = self._get(request_id)
            record.last_missing = list(missing)
            record.updated_at = self._clock()
            return record.model_copy()

    def add_material(self, request_id: str, kind: MaterialKind, content: Any) -> Material:
        with self._lock:
            self._get(request_id)
            material = Material(
                material_id="MAT-" + str(uuid4()),
                request_id=request_id,
                kind=kind,
                content=content,
                created_at=self._clock(),
            )
            self._materials[request_id].append(material)
        return material

    def list_materials(self, request_id: str) -> List[Material]:
        """Materials of a request, oldest first."""
        with self._lock:
            self._get(request_id)
            return sorted(self._materials[request_id], key=lambda m: m.created_at)


# Global request store instance
_request_store: Optional[RequestStore] = None


def get_request_store() -> RequestStore:
    """Get or create the global request store."""
    global _request_store
    if _request_store is None:
        _request_store = RequestStore()
    return _request_store
