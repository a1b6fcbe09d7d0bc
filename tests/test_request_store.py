"""Tests for request tracking and the status lifecycle."""

import pytest

from preauth.errors import InvalidStatusTransition, MalformedInput, RequestNotFound
from preauth.models import MaterialKind, RequestStatus


@pytest.fixture
def request_id(request_store):
    record = request_store.create_request(
        payer="Discovery",
        specialty="orthopedics",
        procedure_code="TKR",
        patient_name="J. Smith",
        procedure_name="Total Knee Replacement",
        user_id="PROV001",
    )
    return record.id


class TestCreateAndList:

    def test_create_request(self, request_store, clock):
        record = request_store.create_request("Discovery", "orthopedics", "TKR")

        assert record.id.startswith("PA-")
        assert record.status == RequestStatus.DRAFT
        assert record.org_id == "demo-org"
        assert record.created_at == clock.now
        assert record.last_missing is None

    def test_list_newest_first(self, request_store, clock):
        first = request_store.create_request("Discovery", "orthopedics", "TKR")
        clock.advance(hours=1)
        second = request_store.create_request("Momentum", "orthopedics", "THR")

        assert [r.id for r in request_store.list_requests()] == [second.id, first.id]

    def test_list_scoped_to_org(self, request_store):
        request_store.create_request("Discovery", "orthopedics", "TKR", org_id="other-org")
        assert request_store.list_requests() == []
        assert len(request_store.list_requests("other-org")) == 1

    def test_returned_record_is_a_copy(self, request_store, request_id):
        record = request_store.get_request(request_id)
        record.patient_name = "Changed"
        assert request_store.get_request(request_id).patient_name == "J. Smith"

    def test_unknown_request(self, request_store):
        with pytest.raises(RequestNotFound):
            request_store.get_request("PA-missing")

    def test_creation_is_audited(self, request_store, request_id, audit):
        entries = audit.get_audit_trail(resource_id=request_id)
        assert entries[0].action_type == "request_created"
        assert entries[0].user_id == "PROV001"


class TestUpdateRequest:

    def test_update_descriptive_fields(self, request_store, request_id, clock):
        clock.advance(minutes=5)
        record = request_store.update_request(request_id, patient_name="Jane Smith")

        assert record.patient_name == "Jane Smith"
        assert record.updated_at == clock.now

    def test_invalid_update_leaves_record_unchanged(self, request_store, request_id, clock):
        before = request_store.get_request(request_id)
        clock.advance(minutes=5)

        with pytest.raises(MalformedInput):
            request_store.update_request(request_id, patient_name="Jane Doe", payer="   ")

        after = request_store.get_request(request_id)
        assert after.patient_name == "J. Smith"
        assert after.payer == "Discovery"
        assert after.updated_at == before.updated_at

    def test_status_not_editable_directly(self, request_store, request_id):
        with pytest.raises(ValueError):
            request_store.update_request(request_id, status=RequestStatus.APPROVED)


class TestStatusLifecycle:
    """Test allowed and rejected status transitions."""

    def test_submit_and_approve(self, request_store, request_id, clock):
        request_store.update_status(request_id, RequestStatus.PENDING)
        clock.advance(days=3)
        record = request_store.update_status(request_id, RequestStatus.APPROVED, user_id="PROV001")

        assert record.status == RequestStatus.APPROVED
        assert record.decided_at == clock.now

    def test_denied_can_be_resubmitted(self, request_store, request_id):
        request_store.update_status(request_id, "pending")
        denied = request_store.update_status(request_id, "denied")
        assert denied.decided_at is not None

        resubmitted = request_store.update_status(request_id, "pending")
        assert resubmitted.status == RequestStatus.PENDING
        assert resubmitted.decided_at is None

    def test_draft_cannot_be_approved(self, request_store, request_id):
        with pytest.raises(InvalidStatusTransition) as exc_info:
            request_store.update_status(request_id, RequestStatus.APPROVED)

        assert exc_info.value.old_status == "draft"
        assert request_store.get_request(request_id).status == RequestStatus.DRAFT

    def test_terminal_statuses(self, request_store, request_id):
        request_store.update_status(request_id, RequestStatus.CANCELLED)
        for status in RequestStatus:
            with pytest.raises(InvalidStatusTransition):
                request_store.update_status(request_id, status)

    def test_transitions_are_audited(self, request_store, request_id, audit):
        request_store.update_status(request_id, RequestStatus.PENDING, user_id="PROV001")

        transitions = [e for e in audit.get_audit_trail(resource_id=request_id)
                       if e.action_type == "workflow_transition"]
        assert len(transitions) == 1
        assert transitions[0].details == {"old_status": "draft", "new_status": "pending"}

    def test_unknown_request(self, request_store):
        with pytest.raises(RequestNotFound):
            request_store.update_status("PA-missing", RequestStatus.PENDING)


class TestMaterials:

    def test_materials_oldest_first(self, request_store, request_id, clock):
        request_store.add_material(request_id, MaterialKind.TRANSCRIPT, "Doctor: Good morning")
        clock.advance(minutes=1)
        request_store.add_material(request_id, MaterialKind.DRAFT, {"missing": []})

        materials = request_store.list_materials(request_id)
        assert [m.kind for m in materials] == [MaterialKind.TRANSCRIPT, MaterialKind.DRAFT]
        assert all(m.material_id.startswith("MAT-") for m in materials)

    def test_material_for_unknown_request(self, request_store):
        with pytest.raises(RequestNotFound):
            request_store.add_material("PA-missing", MaterialKind.SUMMARY, "text")

    def test_record_missing(self, request_store, request_id):
        record = request_store.record_missing(request_id, ["Imaging Findings"])
        assert record.last_missing == ["Imaging Findings"]
