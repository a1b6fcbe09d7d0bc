from typing import Any, Dict, Literal, Union

from ..models import ClinicalNote, MaterialKind, PrepareIntake, PriorAuthDraft, ProcedureRule
from ..extraction import extract_fields, build_confidence_map, find_missing, compose_draft
from ..integrations.rule_store import get_rule_store
from ..integrations.request_store import get_request_store
from ..compliance.audit_logger import audit_logger
from ..errors import MalformedInput
from .state import PrepareState
from .summary import summarize_transcript, parse_soap_note

from langgraph.graph import StateGraph, END


# Console output helper
def log_status(message: str) -> None:
    """Print formatted status message to console."""
    print(f"🤖 PA Drafter: {message}")


def draft_from_state(state: PrepareState) -> PriorAuthDraft:
    return PriorAuthDraft(
        fields=state["fields"],
        attachments=state["attachments"],
        missing=state["missing"],
        draft=state["draft"],
        confidence=state["confidence"],
    )


async def intake_node(state: PrepareIntake) -> PrepareState:
    log_status(f"Preparing {state.procedure_code} request for {state.payer}...")
    clinical_note = state.clinical_note
    if clinical_note is None and state.soap_text:
        clinical_note = parse_soap_note(state.soap_text)
        if clinical_note.is_empty():
            # no SOAP headers found; the transcript is the only usable material
            if not state.transcript.strip():
                raise MalformedInput("SOAP text has no SUBJECTIVE/OBJECTIVE/ASSESSMENT/PLAN sections and no transcript was provided")
            log_status("SOAP text has no recognizable sections, falling back to the transcript.")
            clinical_note = None

    return {
        "payer": state.payer,
        "procedure_code": state.procedure_code,
        "specialty": state.specialty,
        "clinical_note": clinical_note,
        "transcript": state.transcript,
        "request_id": state.request_id,
        "submitted_by": state.submitted_by,
        "summarized": False,
    }


async def summarize_node(state: PrepareState) -> PrepareState:
    log_status("No clinical note supplied. Summarizing transcript...")
    clinical_note: ClinicalNote = await summarize_transcript(
        state["transcript"], specialty=state.get("specialty", "orthopedics")
    )
    log_status("SOAP note generated.")
    return {"clinical_note": clinical_note, "summarized": True}


async def lookup_rule_node(state: PrepareState) -> PrepareState:
    # one snapshot for the whole request
    snapshot = get_rule_store().snapshot()
    procedure_rule: ProcedureRule = snapshot.rules.get_rule(state["payer"], state["procedure_code"])
    log_status(f"Using rules v{snapshot.version}: {procedure_rule.display_name} requires {len(procedure_rule.requirements)} fields.")
    return {
        "procedure_rule": procedure_rule,
        "rule_version": snapshot.version,
        "attachments": list(procedure_rule.attachments),
    }


async def extract_fields_node(state: PrepareState) -> PrepareState:
    fields = extract_fields(state["clinical_note"], state.get("transcript", ""), state["procedure_rule"])
    log_status(f"Extracted {len(fields)} field(s).")
    return {"fields": fields}


async def assess_node(state: PrepareState) -> PrepareState:
    procedure_rule: ProcedureRule = state["procedure_rule"]
    fields: Dict[str, str] = state["fields"]
    missing = find_missing(fields, procedure_rule)
    if missing:
        log_status(f"Missing {len(missing)} required field(s): {', '.join(missing)}")
    return {
        "confidence": build_confidence_map(fields, procedure_rule),
        "missing": missing,
    }


async def compose_draft_node(state: PrepareState) -> PrepareState:
    draft = compose_draft(
        payer=state["payer"],
        procedure_code=state["procedure_code"],
        clinical_note=state["clinical_note"],
        fields=state["fields"],
        procedure_rule=state["procedure_rule"],
        specialty=state.get("specialty", "orthopedics"),
    )
    log_status("Draft composed.")
    return {"draft": draft}


async def record_node(state: PrepareState) -> PrepareState:
    request_id = state.get("request_id")
    audit_logger.log_draft_prepared(
        resource_id=request_id or "untracked",
        payer=state["payer"],
        procedure_code=state["procedure_code"],
        missing=state["missing"],
        user_id=state.get("submitted_by"),
    )
    if not request_id:
        return {}

    request_store = get_request_store()
    if state.get("summarized"):
        request_store.add_material(request_id, MaterialKind.SUMMARY, state["clinical_note"].model_dump())
    request_store.add_material(request_id, MaterialKind.DRAFT, draft_from_state(state).model_dump(mode="json"))
    request_store.record_missing(request_id, state["missing"])
    log_status(f"Draft saved to request {request_id}.")
    return {}


#### Routers

def route_after_intake(state: PrepareState) -> Literal["summarize", "lookup_rule"]:
    if state.get("clinical_note") is None:
        return "summarize"
    return "lookup_rule"


def create_workflow() -> StateGraph:
    workflow = StateGraph(PrepareState, input_schema=PrepareIntake)
    workflow.add_node("intake", intake_node)
    workflow.add_node("summarize", summarize_node)
    workflow.add_node("lookup_rule", lookup_rule_node)
    workflow.add_node("extract_fields", extract_fields_node)
    workflow.add_node("assess", assess_node)
    workflow.add_node("compose_draft", compose_draft_node)
    workflow.add_node("record", record_node)

    workflow.set_entry_point("intake")
    workflow.add_conditional_edges("intake", route_after_intake)
    workflow.add_edge("summarize", "lookup_rule")
    workflow.add_edge("lookup_rule", "extract_fields")
    workflow.add_edge("extract_fields", "assess")
    workflow.add_edge("assess", "compose_draft")
    workflow.add_edge("compose_draft", "record")
    workflow.add_edge("record", END)

    return workflow.compile()


async def prepare_draft(intake: Union[PrepareIntake, Dict[str, Any]]) -> PriorAuthDraft:
    """
    Run the drafting workflow for one request.

    Any failure (unknown payer or procedure, malformed input, summarization
    unavailable) propagates; no partial draft is returned.
    """
    if not isinstance(intake, PrepareIntake):
        intake = PrepareIntake.from_payload(intake)
    final_state = await create_workflow().ainvoke(intake)
    return draft_from_state(final_state)
