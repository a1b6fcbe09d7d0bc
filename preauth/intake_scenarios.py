"""
Intake data for the drafting workflow scenarios.

Scenario A: Discovery TKR with a full SOAP note - every requirement found
Scenario B: Momentum TKR with assessment only - several fields missing
Scenario C: Discovery THR with transcript only - SOAP note summarized first
Scenario D: Bonitas THR with a free-text SOAP note
"""

from typing import Any, Dict

from .models.core import ClinicalNote


CONSULTATION_TRANSCRIPT = (
    "Doctor: Good morning, what brings you in today? "
    "Patient: My right knee. I'm a 65 year old retired teacher and the pain has been getting worse for 6 months. "
    "Doctor: What have you tried so far? "
    "Patient: Three months of physiotherapy, anti-inflammatory medication, and an injection last month. None of it helped much. "
    "Doctor: How is it affecting you day to day? "
    "Patient: Walking more than a block is hard, I avoid the stairs, and the pain keeps me up, I can't sleep."
)


INTAKES: Dict[str, Dict[str, Any]] = {
    "PA-SCENARIO-A": {
        "payer": "Discovery",
        "procedure_code": "TKR",
        "specialty": "orthopedics",
        "submitted_by": "PROV001",
        "transcript": CONSULTATION_TRANSCRIPT,
        "clinical_note": ClinicalNote(
            subjective=(
                "65-year-old male with 6-month history of progressive right knee pain. Pain is constant, sharp, "
                "and worse with weight-bearing activities. Patient reports significant functional limitation including "
                "difficulty walking, climbing stairs, and sleeping due to pain. Has tried 3 months of physiotherapy, "
                "NSAIDs, and intra-articular corticosteroid injection with minimal improvement."
            ),
            objective=(
                "Moderate effusion, crepitus, and limited range of motion (flexion 90, extension -5) in right knee. "
                "X-ray shows severe joint space narrowing, osteophytes, and subchondral sclerosis. MRI demonstrates "
                "full-thickness cartilage loss and bone marrow edema."
            ),
            assessment=(
                "Severe osteoarthritis of the right knee, Kellgren-Lawrence Grade 4. Conservative treatments have been "
                "exhausted with minimal benefit."
            ),
            plan="Total knee replacement (TKR) recommended for right knee. Pre-operative assessment and optimization.",
        ),
    },
    "PA-SCENARIO-B": {
        "payer": "Momentum",
        "procedure_code": "TKR",
        "submitted_by": "PROV002",
        "transcript": "The patient is a 65 year old with longstanding knee pain.",
        "clinical_note": ClinicalNote(
            assessment="Severe osteoarthritis of right knee",
        ),
    },
    "PA-SCENARIO-C": {
        "payer": "Discovery",
        "procedure_code": "THR",
        "submitted_by": "PROV001",
        "transcript": CONSULTATION_TRANSCRIPT.replace("right knee", "left hip"),
    },
    "PA-SCENARIO-D": {
        "payer": "Bonitas",
        "procedure_code": "THR",
        "submitted_by": "PROV003",
        "soap_text": (
            "SUBJECTIVE: 71 year old female with left hip pain for 9 months.\n"
            "Failed physiotherapy and NSAIDs. Difficulty walking and putting on shoes.\n"
            "OBJECTIVE: Antalgic gait. X-ray shows loss of joint space and femoral head collapse.\n"
            "ASSESSMENT: Avascular necrosis of the left femoral head.\n"
            "PLAN: Total hip replacement."
        ),
    },
}


def get_intake(intake_id: str) -> Dict[str, Any]:
    if intake_id not in INTAKES:
        raise KeyError(f"Unknown intake scenario: {intake_id}")
    return dict(INTAKES[intake_id])
