"""Pytest configuration and fixtures for the drafting assistant tests."""

import json
import pytest
from datetime import datetime, timedelta, UTC
from typing import Dict, Any

from preauth.compliance.audit_logger import AuditLogger
from preauth.integrations.request_store import RequestStore
from preauth.integrations.rule_store import RuleStore
from preauth.models import (
    ClinicalNote,
    ProcedureRule,
    RuleSet,
)


RULE_DOCUMENT: Dict[str, Any] = {
    "payers": {
        "Discovery": {
            "procedures": {
                "TKR": {
                    "name": "Total Knee Replacement",
                    "requirements": [
                        "Patient Age",
                        "Diagnosis",
                        "Symptom Duration",
                        "Failed Conservative Treatments",
                        "Functional Limitations",
                        "Imaging Findings",
                    ],
                    "attachments": ["X-ray images", "MRI report"],
                },
                "SCN": {
                    "name": "Knee Assessment",
                    "requirements": ["Patient Age", "Diagnosis", "Imaging Findings"],
                    "attachments": ["X-ray images"],
                },
            }
        },
        "Momentum": {
            "procedures": {
                "TKR": {
                    "name": "Total Knee Replacement",
                    "requirements": ["Diagnosis", "Treatment Plan", "Body Mass Index"],
                    "attachments": [],
                }
            }
        },
    }
}


class FakeClock:
    """Deterministic clock for stores that stamp times."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def rule_document() -> Dict[str, Any]:
    return json.loads(json.dumps(RULE_DOCUMENT))


@pytest.fixture
def rule_set(rule_document) -> RuleSet:
    return RuleSet.model_validate(rule_document)


@pytest.fixture
def knee_rule(rule_set) -> ProcedureRule:
    """Discovery total knee replacement rule."""
    return rule_set.get_rule("Discovery", "TKR")


@pytest.fixture
def scenario_rule(rule_set) -> ProcedureRule:
    """Rule requiring Patient Age, Diagnosis and Imaging Findings."""
    return rule_set.get_rule("Discovery", "SCN")


@pytest.fixture
def full_note() -> ClinicalNote:
    return ClinicalNote(
        subjective=(
            "65-year-old male with 6-month history of right knee pain. Difficulty walking and climbing stairs. "
            "Tried physiotherapy and NSAIDs."
        ),
        objective="X-ray shows severe joint space narrowing and osteophytes.",
        assessment="Severe osteoarthritis of the right knee",
        plan="Total knee replacement",
    )


@pytest.fixture
def empty_note() -> ClinicalNote:
    return ClinicalNote(subjective="", objective="", assessment="", plan="")


@pytest.fixture
def audit() -> AuditLogger:
    return AuditLogger(logger_name="preauth.audit.test")


@pytest.fixture
def rules_path(tmp_path, rule_document):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(rule_document))
    return path


@pytest.fixture
def rule_store(rules_path, audit) -> RuleStore:
    store = RuleStore(rules_path=rules_path, audit=audit)
    store.load()
    return store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 3, 9, 0, tzinfo=UTC))


@pytest.fixture
def request_store(clock, audit) -> RequestStore:
    return RequestStore(clock=clock, audit=audit)
