"""
Payer Rule Store

Holds the payer rule document as an immutable, versioned snapshot. Readers
take one snapshot per request; the administrative write path validates a
whole new document, persists it atomically and swaps the snapshot.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, UTC
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..compliance.audit_logger import AuditLogger, audit_logger
from ..config import get_settings
from ..errors import InvalidRuleSet
from ..models.rules import ProcedureRule, RuleSet

logger = logging.getLogger(__name__)


_KNEE_HIP_REQUIREMENTS = [
    "Patient Age",
    "Diagnosis",
    "Symptom Duration",
    "Failed Conservative Treatments",
    "Functional Limitations",
    "Imaging Findings",
]

DEFAULT_RULES: Dict[str, Any] = {
    "payers": {
        "Discovery": {
            "procedures": {
                "TKR": {
                    "name": "Total Knee Replacement",
                    "requirements": _KNEE_HIP_REQUIREMENTS,
                    "attachments": [
                        "X-ray images",
                        "MRI report",
                        "Physiotherapy records",
                        "Previous treatment records",
                    ],
                },
                "THR": {
                    "name": "Total Hip Replacement",
                    "requirements": _KNEE_HIP_REQUIREMENTS,
                    "attachments": [
                        "X-ray images",
                        "MRI report",
                        "Physiotherapy records",
                    ],
                },
            }
        }
    }
}


@dataclass(frozen=True)
class RuleSnapshot:
    """A rule document in force, never mutated after creation."""
    version: int
    rules: RuleSet
    loaded_at: datetime


def parse_rules(document: Any) -> RuleSet:
    """Validate a raw rule document."""
    if not isinstance(document, dict):
        raise InvalidRuleSet("Rule document must be an object")
    try:
        return RuleSet.model_validate(document)
    except ValidationError as e:
        raise InvalidRuleSet(f"Invalid rule document: {e.errors(include_url=False)}") from e


class RuleStore:
    """Versioned payer rule configuration with atomic swap."""

    def __init__(
        self,
        rules_path: Optional[Path] = None,
        audit: Optional[AuditLogger] = None,
    ):
        self.rules_path = Path(rules_path) if rules_path else get_settings().rules_path
        self._audit = audit or audit_logger
        self._write_lock = Lock()
        self._snapshot: Optional[RuleSnapshot] = None

    def load(self) -> RuleSnapshot:
        """Read the rule document from disk, falling back to the built-in defaults."""
        if self.rules_path.exists():
            try:
                with open(self.rules_path) as f:
                    document = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidRuleSet(f"Rule file {self.rules_path} is not valid JSON: {e}") from e
            rules = parse_rules(document)
            logger.info(f"Loaded payer rules from {self.rules_path}")
        else:
            logger.warning(f"Rule file {self.rules_path} not found, using default rules")
            rules = parse_rules(DEFAULT_RULES)

        with self._write_lock:
            self._snapshot = self._next_snapshot(rules)
            return self._snapshot

    def _next_snapshot(self, rules: RuleSet) -> RuleSnapshot:
        version = self._snapshot.version + 1 if self._snapshot else 1
        return RuleSnapshot(version=version, rules=rules, loaded_at=datetime.now(UTC))

    def snapshot(self) -> RuleSnapshot:
        """The rule document currently in force."""
        current = self._snapshot
        if current is None:
            current = self.load()
        return current

    def get_rule(self, payer: str, procedure_code: str) -> ProcedureRule:
        """
        Look up the rule for a payer's procedure.

        Raises:
            UnknownPayer: payer not in the rule document
            UnknownProcedure: payer known, procedure code not listed under it
        """
        return self.snapshot().rules.get_rule(payer, procedure_code)

    def export_rules(self) -> Dict[str, Any]:
        """Current rule document in its on-disk shape."""
        return self.snapshot().rules.to_document()

    def replace_rules(self, document: Any, user_id: Optional[str] = None) -> RuleSnapshot:
        """
        Replace the whole rule document. Last write wins, no merge.

        The document is validated before anything is written; an invalid
        document leaves the live rules untouched.
        """
        rules = parse_rules(document)

        with self._write_lock:
            self._write_atomic(rules.to_document())
            self._snapshot = self._next_snapshot(rules)
            snapshot = self._snapshot

        logger.info(f"Payer rules replaced (version {snapshot.version})")
        self._audit.log_rules_update(
            version=snapshot.version,
            payers=sorted(rules.payers),
            user_id=user_id,
        )
        return snapshot

    def _write_atomic(self, document: Dict[str, Any]) -> None:
        self.rules_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.rules_path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.rules_path)
        except OSError:
            logger.error(f"Failed to save payer rules to {self.rules_path}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


# Global rule store instance
_rule_store: Optional[RuleStore] = None


def get_rule_store() -> RuleStore:
    """Get or create the global rule store."""
    global _rule_store
    if _rule_store is None:
        _rule_store = RuleStore()
    return _rule_store
