"""Validation utilities shared by the rule and request models."""

import re
from typing import Any, Dict, List, Optional


class ValidationUtils:
    """Utility class for data validation and sanitization."""

    WHITESPACE_PATTERN = re.compile(r'\s+')
    PROCEDURE_CODE_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')

    @classmethod
    def sanitize_string(cls, value: Any) -> str:
        """Sanitize string input by trimming whitespace."""
        if value is None:
            return ""
        if not isinstance(value, str):
            return str(value).strip()
        return value.strip()

    @classmethod
    def normalize_field_key(cls, label: str) -> str:
        """Turn a requirement label into its field key: lowercase, whitespace runs become '_'."""
        return cls.WHITESPACE_PATTERN.sub('_', label.lower())

    @classmethod
    def is_present(cls, value: Optional[str]) -> bool:
        """A value is present iff it is non-empty after trimming."""
        return bool(value and value.strip())

    @classmethod
    def validate_procedure_code(cls, code: str) -> bool:
        if not code:
            return False
        return bool(cls.PROCEDURE_CODE_PATTERN.match(code))

    @classmethod
    def validate_required_fields(cls, data: Dict[str, Any], required_fields: List[str]) -> List[str]:
        """Validate that all required fields are present and non-empty."""
        missing_fields = []
        for field in required_fields:
            value = data.get(field)
            if isinstance(value, str):
                value = value.strip()
            if not value:
                missing_fields.append(field)
        return missing_fields

    @classmethod
    def find_duplicates(cls, values: List[str]) -> List[str]:
        """Return values whose normalized key repeats an earlier one."""
        seen = set()
        duplicates = []
        for value in values:
            key = cls.normalize_field_key(value)
            if key in seen:
                duplicates.append(value)
            seen.add(key)
        return duplicates
