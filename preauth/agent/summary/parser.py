"""Parsing of free-text SOAP notes with section headers."""

from typing import Dict

from ...models.core import ClinicalNote


SECTION_HEADERS = ("subjective", "objective", "assessment", "plan")


def parse_soap_note(soap_text: str) -> ClinicalNote:
    """
    Split text with SUBJECTIVE:/OBJECTIVE:/ASSESSMENT:/PLAN: headers into a note.

    Headers are matched case-insensitively at the start of a line. Lines
    after a header are appended to that section with a single space; text
    before the first header is ignored.
    """
    sections: Dict[str, str] = {name: "" for name in SECTION_HEADERS}
    current = None

    for line in (soap_text or "").splitlines():
        stripped = line.strip()
        lowered = stripped.lower()
        header = next((name for name in SECTION_HEADERS if lowered.startswith(f"{name}:")), None)
        if header:
            current = header
            sections[header] = stripped[len(header) + 1:].strip()
        elif current and stripped:
            sections[current] = f"{sections[current]} {stripped}".strip()

    return ClinicalNote(**sections)
