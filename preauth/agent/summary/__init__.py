"""SOAP summarization of consultation transcripts."""

from .agent import (
    summarize_transcript
)

from .parser import (
    parse_soap_note
)
