"""SOAP note summarization backed by a chat model."""

import logging
from typing import Optional

from langchain_core.messages import SystemMessage, HumanMessage
from langchain_openai import ChatOpenAI

from ...config import get_settings
from ...errors import MalformedInput, ServiceUnavailable
from ...models.core import ClinicalNote
from .system_prompts import SOAP_SUMMARY_SYSTEM_PROMPT
from .user_prompts_builder import build_summary_user_prompt

logger = logging.getLogger(__name__)

_model: Optional[ChatOpenAI] = None


def get_model() -> ChatOpenAI:
    """Get or create the summarization model client."""
    global _model
    if _model is None:
        settings = get_settings()
        if not settings.openai_api_key:
            raise ServiceUnavailable("Summarization service is not configured (OPENAI_API_KEY missing)")
        _model = ChatOpenAI(
            model=settings.summary_model,
            timeout=settings.llm_timeout,
            max_retries=settings.llm_max_retries,
            temperature=0.1,
        )
    return _model


async def summarize_transcript(transcript: str, specialty: str = "orthopedics") -> ClinicalNote:
    """
    Summarize a consultation transcript into a SOAP note.

    Raises:
        MalformedInput: transcript is empty
        ServiceUnavailable: the model is not configured or the call failed.
            No substitute clinical text is ever produced.
    """
    if not transcript or not transcript.strip():
        raise MalformedInput("No transcript provided")

    structured_model = get_model().with_structured_output(ClinicalNote)
    try:
        note: ClinicalNote = await structured_model.ainvoke([
            SystemMessage(SOAP_SUMMARY_SYSTEM_PROMPT.format(specialty=specialty)),
            HumanMessage(build_summary_user_prompt(transcript)),
        ])
    except Exception as e:
        logger.error(f"Summarization failed: {e}")
        raise ServiceUnavailable("Summarization service failed") from e

    if note is None:
        raise ServiceUnavailable("Summarization service returned no note")
    return note
