def build_summary_user_prompt(transcript: str) -> str:
    """Build user prompt for SOAP note generation."""
    return f"Please create a SOAP note from this consultation transcript:\n\n{transcript.strip()}"
