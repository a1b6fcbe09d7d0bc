"""LangGraph workflow for preparing prior-authorization drafts."""
