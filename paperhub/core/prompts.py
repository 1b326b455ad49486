"""System prompts shared by the hosted endpoint and the client transports."""

from typing import Optional

BASE_PROMPT = (
    "You are a research assistant AI. Answer research-related questions "
    "professionally and kindly."
)

DOCUMENT_PROMPT = (
    "You are a research assistant AI. Answer based on the content of the "
    "document provided below.\n\n[Document content]\n{context}"
)


def build_system_prompt(context: Optional[str] = None) -> str:
    """Return the system prompt, with the attached document text when present."""
    if context and context.strip():
        return DOCUMENT_PROMPT.format(context=context)
    return BASE_PROMPT
