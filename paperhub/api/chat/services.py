# paperhub/api/chat/services.py

import logging
from typing import AsyncIterator, List, Optional

from openai import AsyncOpenAI

from paperhub.api.chat import schemas
from paperhub.config import settings
from paperhub.core.prompts import build_system_prompt

logger = logging.getLogger(__name__)

_CLIENT: Optional[AsyncOpenAI] = None


def get_client() -> AsyncOpenAI:
    """Shared client for Ollama's OpenAI-compatible API."""
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = AsyncOpenAI(
            base_url=f"{settings.OLLAMA_BASE_URL.rstrip('/')}/v1",
            api_key="ollama",  # ignored by Ollama, required by the SDK
        )
    return _CLIENT


def build_messages(request: schemas.ChatRequest) -> List[dict]:
    messages = [{"role": "system", "content": build_system_prompt(request.context)}]
    for turn in request.messages:
        messages.append({"role": turn.role, "content": turn.content})
    return messages


async def open_completion_stream(request: schemas.ChatRequest):
    """Start a streamed completion. Connection failures surface here, before any byte is sent."""
    client = get_client()
    return await client.chat.completions.create(
        model=settings.HOSTED_CHAT_MODEL,
        messages=build_messages(request),
        stream=True,
    )


def _event_line(event_type: str, text: str = "") -> str:
    return schemas.StreamEvent(type=event_type, text=text).model_dump_json() + "\n"


async def ndjson_events(stream) -> AsyncIterator[str]:
    """Re-encode an OpenAI chunk stream as newline-delimited stream events."""
    try:
        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield _event_line("chunk", content)
    except Exception as e:
        logger.error("Chat stream failed mid-response: %s", e)
        yield _event_line("error", str(e))
        return
    yield _event_line("end")
