import logging
from typing import AsyncIterator

import httpx

from paperhub.client.errors import GenerationError
from paperhub.client.models import ChatRequest
from paperhub.client.transport.base import HTTPStreamingTransport, iter_json_lines

logger = logging.getLogger(__name__)


class HostedChatTransport(HTTPStreamingTransport):
    """PaperHub's own `/api/chat` endpoint; the server builds the system prompt from `context`."""

    name = "hosted"

    def build_payload(self, request: ChatRequest) -> dict:
        payload = {"messages": request.messages}
        if request.context:
            payload["context"] = request.context
        return payload

    async def fragments(self, response: httpx.Response) -> AsyncIterator[str]:
        async for event in iter_json_lines(response):
            kind = event.get("type")
            if kind == "chunk":
                text = event.get("text")
                if isinstance(text, str) and text:
                    yield text
            elif kind == "end":
                return
            elif kind == "error":
                raise GenerationError(event.get("text") or "Generation failed")
            else:
                logger.warning("Ignoring unknown stream event: %r", kind)
