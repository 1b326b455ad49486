from typing import AsyncIterator

import httpx

from paperhub.client.errors import GenerationError
from paperhub.client.models import ChatRequest
from paperhub.client.transport.base import HTTPStreamingTransport, iter_json_lines


class LocalDaemonTransport(HTTPStreamingTransport):
    """A local Ollama daemon (`/api/chat`, NDJSON with `message.content`)."""

    name = "local"

    def __init__(self, url: str, model: str, client: httpx.AsyncClient = None):
        super().__init__(url, client)
        self.model = model

    def build_payload(self, request: ChatRequest) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "system", "content": request.system_prompt}, *request.messages],
            "stream": True,
        }

    async def fragments(self, response: httpx.Response) -> AsyncIterator[str]:
        # The daemon may close the stream without a final `done` object.
        async for chunk in iter_json_lines(response):
            if chunk.get("error"):
                raise GenerationError(str(chunk["error"]))
            message = chunk.get("message")
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str) and content:
                yield content
            if chunk.get("done"):
                return
