import json
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator

import httpx

from paperhub.client.errors import TransportUnavailableError
from paperhub.client.models import ChatRequest

logger = logging.getLogger(__name__)


class ChatTransport(ABC):
    """
    Streams one assistant response.

    `stream` returns a single-pass async iterator of text fragments; joining
    them in arrival order gives the full response, and exhaustion means the
    response is complete. Implementations raise `TransportUnavailableError`
    when the backend cannot be reached and `GenerationError` when it reports
    a failure. They never touch session state.
    """

    name = "base"

    @abstractmethod
    def stream(self, request: ChatRequest) -> AsyncIterator[str]:
        ...

    async def abort(self) -> None:
        """Interrupt the running generation, where the backend supports it."""

    async def aclose(self) -> None:
        """Release clients, threads or models held by the transport."""


async def iter_json_lines(response: httpx.Response) -> AsyncIterator[dict]:
    """
    Yield one object per NDJSON line.

    A line that is not a JSON object is logged and dropped; the stream goes on.
    """
    async for line in response.aiter_lines():
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed stream line: %r", line[:200])
            continue
        if not isinstance(data, dict):
            logger.warning("Skipping non-object stream line: %r", line[:200])
            continue
        yield data


class HTTPStreamingTransport(ChatTransport):
    """Shared plumbing for the backends reached over HTTP."""

    def __init__(self, url: str, client: httpx.AsyncClient = None):
        self.url = url
        # Chat streams have no timeout; a hung connection blocks only its own turn.
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(None))
        self._owns_client = client is None

    @abstractmethod
    def build_payload(self, request: ChatRequest) -> dict:
        ...

    @abstractmethod
    def fragments(self, response: httpx.Response) -> AsyncIterator[str]:
        ...

    async def stream(self, request: ChatRequest) -> AsyncIterator[str]:
        payload = self.build_payload(request)
        try:
            async with self._client.stream("POST", self.url, json=payload) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise TransportUnavailableError(self._error_detail(response))
                async for fragment in self.fragments(response):
                    yield fragment
        except httpx.HTTPError as e:
            logger.error("%s transport failed: %s", self.name, e)
            raise TransportUnavailableError(f"Could not reach {self.url}: {e}") from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("error") or body.get("detail")
            if detail:
                return f"{detail} (HTTP {response.status_code})"
        return f"Backend answered HTTP {response.status_code}"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
