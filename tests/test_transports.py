import json

import httpx
import pytest

from paperhub.client.errors import GenerationError, TransportUnavailableError
from paperhub.client.models import ChatRequest
from paperhub.client.transport.hosted import HostedChatTransport
from paperhub.client.transport.local import LocalDaemonTransport
from paperhub.config import Settings
from paperhub.client.transport.factory import build_transport
from paperhub.client.transport.worker import WorkerChatTransport

REQUEST = ChatRequest(
    system_prompt="SYSTEM",
    messages=[{"role": "user", "content": "What is X?"}],
    context="doc text",
)


def _ndjson(*objects):
    return "".join(
        (obj if isinstance(obj, str) else json.dumps(obj)) + "\n" for obj in objects
    ).encode()


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def _collect(transport, request=REQUEST):
    return [fragment async for fragment in transport.stream(request)]


# ---------------- hosted ----------------

async def test_hosted_yields_chunk_text_in_order():
    sent = {}

    def handler(request):
        sent["payload"] = json.loads(request.content)
        return httpx.Response(200, content=_ndjson(
            {"type": "chunk", "text": "X is"},
            {"type": "chunk", "text": " a concept."},
            {"type": "end"},
            {"type": "chunk", "text": "after end"},
        ))

    transport = HostedChatTransport("http://test/api/chat", client=_client(handler))

    assert await _collect(transport) == ["X is", " a concept."]
    assert sent["payload"] == {"messages": REQUEST.messages, "context": "doc text"}


async def test_hosted_skips_malformed_lines():
    def handler(request):
        return httpx.Response(200, content=_ndjson(
            {"type": "chunk", "text": "a"},
            "{not json",
            "[1, 2]",
            {"type": "chunk", "text": "b"},
            {"type": "end"},
        ))

    transport = HostedChatTransport("http://test/api/chat", client=_client(handler))
    assert await _collect(transport) == ["a", "b"]


async def test_hosted_error_event_raises_generation_error():
    def handler(request):
        return httpx.Response(200, content=_ndjson(
            {"type": "chunk", "text": "a"},
            {"type": "error", "text": "model crashed"},
        ))

    transport = HostedChatTransport("http://test/api/chat", client=_client(handler))
    fragments = []
    with pytest.raises(GenerationError, match="model crashed"):
        async for fragment in transport.stream(REQUEST):
            fragments.append(fragment)
    assert fragments == ["a"]


async def test_hosted_bad_status_carries_server_detail():
    def handler(request):
        return httpx.Response(502, json={"error": "Could not reach the model backend."})

    transport = HostedChatTransport("http://test/api/chat", client=_client(handler))
    with pytest.raises(TransportUnavailableError, match="Could not reach the model backend"):
        await _collect(transport)


async def test_connection_failure_is_transport_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = HostedChatTransport("http://test/api/chat", client=_client(handler))
    with pytest.raises(TransportUnavailableError, match="connection refused"):
        await _collect(transport)


# ---------------- local daemon ----------------

async def test_local_daemon_sends_system_prompt_and_reads_message_content():
    sent = {}

    def handler(request):
        sent["payload"] = json.loads(request.content)
        return httpx.Response(200, content=_ndjson(
            {"message": {"role": "assistant", "content": "Hel"}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": False},
            {"message": "oops", "done": False},
            {"message": {"role": "assistant", "content": "lo"}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": True},
        ))

    transport = LocalDaemonTransport("http://test/api/chat", "qwen", client=_client(handler))

    assert await _collect(transport) == ["Hel", "lo"]
    assert sent["payload"]["model"] == "qwen"
    assert sent["payload"]["stream"] is True
    assert sent["payload"]["messages"][0] == {"role": "system", "content": "SYSTEM"}
    assert sent["payload"]["messages"][1:] == REQUEST.messages


async def test_local_daemon_skips_malformed_lines_anywhere():
    def handler(request):
        return httpx.Response(200, content=_ndjson(
            "garbage at the start",
            {"message": {"content": "X "}, "done": False},
            "{\"message\": {\"content\": ",
            {"message": {"content": "is "}, "done": False},
            "42",
            {"message": {"content": "a concept."}, "done": False},
            "{trailing",
        ))

    transport = LocalDaemonTransport("http://test/api/chat", "qwen", client=_client(handler))
    assert "".join(await _collect(transport)) == "X is a concept."


async def test_local_daemon_error_field_raises():
    def handler(request):
        return httpx.Response(200, content=_ndjson({"error": "model 'qwen' not found"}))

    transport = LocalDaemonTransport("http://test/api/chat", "qwen", client=_client(handler))
    with pytest.raises(GenerationError, match="not found"):
        await _collect(transport)


async def test_local_daemon_stream_may_end_without_done():
    def handler(request):
        return httpx.Response(200, content=_ndjson({"message": {"content": "partial"}}))

    transport = LocalDaemonTransport("http://test/api/chat", "qwen", client=_client(handler))
    assert await _collect(transport) == ["partial"]


# ---------------- factory ----------------

def test_factory_builds_the_configured_backend():
    settings = Settings(CHAT_BACKEND="local", LOCAL_CHAT_MODEL="llama3")

    local = build_transport(settings)
    assert isinstance(local, LocalDaemonTransport)
    assert local.model == "llama3"
    assert isinstance(build_transport(settings, "hosted"), HostedChatTransport)
    assert isinstance(build_transport(settings, "worker"), WorkerChatTransport)

    with pytest.raises(ValueError):
        build_transport(settings, "carrier-pigeon")
