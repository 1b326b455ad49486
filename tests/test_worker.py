import asyncio
import contextlib
import queue
import threading

import pytest

from paperhub.client.errors import GenerationError, TransportUnavailableError
from paperhub.client.models import ChatRequest
from paperhub.client.transport.worker import WorkerChatTransport
from paperhub.client.worker import protocol
from paperhub.client.worker.runtime import ModelWorker

from fakes import FakeEngine

REQUEST = ChatRequest(system_prompt="SYSTEM", messages=[{"role": "user", "content": "hi"}])


@pytest.fixture
async def make_transport():
    transports = []

    def make(engine=None, **kwargs):
        engines = []

        def factory():
            engines.append(engine or FakeEngine())
            return engines[-1]

        transport = WorkerChatTransport("tiny-model", factory, **kwargs)
        transport.engines = engines
        transports.append(transport)
        return transport

    yield make
    for transport in transports:
        await transport.aclose()


async def test_worker_streams_tokens_in_order(make_transport):
    progress = []
    transport = make_transport(on_progress=progress.append)

    fragments = [f async for f in transport.stream(REQUEST)]

    assert fragments == ["Hello", ", ", "world"]
    assert [p.percent for p in progress] == [50.0, 100.0]
    engine = transport.engines[0]
    assert engine.loaded == ["tiny-model"]
    assert engine.seen_messages[0] == [
        {"role": "system", "content": "SYSTEM"},
        {"role": "user", "content": "hi"},
    ]


async def test_model_is_loaded_once(make_transport):
    transport = make_transport()

    await transport.ensure_loaded()
    [f async for f in transport.stream(REQUEST)]
    [f async for f in transport.stream(REQUEST)]

    assert transport.engines[0].loaded == ["tiny-model"]


async def test_load_failure_is_transport_unavailable(make_transport):
    transport = make_transport(FakeEngine(fail_load="out of memory"))

    with pytest.raises(TransportUnavailableError, match="out of memory"):
        await transport.ensure_loaded()


async def test_generation_failure_raises(make_transport):
    transport = make_transport(FakeEngine(fail_generate="CUDA error"))

    with pytest.raises(GenerationError, match="CUDA error"):
        [f async for f in transport.stream(REQUEST)]


async def test_abort_interrupts_and_worker_stays_usable(make_transport):
    engine = FakeEngine(tokens=("fresh",), endless=True, delay=0.001)
    transport = make_transport(engine)

    fragments = []
    async for fragment in transport.stream(REQUEST):
        fragments.append(fragment)
        if len(fragments) == 3:
            await transport.abort()
            break

    assert fragments == ["t0 ", "t1 ", "t2 "]

    # events from the aborted run must not leak into the next answer
    engine.endless = False
    answer = await asyncio.wait_for(_collect(transport), timeout=5)
    assert answer == ["fresh"]


async def _collect(transport):
    return [f async for f in transport.stream(REQUEST)]


async def test_switch_model_restarts_the_worker(make_transport):
    transport = make_transport()
    await transport.ensure_loaded()

    await transport.switch_model("bigger-model")

    assert len(transport.engines) == 2
    assert transport.engines[1].loaded == ["bigger-model"]
    assert await _collect(transport) == ["Hello", ", ", "world"]


def test_protocol_messages_are_tagged():
    assert protocol.Generate(request_id="r", system_prompt="s", messages=[]).type == "generate"
    assert protocol.Chunk(request_id="r", text="t").type == "chunk"
    assert protocol.Error(message="boom").request_id == ""


def _drain_until(events, request_id, timeout=5.0):
    """Events received until `request_id` is done or failed."""
    seen = []
    while True:
        event = events.get(timeout=timeout)
        seen.append(event)
        if isinstance(event, (protocol.Done, protocol.Error)) and getattr(event, "request_id", None) == request_id:
            return seen


def test_abort_of_a_queued_generation_is_kept():
    events = queue.Queue()
    prefill = threading.Event()
    worker = ModelWorker(FakeEngine(tokens=("a", "b"), gate=prefill), events.put)
    try:
        worker.post(protocol.Load(model_id="tiny-model"))
        _drain_until_ready(events)

        for request_id in ("r1", "r2", "r3"):
            worker.post(protocol.Generate(request_id=request_id, system_prompt="s", messages=[]))
        # r1 is busy in prefill, r2 still waits in the inbox
        worker.post(protocol.Abort(request_id="r2"))
        prefill.set()

        seen = _drain_until(events, "r3")
    finally:
        worker.terminate()

    chunks = [(e.request_id, e.text) for e in seen if isinstance(e, protocol.Chunk)]
    assert chunks == [("r1", "a"), ("r1", "b"), ("r3", "a"), ("r3", "b")]
    assert [e.request_id for e in seen if isinstance(e, protocol.Done)] == ["r1", "r2", "r3"]


def _drain_until_ready(events):
    while not isinstance(events.get(timeout=5), protocol.Status):
        pass


async def test_turn_after_two_stopped_turns_still_streams(make_transport):
    engine = FakeEngine(tokens=("fresh",), endless=True, delay=0.001)
    transport = make_transport(engine)

    # first turn: stopped while generating
    async for _ in transport.stream(REQUEST):
        await transport.abort()
        break

    # second turn: stopped before its first token arrives
    second = transport.stream(REQUEST)
    pending = asyncio.ensure_future(second.__anext__())
    await asyncio.sleep(0.01)
    await transport.abort()
    pending.cancel()
    with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
        await pending
    await second.aclose()

    engine.endless = False
    assert await asyncio.wait_for(_collect(transport), timeout=5) == ["fresh"]


def test_listener_ignores_events_after_the_loop_closed():
    loop = asyncio.new_event_loop()
    transport = WorkerChatTransport("tiny-model", FakeEngine)

    async def start():
        transport._start_worker()

    loop.run_until_complete(start())
    loop.close()
    try:
        # would raise "Event loop is closed" inside the worker's listener
        transport._worker._listener(protocol.Status())
    finally:
        transport._worker.terminate()
