import asyncio
import logging
import uuid
from typing import AsyncIterator, Callable, Optional

from paperhub.client.errors import GenerationError, TransportUnavailableError
from paperhub.client.models import ChatRequest
from paperhub.client.transport.base import ChatTransport
from paperhub.client.worker import protocol
from paperhub.client.worker.engine import ModelEngine
from paperhub.client.worker.runtime import ModelWorker

logger = logging.getLogger(__name__)

ProgressListener = Callable[[protocol.Progress], None]


class WorkerChatTransport(ChatTransport):
    """
    Chat against a model hosted in-process by a `ModelWorker` thread.

    Worker events are moved onto the event loop with `call_soon_threadsafe`,
    so the loop never blocks on the model.
    """

    name = "worker"

    def __init__(self, model_id: str, engine_factory: Callable[[], ModelEngine],
                 on_progress: Optional[ProgressListener] = None):
        self.model_id = model_id
        self._engine_factory = engine_factory
        self._on_progress = on_progress
        self._worker: Optional[ModelWorker] = None
        self._events: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._ready = False
        self._load_lock: Optional[asyncio.Lock] = None
        self._active_request: Optional[str] = None
        self.last_progress: Optional[protocol.Progress] = None

    # ---------------- worker lifecycle ----------------
    def _start_worker(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._events = asyncio.Queue()
        events, loop = self._events, self._loop

        def listener(event: protocol.WorkerEvent) -> None:
            # the worker may outlive the loop (terminate timeout, interpreter exit)
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(events.put_nowait, event)

        self._worker = ModelWorker(self._engine_factory(), listener)
        self._ready = False

    async def ensure_loaded(self) -> None:
        if self._load_lock is None:
            self._load_lock = asyncio.Lock()
        async with self._load_lock:
            if self._worker is None:
                self._start_worker()
            if self._ready:
                return
            self._worker.post(protocol.Load(model_id=self.model_id))
            while True:
                event = await self._events.get()
                if isinstance(event, protocol.Progress):
                    self.last_progress = event
                    if self._on_progress:
                        self._on_progress(event)
                elif isinstance(event, protocol.Status):
                    self._ready = True
                    logger.info("Worker model %s ready", self.model_id)
                    return
                elif isinstance(event, protocol.Error) and not event.request_id:
                    raise TransportUnavailableError(f"Model load failed: {event.message}")

    async def switch_model(self, model_id: str) -> None:
        """Tear down the worker and load `model_id` in a fresh one."""
        await self.aclose()
        self.model_id = model_id
        await self.ensure_loaded()

    # ---------------- ChatTransport ----------------
    async def stream(self, request: ChatRequest) -> AsyncIterator[str]:
        await self.ensure_loaded()
        request_id = uuid.uuid4().hex
        worker = self._worker
        worker.post(protocol.Generate(
            request_id=request_id,
            system_prompt=request.system_prompt,
            messages=list(request.messages),
        ))
        self._active_request = request_id
        finished = False
        try:
            while True:
                event = await self._events.get()
                if getattr(event, "request_id", None) != request_id:
                    # left over from an aborted generation
                    continue
                if isinstance(event, protocol.Chunk):
                    yield event.text
                elif isinstance(event, protocol.Done):
                    finished = True
                    return
                elif isinstance(event, protocol.Error):
                    finished = True
                    raise GenerationError(event.message)
        finally:
            if self._active_request == request_id:
                self._active_request = None
            if not finished:
                # reader went away early; do not leave the request running or queued
                worker.post(protocol.Abort(request_id=request_id))

    async def abort(self) -> None:
        if self._worker is not None and self._active_request is not None:
            self._worker.post(protocol.Abort(request_id=self._active_request))

    async def aclose(self) -> None:
        worker, self._worker = self._worker, None
        self._ready = False
        if worker is not None:
            await asyncio.to_thread(worker.terminate)
