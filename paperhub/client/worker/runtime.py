import logging
import queue
import threading
from typing import Callable, Set

from paperhub.client.worker import protocol
from paperhub.client.worker.engine import ModelEngine

logger = logging.getLogger(__name__)

EventListener = Callable[[protocol.WorkerEvent], None]


class ModelWorker:
    """
    Hosts one model engine on a dedicated thread.

    Requests are queued and handled in order, except `Abort`, which is
    applied immediately. It marks its `request_id` as aborted, which stops
    that generation if it is running and skips it if it is still queued.
    Events are handed to `listener` on the worker thread.
    """

    def __init__(self, engine: ModelEngine, listener: EventListener):
        self._engine = engine
        self._listener = listener
        self._inbox: "queue.Queue[protocol.WorkerRequest]" = queue.Queue()
        self._aborted: Set[str] = set()
        self._aborted_lock = threading.Lock()
        self._shutdown = threading.Event()
        self._loaded = False
        self._thread = threading.Thread(target=self._run, name="paperhub-model-worker", daemon=True)
        self._thread.start()

    def post(self, message: protocol.WorkerRequest) -> None:
        if isinstance(message, protocol.Abort):
            with self._aborted_lock:
                self._aborted.add(message.request_id)
            return
        self._inbox.put(message)

    def terminate(self, timeout: float = 5.0) -> None:
        self._shutdown.set()
        self._inbox.put(protocol.Shutdown())
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Model worker did not stop within %.1fs", timeout)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    # ---------------- worker thread ----------------
    def _emit(self, event: protocol.WorkerEvent) -> None:
        try:
            self._listener(event)
        except Exception:
            logger.exception("Worker event listener failed")

    def _run(self) -> None:
        while True:
            message = self._inbox.get()
            if isinstance(message, protocol.Shutdown):
                return
            if isinstance(message, protocol.Load):
                self._load(message)
            elif isinstance(message, protocol.Generate):
                self._generate(message)

    def _load(self, message: protocol.Load) -> None:
        try:
            self._engine.load(
                message.model_id,
                lambda percent, text: self._emit(protocol.Progress(percent=percent, text=text)),
            )
        except Exception as e:
            logger.error("Model load failed: %s", e)
            self._emit(protocol.Error(message=str(e) or "Model loading failed"))
            return
        self._loaded = True
        self._emit(protocol.Status())

    def _is_aborted(self, request_id: str) -> bool:
        if self._shutdown.is_set():
            return True
        with self._aborted_lock:
            return request_id in self._aborted

    def _generate(self, message: protocol.Generate) -> None:
        request_id = message.request_id
        try:
            if self._is_aborted(request_id):
                logger.info("Skipping generation %s, aborted while queued", request_id)
                self._emit(protocol.Done(request_id=request_id))
                return
            if not self._loaded:
                self._emit(protocol.Error(message="The model has not been loaded yet.", request_id=request_id))
                return

            def should_stop():
                return self._is_aborted(request_id)

            messages = [{"role": "system", "content": message.system_prompt}, *message.messages]
            try:
                for text in self._engine.generate(messages, should_stop):
                    if should_stop():
                        break
                    if text:
                        self._emit(protocol.Chunk(request_id=request_id, text=text))
            except Exception as e:
                logger.error("Generation failed: %s", e)
                self._emit(protocol.Error(message=str(e) or "Text generation failed", request_id=request_id))
                return
            self._emit(protocol.Done(request_id=request_id))
        finally:
            with self._aborted_lock:
                self._aborted.discard(request_id)
