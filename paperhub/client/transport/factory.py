from typing import Optional

from paperhub.config import Settings
from paperhub.client.transport.base import ChatTransport
from paperhub.client.transport.hosted import HostedChatTransport
from paperhub.client.transport.local import LocalDaemonTransport
from paperhub.client.transport.worker import ProgressListener, WorkerChatTransport
from paperhub.client.worker.engine import TransformersEngine


def build_transport(settings: Settings, backend: Optional[str] = None,
                    on_progress: Optional[ProgressListener] = None) -> ChatTransport:
    """Pick the chat backend named by `backend` or `settings.CHAT_BACKEND`."""
    backend = backend or settings.CHAT_BACKEND
    if backend == "hosted":
        return HostedChatTransport(settings.HOSTED_CHAT_URL)
    if backend == "local":
        return LocalDaemonTransport(settings.LOCAL_DAEMON_URL, settings.LOCAL_CHAT_MODEL)
    if backend == "worker":
        return WorkerChatTransport(
            settings.WORKER_MODEL_ID,
            lambda: TransformersEngine(
                max_new_tokens=settings.WORKER_MAX_NEW_TOKENS,
                temperature=settings.WORKER_TEMPERATURE,
            ),
            on_progress=on_progress,
        )
    raise ValueError(f"Unknown chat backend: {backend!r}")
