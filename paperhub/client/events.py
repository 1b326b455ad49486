import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

COMMENT_COUNT = "comment_count"
LIKE_COUNT = "like_count"

Handler = Callable[[int], None]


class EventBus:
    """Publish/subscribe of counter updates, keyed by (topic, tool id)."""

    def __init__(self):
        self._handlers: Dict[Tuple[str, int], List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: str, tool_id: int, handler: Handler) -> Callable[[], None]:
        key = (topic, tool_id)
        with self._lock:
            self._handlers[key].append(handler)

        def unsubscribe():
            with self._lock:
                try:
                    self._handlers[key].remove(handler)
                except ValueError:
                    pass

        return unsubscribe

    def publish(self, topic: str, tool_id: int, count: int) -> None:
        with self._lock:
            handlers = list(self._handlers.get((topic, tool_id), ()))
        for handler in handlers:
            try:
                handler(count)
            except Exception:
                logger.exception("Handler for %s/%s failed", topic, tool_id)


class ToolCounters:
    """Comment and like counts for one tool, kept current from the bus."""

    def __init__(self, bus: EventBus, tool_id: int, comment_count: int = 0, like_count: int = 0):
        self.tool_id = tool_id
        self.comment_count = comment_count
        self.like_count = like_count
        self._unsubscribers = [
            bus.subscribe(COMMENT_COUNT, tool_id, self._on_comment_count),
            bus.subscribe(LIKE_COUNT, tool_id, self._on_like_count),
        ]

    def _on_comment_count(self, count: int) -> None:
        self.comment_count = count

    def _on_like_count(self, count: int) -> None:
        self.like_count = count

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
