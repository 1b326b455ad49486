import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional

from paperhub.client.errors import StoreError
from paperhub.client.models import ChatRequest, Comment
from paperhub.client.transport.base import ChatTransport


class ScriptedTransport(ChatTransport):
    """Emits the given fragments, optionally waiting on `gate` first, then raises `error` if set."""

    name = "scripted"

    def __init__(self, fragments=(), error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None):
        self.fragments = list(fragments)
        self.error = error
        self.gate = gate
        self.requests: List[ChatRequest] = []
        self.aborted = False

    async def stream(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        for fragment in self.fragments:
            yield fragment
        if self.error is not None:
            raise self.error

    async def abort(self):
        self.aborted = True


class FakeEngine:
    """Stands in for the model runtime inside the worker thread."""

    def __init__(self, tokens=("Hello", ", ", "world"), fail_load=None, fail_generate=None,
                 endless=False, delay=0.0, gate=None):
        self.tokens = list(tokens)
        self.fail_load = fail_load
        self.fail_generate = fail_generate
        self.endless = endless
        self.delay = delay
        self.gate = gate
        self.loaded = []
        self.seen_messages = []

    def load(self, model_id, on_progress):
        on_progress(50.0, f"loading {model_id}")
        if self.fail_load:
            raise RuntimeError(self.fail_load)
        self.loaded.append(model_id)
        on_progress(100.0, "done")

    def generate(self, messages, should_stop):
        self.seen_messages.append(messages)
        if self.gate is not None:
            # prefill: hold the worker thread until the test releases it
            self.gate.wait(5)
        if self.fail_generate:
            raise RuntimeError(self.fail_generate)
        if self.endless:
            i = 0
            while not should_stop():
                time.sleep(self.delay)
                yield f"t{i} "
                i += 1
            return
        for token in self.tokens:
            yield token


class FakeStore:
    """Duck-typed RemoteStoreClient whose calls fail when told to."""

    def __init__(self, comments=None, fail_with: Optional[StoreError] = None):
        self.comments: List[Comment] = list(comments or [])
        self.fail_with = fail_with
        self.calls = []
        self._next_id = 1

    async def list_comments(self, tool_id):
        self.calls.append(("list", tool_id))
        if self.fail_with:
            raise self.fail_with
        return [c for c in self.comments if c.tool_id == tool_id]

    async def add_comment(self, tool_id, nickname, body, password):
        self.calls.append(("add", tool_id, nickname, body, password))
        if self.fail_with:
            raise self.fail_with
        comment = Comment(id=f"srv-{self._next_id}", tool_id=tool_id, nickname=nickname,
                          body=body, created_at=datetime.now(timezone.utc))
        self._next_id += 1
        self.comments.insert(0, comment)
        return comment

    async def delete_comment(self, comment_id, password):
        self.calls.append(("delete", comment_id, password))
        if self.fail_with:
            raise self.fail_with

    async def like(self, tool_id, current_count):
        self.calls.append(("like", tool_id, current_count))
        if self.fail_with:
            raise self.fail_with
        return current_count + 1
