"""
Messages exchanged with the model worker thread.

Requests go to the worker, events come back. Generation events carry the
`request_id` of the `Generate` request that produced them.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Union


# ---------------- Requests ----------------
@dataclass(frozen=True)
class Load:
    model_id: str
    type: Literal["load"] = "load"


@dataclass(frozen=True)
class Generate:
    request_id: str
    system_prompt: str
    messages: List[dict] = field(default_factory=list)
    type: Literal["generate"] = "generate"


@dataclass(frozen=True)
class Abort:
    request_id: str
    type: Literal["abort"] = "abort"


@dataclass(frozen=True)
class Shutdown:
    type: Literal["shutdown"] = "shutdown"


WorkerRequest = Union[Load, Generate, Abort, Shutdown]


# ---------------- Events ----------------
@dataclass(frozen=True)
class Progress:
    percent: float
    text: str
    type: Literal["progress"] = "progress"


@dataclass(frozen=True)
class Status:
    status: Literal["ready"] = "ready"
    type: Literal["status"] = "status"


@dataclass(frozen=True)
class Chunk:
    request_id: str
    text: str
    type: Literal["chunk"] = "chunk"


@dataclass(frozen=True)
class Done:
    request_id: str
    type: Literal["done"] = "done"


@dataclass(frozen=True)
class Error:
    message: str
    request_id: str = ""
    type: Literal["error"] = "error"


WorkerEvent = Union[Progress, Status, Chunk, Done, Error]
