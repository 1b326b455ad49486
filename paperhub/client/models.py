import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ChatMessage:
    role: Role
    content: str = ""
    done: bool = True
    id: str = field(default_factory=_new_id)

    def append(self, fragment: str) -> None:
        if self.done:
            raise ValueError(f"message {self.id} is complete and can no longer change")
        self.content += fragment

    def finish(self) -> None:
        self.done = True

    def as_turn(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class AttachedContext:
    file_name: str
    mime_kind: Literal["pdf", "text"]
    extracted_text: str


@dataclass(frozen=True)
class ChatRequest:
    """What a transport needs for one turn."""
    system_prompt: str
    messages: List[dict]
    context: Optional[str] = None


@dataclass
class Comment:
    id: str
    tool_id: int
    nickname: str
    body: str
    created_at: datetime
    pending: bool = False
