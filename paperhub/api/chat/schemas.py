from pydantic import BaseModel, Field
from typing import List, Literal, Optional

# -----------------------------
# 🧾 Request Schemas
# -----------------------------

class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str

class ChatRequest(BaseModel):
    messages: List[ChatTurn] = Field(min_length=1)
    context: Optional[str] = None


# -----------------------------
# 📡 Stream Events (one JSON object per line)
# -----------------------------

class StreamEvent(BaseModel):
    type: Literal["chunk", "end", "error"]
    text: str = ""
