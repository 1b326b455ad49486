from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

class CommentCreate(BaseModel):
    tool_id: int
    nickname: Optional[str] = Field(default=None, max_length=50)
    body: str = Field(min_length=1)
    password: str = Field(min_length=1)

    # a body of only whitespace counts as empty
    @field_validator("body", mode="before")
    @classmethod
    def strip_body(cls, value):
        return value.strip() if isinstance(value, str) else value

class CommentDelete(BaseModel):
    password: str

class CommentOut(BaseModel):
    id: str
    tool_id: int
    nickname: str
    body: str
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class CommentCount(BaseModel):
    tool_id: int
    count: int
