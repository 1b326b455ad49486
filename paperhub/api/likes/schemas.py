from pydantic import BaseModel, Field

class LikeUpdate(BaseModel):
    current_count: int = Field(default=0, ge=0)

class LikeOut(BaseModel):
    tool_id: int
    count: int

    model_config = {
        "from_attributes": True
    }
