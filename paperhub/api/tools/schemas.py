from pydantic import BaseModel


class AuthorNamesRequest(BaseModel):
    authors: str

class AuthorNamesResponse(BaseModel):
    converted: str

class ImprovementRequest(BaseModel):
    baseline: float
    new: float
    is_percent: bool = False

class ImprovementResponse(BaseModel):
    label: str
    value: str
    is_positive: bool

class Category(BaseModel):
    id: str
    label: str

