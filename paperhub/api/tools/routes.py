from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from paperhub.data.tools import CATEGORIES, Tool
from . import schemas, services

router = APIRouter()

@router.get("/", response_model=List[Tool])
def list_tools(
    q: Optional[str] = None,
    category: str = "all",
    favorites: List[int] = Query(default=[]),
):
    return services.filter_tools(q, category, favorites)

@router.get("/categories", response_model=List[schemas.Category])
def list_categories():
    return CATEGORIES

@router.get("/{tool_id}", response_model=Tool)
def get_tool(tool_id: int):
    tool = services.get_tool(tool_id)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool

@router.post("/author-names", response_model=schemas.AuthorNamesResponse)
def convert_author_names(payload: schemas.AuthorNamesRequest):
    return {"converted": services.convert_author_names(payload.authors)}

@router.post("/improvement", response_model=schemas.ImprovementResponse)
def calculate_improvement(payload: schemas.ImprovementRequest):
    return services.calculate_improvement(payload.baseline, payload.new, payload.is_percent)
