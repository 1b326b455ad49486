from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from paperhub.db.session import get_db
from . import schemas, services

router = APIRouter()

@router.get("/{tool_id}", response_model=schemas.LikeOut)
def get_likes(
    tool_id: int,
    db: Session = Depends(get_db)
):
    return {"tool_id": tool_id, "count": services.get_like_count(db, tool_id)}

@router.post("/{tool_id}", response_model=schemas.LikeOut)
def add_like(
    tool_id: int,
    payload: schemas.LikeUpdate,
    db: Session = Depends(get_db)
):
    return services.add_like(db, tool_id, payload.current_count)
