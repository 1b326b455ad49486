from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from paperhub.db.session import get_db
from . import schemas, services

router = APIRouter()

@router.post("/", response_model=schemas.CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment: schemas.CommentCreate,
    db: Session = Depends(get_db)
):
    return services.create_comment(db, comment)

@router.get("/tool/{tool_id}", response_model=list[schemas.CommentOut])
def get_tool_comments(
    tool_id: int,
    db: Session = Depends(get_db)
):
    return services.get_comments_for_tool(db, tool_id)

@router.get("/tool/{tool_id}/count", response_model=schemas.CommentCount)
def get_tool_comment_count(
    tool_id: int,
    db: Session = Depends(get_db)
):
    return {"tool_id": tool_id, "count": services.count_comments_for_tool(db, tool_id)}

@router.delete("/{comment_id}")
def delete_comment(
    comment_id: str,
    payload: schemas.CommentDelete,
    db: Session = Depends(get_db)
):
    try:
        services.delete_comment(db, comment_id, payload.password)
    except services.CommentNotFound:
        raise HTTPException(status_code=404, detail="Comment not found")
    except services.InvalidCommentPassword:
        raise HTTPException(status_code=403, detail="Wrong password")
    return {"message": "Comment deleted"}
