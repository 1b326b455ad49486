import logging

from sqlalchemy.orm import Session

from paperhub.db.models.like import Like

logger = logging.getLogger(__name__)


def get_like_count(db: Session, tool_id: int) -> int:
    like = db.query(Like).filter(Like.tool_id == tool_id).first()
    return like.count if like else 0

def add_like(db: Session, tool_id: int, current_count: int) -> Like:
    """
    Upsert the counter to current_count + 1.

    The count the client saw is trusted as-is, so concurrent likes from
    different clients overwrite each other (last write wins).
    """
    like = db.query(Like).filter(Like.tool_id == tool_id).first()
    if like is None:
        like = Like(tool_id=tool_id, count=current_count + 1)
        db.add(like)
    else:
        like.count = current_count + 1
    db.commit()
    db.refresh(like)
    logger.info("Tool %s like count set to %s", tool_id, like.count)
    return like
