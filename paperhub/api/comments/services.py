import logging

from sqlalchemy.orm import Session

from paperhub.config import settings
from paperhub.core.hashing import Hasher
from paperhub.db.models.comment import Comment
from . import schemas

logger = logging.getLogger(__name__)


class CommentNotFound(Exception):
    pass


class InvalidCommentPassword(Exception):
    pass


def create_comment(db: Session, comment: schemas.CommentCreate) -> Comment:
    nickname = (comment.nickname or "").strip() or settings.DEFAULT_NICKNAME
    db_comment = Comment(
        tool_id=comment.tool_id,
        nickname=nickname,
        body=comment.body,
        password_hash=Hasher.hash_password(comment.password),
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    logger.info("Comment %s added for tool %s", db_comment.id, comment.tool_id)
    return db_comment

def get_comment(db: Session, comment_id: str):
    return db.query(Comment).filter(Comment.id == comment_id).first()

def get_comments_for_tool(db: Session, tool_id: int):
    return db.query(Comment)\
             .filter(Comment.tool_id == tool_id)\
             .order_by(Comment.created_at.desc())\
             .all()

def count_comments_for_tool(db: Session, tool_id: int) -> int:
    return db.query(Comment).filter(Comment.tool_id == tool_id).count()

def delete_comment(db: Session, comment_id: str, password: str) -> Comment:
    """Delete a comment after checking the password it was posted with."""
    db_comment = get_comment(db, comment_id)
    if not db_comment:
        raise CommentNotFound(comment_id)
    if not Hasher.verify_password(password, db_comment.password_hash):
        logger.warning("Rejected delete of comment %s: wrong password", comment_id)
        raise InvalidCommentPassword(comment_id)
    db.delete(db_comment)
    db.commit()
    return db_comment
