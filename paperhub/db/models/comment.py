from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime, timezone
import uuid

from paperhub.db.session import Base

class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tool_id = Column(Integer, nullable=False, index=True)
    nickname = Column(String(50), nullable=False)
    body = Column(Text, nullable=False)

    # Only used to authorize deletion, never returned by the API
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
