from sqlalchemy import Column, Integer

from paperhub.db.session import Base

class Like(Base):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    tool_id = Column(Integer, nullable=False, unique=True, index=True)
    count = Column(Integer, nullable=False, default=0)
