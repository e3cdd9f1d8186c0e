# campus_events/db/models/Comment.py
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from campus_events.db.base import Base
from campus_events.utils.dates import utcnow

class Comment(Base):
    __tablename__ = 'comments'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    content = Column(String(500), nullable=False)
    activity_id = Column(String(36), ForeignKey('activities.id', ondelete='CASCADE'), nullable=False, index=True)
    author_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    activity = relationship("Activity", back_populates="comments")
    author = relationship("User", back_populates="comments", lazy="joined")

    def __repr__(self):
        return f"<Comment(id={self.id}, activity_id={self.activity_id})>"
