# campus_events/db/models/Like.py
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from campus_events.db.base import Base
from campus_events.utils.dates import utcnow

class Like(Base):
    __tablename__ = 'likes'
    __table_args__ = (UniqueConstraint('activity_id', 'user_id', name='uq_like_activity_user'),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    activity_id = Column(String(36), ForeignKey('activities.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    activity = relationship("Activity", back_populates="likes")
    user = relationship("User", back_populates="likes")

    def __repr__(self):
        return f"<Like(activity_id={self.activity_id}, user_id={self.user_id})>"
