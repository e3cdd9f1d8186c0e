# campus_events/db/models/ActivityTag.py
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from campus_events.db.base import Base

class ActivityTag(Base):
    __tablename__ = 'activity_tags'
    __table_args__ = (UniqueConstraint('activity_id', 'name', name='uq_activity_tag'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(String(36), ForeignKey('activities.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)

    activity = relationship("Activity", back_populates="tag_rows")

    def __repr__(self):
        return f"<ActivityTag(activity_id={self.activity_id}, name={self.name})>"
