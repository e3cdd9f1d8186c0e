# campus_events/db/models/Activity.py
import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from campus_events.db.base import Base
from campus_events.utils.dates import utcnow


class ActivityStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Activity(Base):
    __tablename__ = 'activities'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    category_id = Column(String(36), ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False)
    author_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    status = Column(Enum(ActivityStatus, name="activity_status"), default=ActivityStatus.UPCOMING, nullable=False)
    image_url = Column(String(2048), nullable=True)
    max_attendees = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", back_populates="activities", lazy="joined")
    category = relationship("Category", back_populates="activities", lazy="joined")
    tag_rows = relationship(
        "ActivityTag", back_populates="activity", cascade="all, delete-orphan", lazy="selectin",
        order_by="ActivityTag.id"
    )
    comments = relationship("Comment", back_populates="activity", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="activity", cascade="all, delete-orphan")

    @property
    def tags(self):
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names):
        from campus_events.db.models.ActivityTag import ActivityTag
        # reuse rows for names that stay; uq_activity_tag would reject a re-insert
        existing = {row.name: row for row in self.tag_rows}
        self.tag_rows = [existing.get(name) or ActivityTag(name=name) for name in dict.fromkeys(names or [])]

    def __repr__(self):
        return f"<Activity(id={self.id}, title={self.title})>"
