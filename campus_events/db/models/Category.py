# campus_events/db/models/Category.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from campus_events.db.base import Base
from campus_events.utils.dates import utcnow

class Category(Base):
    __tablename__ = 'categories'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(200), nullable=False)
    color = Column(String(7), nullable=False)
    icon = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    activities = relationship("Activity", back_populates="category", passive_deletes="all")

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"
