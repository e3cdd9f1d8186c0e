import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_events.core.errors import NotFoundError
from campus_events.db.models.Activity import Activity
from campus_events.db.models.Comment import Comment
from campus_events.db.models.Like import Like
from campus_events.db.session import commit_or_conflict
from campus_events.schemas.activity import ActivityCreate

logger = logging.getLogger(__name__)

# columns an update may explicitly clear with null
NULLABLE_FIELDS = {"location", "end_time", "image_url", "max_attendees"}


def get_activity(db: Session, activity_id: str) -> Optional[Activity]:
    return db.query(Activity).filter(Activity.id == activity_id).first()

def create_activity(db: Session, author_id: str, data: ActivityCreate) -> Activity:
    new_activity = Activity(
        title=data.title,
        description=data.description,
        location=data.location,
        start_time=data.start_time,
        end_time=data.end_time,
        is_recurring=data.is_recurring,
        category_id=data.category_id,
        author_id=author_id,
        image_url=data.image_url,
        max_attendees=data.max_attendees,
        tags=data.tags
    )
    db.add(new_activity)
    commit_or_conflict(db, "Invalid category")
    db.refresh(new_activity)
    return new_activity

def update_activity(db: Session, activity: Activity, changes: dict) -> Activity:
    for key, value in changes.items():
        if value is None and key not in NULLABLE_FIELDS:
            continue
        setattr(activity, key, value)
    commit_or_conflict(db, "Invalid category")
    db.refresh(activity)
    return activity

def delete_activity(db: Session, activity: Activity):
    db.delete(activity)
    db.commit()

def get_like(db: Session, activity_id: str, user_id: str) -> Optional[Like]:
    return db.query(Like).filter(Like.activity_id == activity_id, Like.user_id == user_id).first()

def toggle_like(db: Session, activity_id: str, user_id: str) -> bool:
    """Flip the caller's like on an activity and return whether it is now liked."""
    existing_like = get_like(db, activity_id, user_id)
    if existing_like:
        db.delete(existing_like)
        db.commit()
        return False

    db.add(Like(activity_id=activity_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # either a concurrent request created the like or the activity is gone
        if get_like(db, activity_id, user_id) is None:
            raise NotFoundError("Activity not found")
        logger.info(f"Like for activity {activity_id} by {user_id} already exists")
    return True

def create_comment(db: Session, activity_id: str, author_id: str, content: str) -> Comment:
    comment = Comment(content=content, activity_id=activity_id, author_id=author_id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment

def get_comments(db: Session, activity_id: str) -> List[Comment]:
    return db.query(Comment).filter(Comment.activity_id == activity_id) \
        .order_by(Comment.created_at.desc()).all()
