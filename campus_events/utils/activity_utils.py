from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_events.db.models.Activity import Activity, ActivityStatus
from campus_events.db.models.ActivityTag import ActivityTag
from campus_events.db.models.Comment import Comment
from campus_events.db.models.Like import Like
from campus_events.schemas.activity import Activity as ActivitySchema, ActivityFilters, AuthorSummary
from campus_events.schemas.category import Category as CategorySchema

ACTIVITY_COLUMNS = (
    "id", "title", "description", "location", "start_time", "end_time", "is_recurring",
    "category_id", "author_id", "status", "image_url", "max_attendees", "created_at", "updated_at",
)


def get_activity_query(db: Session, filters: ActivityFilters):
    query = db.query(Activity)
    if filters.status is not None:
        query = query.filter(Activity.status == filters.status)
    else:
        query = query.filter(Activity.status != ActivityStatus.CANCELLED)
    if filters.category:
        query = query.filter(Activity.category_id == filters.category)
    if filters.start_date is not None:
        query = query.filter(Activity.start_time >= filters.start_date)
    if filters.end_date is not None:
        query = query.filter(Activity.start_time <= filters.end_date)
    if filters.search:
        query = query.filter(or_(
            Activity.title.icontains(filters.search, autoescape=True),
            Activity.description.icontains(filters.search, autoescape=True),
            Activity.location.icontains(filters.search, autoescape=True),
        ))
    if filters.tags:
        query = query.filter(Activity.tag_rows.any(ActivityTag.name.in_(filters.tags)))
    return query

def paginate_query(query, page: int, limit: int) -> List[Activity]:
    skip = (page - 1) * limit
    return query.order_by(Activity.start_time.asc(), Activity.id).offset(skip).limit(limit).all()

def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit

def get_engagement_counts(db: Session, activity_ids: Iterable[str]) -> Dict[str, dict]:
    ids = list(activity_ids)
    if not ids:
        return {}
    comments = dict(
        db.query(Comment.activity_id, func.count(Comment.id))
        .filter(Comment.activity_id.in_(ids)).group_by(Comment.activity_id).all()
    )
    likes = dict(
        db.query(Like.activity_id, func.count(Like.id))
        .filter(Like.activity_id.in_(ids)).group_by(Like.activity_id).all()
    )
    return {
        activity_id: {"comments": comments.get(activity_id, 0), "likes": likes.get(activity_id, 0)}
        for activity_id in ids
    }

def get_liked_activity_ids(db: Session, user_id: Optional[str], activity_ids: Iterable[str]) -> Set[str]:
    """Ids among activity_ids that user_id has liked; always empty for anonymous callers."""
    ids = list(activity_ids)
    if not user_id or not ids:
        return set()
    rows = db.query(Like.activity_id).filter(Like.user_id == user_id, Like.activity_id.in_(ids)).all()
    return {activity_id for (activity_id,) in rows}

def format_activity_data(activity: Activity, counts: dict, is_liked: bool = False, schema=ActivitySchema, **extra):
    data = {column: getattr(activity, column) for column in ACTIVITY_COLUMNS}
    data.update(
        tags=activity.tags,
        author=AuthorSummary.model_validate(activity.author),
        category=CategorySchema.model_validate(activity.category),
        counts=counts,
        is_liked=is_liked,
        **extra
    )
    return schema.model_validate(data)

def format_activity_list(db: Session, activities: List[Activity], user_id: Optional[str] = None):
    ids = [activity.id for activity in activities]
    counts = get_engagement_counts(db, ids)
    liked = get_liked_activity_ids(db, user_id, ids)
    return [
        format_activity_data(activity, counts[activity.id], activity.id in liked)
        for activity in activities
    ]
