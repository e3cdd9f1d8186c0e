import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from campus_events.core.errors import AuthorizationError, NotFoundError, ValidationError
from campus_events.crud import activity as activity_crud
from campus_events.crud.category import get_category
from campus_events.db.models.Activity import Activity
from campus_events.db.models.Role import PRIVILEGED_ROLES
from campus_events.db.session import get_db
from campus_events.schemas.activity import (
    ActivityCreate,
    ActivityDetail,
    ActivityFilters,
    ActivityListResponse,
    ActivityMutationResponse,
    ActivityResponse,
    ActivityUpdate,
    Comment as CommentSchema,
    CommentCreate,
    CommentResponse,
    LikeResponse,
)
from campus_events.schemas.base import MessageResponse, Pagination
from campus_events.security.auth import AuthContext, get_current_user, get_optional_user
from campus_events.utils.activity_utils import (
    format_activity_data,
    format_activity_list,
    get_activity_query,
    get_engagement_counts,
    get_liked_activity_ids,
    paginate_query,
    total_pages,
)
from campus_events.utils.validation import validate_request

router = APIRouter()
logger = logging.getLogger(__name__)


def get_activity_filters(request: Request) -> ActivityFilters:
    params = dict(request.query_params)
    params.pop("tags[]", None)
    raw_tags = request.query_params.getlist("tags") + request.query_params.getlist("tags[]")
    if raw_tags:
        params["tags"] = [tag.strip() for raw in raw_tags for tag in raw.split(",") if tag.strip()]
    return validate_request(ActivityFilters, params).unwrap()


def get_activity_or_404(db: Session, activity_id: str) -> Activity:
    activity = activity_crud.get_activity(db, activity_id)
    if not activity:
        raise NotFoundError("Activity not found")
    return activity


def ensure_can_manage(activity: Activity, current_user: AuthContext, action: str):
    if activity.author_id != current_user.id and current_user.role not in PRIVILEGED_ROLES:
        raise AuthorizationError(f"Not authorized to {action} this activity")


def _serialize(db: Session, activity: Activity, user_id: Optional[str]):
    counts = get_engagement_counts(db, [activity.id])[activity.id]
    is_liked = activity.id in get_liked_activity_ids(db, user_id, [activity.id])
    return format_activity_data(activity, counts, is_liked)


@router.get("", response_model=ActivityListResponse)
def get_activities(
    filters: ActivityFilters = Depends(get_activity_filters),
    db: Session = Depends(get_db),
    current_user: Optional[AuthContext] = Depends(get_optional_user)
):
    query = get_activity_query(db, filters)
    total = query.count()
    activities = paginate_query(query, filters.page, filters.limit)
    user_id = current_user.id if current_user else None

    return ActivityListResponse(
        activities=format_activity_list(db, activities, user_id),
        pagination=Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            pages=total_pages(total, filters.limit)
        )
    )


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[AuthContext] = Depends(get_optional_user)
):
    activity = get_activity_or_404(db, activity_id)
    user_id = current_user.id if current_user else None
    counts = get_engagement_counts(db, [activity.id])[activity.id]
    is_liked = activity.id in get_liked_activity_ids(db, user_id, [activity.id])
    comments = [CommentSchema.model_validate(comment) for comment in activity_crud.get_comments(db, activity.id)]

    return ActivityResponse(
        activity=format_activity_data(activity, counts, is_liked, schema=ActivityDetail, comments=comments)
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ActivityMutationResponse)
def create_activity(
    activity_in: ActivityCreate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    if activity_in.end_time is not None and activity_in.end_time <= activity_in.start_time:
        raise ValidationError("End time must be after start time")

    if not get_category(db, activity_in.category_id):
        raise ValidationError("Invalid category")

    activity = activity_crud.create_activity(db, current_user.id, activity_in)
    logger.info(f"Activity {activity.id} created by {current_user.id}")

    return ActivityMutationResponse(
        message="Activity created successfully",
        activity=format_activity_data(activity, {"comments": 0, "likes": 0}, False)
    )


@router.put("/{activity_id}", response_model=ActivityMutationResponse)
def update_activity(
    activity_id: str,
    activity_in: ActivityUpdate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    activity = get_activity_or_404(db, activity_id)
    ensure_can_manage(activity, current_user, "update")

    changes = activity_in.model_dump(exclude_unset=True)
    start_time = changes.get("start_time") or activity.start_time
    end_time = changes["end_time"] if "end_time" in changes else activity.end_time
    if end_time is not None and end_time <= start_time:
        raise ValidationError("End time must be after start time")

    if changes.get("category_id") and not get_category(db, changes["category_id"]):
        raise ValidationError("Invalid category")

    activity = activity_crud.update_activity(db, activity, changes)
    logger.info(f"Activity {activity.id} updated by {current_user.id}")

    return ActivityMutationResponse(
        message="Activity updated successfully",
        activity=_serialize(db, activity, current_user.id)
    )


@router.delete("/{activity_id}", response_model=MessageResponse)
def delete_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    activity = get_activity_or_404(db, activity_id)
    ensure_can_manage(activity, current_user, "delete")

    activity_crud.delete_activity(db, activity)
    logger.info(f"Activity {activity_id} deleted by {current_user.id}")
    return MessageResponse(message="Activity deleted successfully")


@router.post("/{activity_id}/like", response_model=LikeResponse)
def like_activity(
    activity_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    get_activity_or_404(db, activity_id)
    is_liked = activity_crud.toggle_like(db, activity_id, current_user.id)
    return LikeResponse(
        message="Activity liked" if is_liked else "Activity unliked",
        is_liked=is_liked
    )


@router.post("/{activity_id}/comments", status_code=status.HTTP_201_CREATED, response_model=CommentResponse)
def add_comment(
    activity_id: str,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    get_activity_or_404(db, activity_id)
    comment = activity_crud.create_comment(db, activity_id, current_user.id, comment_in.content)

    return CommentResponse(
        message="Comment added successfully",
        comment=CommentSchema.model_validate(comment)
    )
