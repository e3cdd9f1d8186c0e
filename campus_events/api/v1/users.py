import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from campus_events.core.errors import AuthorizationError, ConflictError, NotFoundError
from campus_events.crud import user as user_crud
from campus_events.db.models.Role import PRIVILEGED_ROLES, Role
from campus_events.db.models.User import User
from campus_events.db.session import get_db
from campus_events.schemas.base import Pagination
from campus_events.schemas.user import (
    RoleUpdate,
    UserActivitySummary,
    UserDetail,
    UserDetailResponse,
    UserFilters,
    UserListResponse,
    UserPublic,
    UserUpdateResponse,
)
from campus_events.security.auth import AuthContext, get_current_user, require_role
from campus_events.utils.activity_utils import get_engagement_counts, total_pages
from campus_events.utils.user_utils import format_user_data
from campus_events.utils.validation import validate_request

router = APIRouter()
logger = logging.getLogger(__name__)

require_admin = require_role(Role.ADMIN)


def get_user_filters(request: Request) -> UserFilters:
    return validate_request(UserFilters, dict(request.query_params)).unwrap()


def get_user_or_404(db: Session, user_id: str) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=UserListResponse)
def get_users(
    filters: UserFilters = Depends(get_user_filters),
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_admin)
):
    users, total = user_crud.list_users(
        db,
        page=filters.page,
        limit=filters.limit,
        search=filters.search,
        role=filters.role,
        include_inactive=filters.include_inactive
    )
    counts = user_crud.get_user_counts(db, [user.id for user in users])

    return UserListResponse(
        users=[format_user_data(user, counts[user.id]) for user in users],
        pagination=Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            pages=total_pages(total, filters.limit)
        )
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user)
):
    if user_id != current_user.id and current_user.role not in PRIVILEGED_ROLES:
        raise AuthorizationError("Not authorized to view this profile")

    user = get_user_or_404(db, user_id)
    recent = user_crud.get_recent_activities(db, user.id)
    engagement = get_engagement_counts(db, [activity.id for activity in recent])
    activities = [
        UserActivitySummary(
            id=activity.id,
            title=activity.title,
            start_time=activity.start_time,
            status=activity.status,
            category={"name": activity.category.name, "color": activity.category.color},
            counts=engagement[activity.id]
        )
        for activity in recent
    ]
    counts = user_crud.get_user_counts(db, [user.id])[user.id]

    return UserDetailResponse(user=format_user_data(user, counts, schema=UserDetail, activities=activities))


@router.patch("/{user_id}/role", response_model=UserUpdateResponse)
def update_user_role(
    user_id: str,
    role_in: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_admin)
):
    user = get_user_or_404(db, user_id)
    user = user_crud.update_role(db, user, role_in.role)
    logger.info(f"User {user.id} role set to {user.role.value} by {current_user.id}")
    return UserUpdateResponse(message="User role updated successfully", user=UserPublic.model_validate(user))


@router.patch("/{user_id}/deactivate", response_model=UserUpdateResponse)
def deactivate_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_admin)
):
    user = get_user_or_404(db, user_id)
    if not user.is_active:
        raise ConflictError("User is already deactivated")

    user = user_crud.set_active(db, user, False)
    logger.info(f"User {user.id} deactivated by {current_user.id}")
    return UserUpdateResponse(message="User deactivated successfully", user=UserPublic.model_validate(user))


@router.patch("/{user_id}/activate", response_model=UserUpdateResponse)
def activate_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_admin)
):
    user = get_user_or_404(db, user_id)
    if user.is_active:
        raise ConflictError("User is already active")

    user = user_crud.set_active(db, user, True)
    logger.info(f"User {user.id} activated by {current_user.id}")
    return UserUpdateResponse(message="User activated successfully", user=UserPublic.model_validate(user))
