from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from campus_events.db.models.Activity import ActivityStatus
from campus_events.db.models.Role import Role
from campus_events.schemas.base import CamelModel, Pagination
from campus_events.utils.validation import coerce_positive_int


class UserCreate(CamelModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RoleUpdate(CamelModel):
    role: Role


class UserFilters(CamelModel):
    search: Optional[str] = None
    role: Optional[Role] = None
    include_inactive: bool = False
    page: int = 1
    limit: int = 20

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value):
        return coerce_positive_int(value, 1)

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value):
        return coerce_positive_int(value, 20)


class UserCounts(CamelModel):
    activities: int = 0
    comments: int = 0
    likes: int = 0


class UserPublic(CamelModel):
    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: datetime


class UserProfile(UserPublic):
    counts: UserCounts


class CategoryBadge(CamelModel):
    name: str
    color: str


class ActivityCounts(CamelModel):
    comments: int = 0
    likes: int = 0


class UserActivitySummary(CamelModel):
    id: str
    title: str
    start_time: datetime
    status: ActivityStatus
    category: CategoryBadge
    counts: ActivityCounts


class UserDetail(UserProfile):
    activities: List[UserActivitySummary]


class AuthResponse(CamelModel):
    message: str
    user: UserPublic
    token: str


class TokenResponse(CamelModel):
    message: str
    token: str


class ProfileResponse(CamelModel):
    user: UserProfile


class UserDetailResponse(CamelModel):
    user: UserDetail


class UserUpdateResponse(CamelModel):
    message: str
    user: UserPublic


class UserListResponse(CamelModel):
    users: List[UserProfile]
    pagination: Pagination
