from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, Field, HttpUrl, StringConstraints, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from campus_events.db.models.Activity import ActivityStatus
from campus_events.db.models.Role import Role
from campus_events.schemas.base import CamelModel, Pagination, UtcDateTime
from campus_events.schemas.category import Category
from campus_events.schemas.user import ActivityCounts
from campus_events.utils.validation import UUID_REGEX, coerce_positive_int

_http_url = TypeAdapter(HttpUrl)


def _check_image_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Invalid image URL")
    return value


ImageUrl = Annotated[str, StringConstraints(max_length=2048), AfterValidator(_check_image_url)]
TagName = Annotated[str, StringConstraints(max_length=100)]


class ActivityCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    start_time: UtcDateTime
    end_time: Optional[UtcDateTime] = None
    is_recurring: bool = False
    category_id: str = Field(..., pattern=UUID_REGEX)
    image_url: Optional[ImageUrl] = None
    max_attendees: Optional[int] = Field(None, gt=0)
    tags: List[TagName] = Field(default_factory=list)


class ActivityUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    start_time: Optional[UtcDateTime] = None
    end_time: Optional[UtcDateTime] = None
    is_recurring: Optional[bool] = None
    category_id: Optional[str] = Field(None, pattern=UUID_REGEX)
    status: Optional[ActivityStatus] = None
    image_url: Optional[ImageUrl] = None
    max_attendees: Optional[int] = Field(None, gt=0)
    tags: Optional[List[TagName]] = None


class ActivityFilters(CamelModel):
    category: Optional[str] = None
    status: Optional[ActivityStatus] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    search: Optional[str] = None
    tags: Optional[List[str]] = None
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


class AuthorSummary(CamelModel):
    id: str
    username: str
    first_name: str
    last_name: str
    role: Optional[Role] = None


class Comment(CamelModel):
    id: str
    content: str
    activity_id: str
    author_id: str
    author: AuthorSummary
    created_at: datetime


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=500)


class Activity(CamelModel):
    id: str
    title: str
    description: str
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    is_recurring: bool
    category_id: str
    author_id: str
    status: ActivityStatus
    image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    tags: List[str]
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    category: Category
    counts: ActivityCounts
    is_liked: bool = False


class ActivityDetail(Activity):
    comments: List[Comment]


class ActivityListResponse(CamelModel):
    activities: List[Activity]
    pagination: Pagination


class ActivityResponse(CamelModel):
    activity: ActivityDetail


class ActivityMutationResponse(CamelModel):
    message: str
    activity: Activity


class LikeResponse(CamelModel):
    message: str
    is_liked: bool


class CommentResponse(CamelModel):
    message: str
    comment: Comment
