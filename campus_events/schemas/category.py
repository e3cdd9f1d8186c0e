from datetime import datetime
from typing import List, Optional

from pydantic import Field

from campus_events.schemas.base import CamelModel
from campus_events.utils.validation import HEX_COLOR_REGEX


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=200)
    color: str = Field(..., pattern=HEX_COLOR_REGEX)
    icon: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_REGEX)
    icon: Optional[str] = Field(None, min_length=1, max_length=100)


class Category(CamelModel):
    id: str
    name: str
    description: str
    color: str
    icon: str
    created_at: datetime
    updated_at: datetime


class CategoryCounts(CamelModel):
    activities: int = 0


class CategoryWithCount(Category):
    counts: CategoryCounts


class CategoryListResponse(CamelModel):
    categories: List[CategoryWithCount]


class CategoryResponse(CamelModel):
    category: CategoryWithCount


class CategoryMutationResponse(CamelModel):
    message: str
    category: Category
