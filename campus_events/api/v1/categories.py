import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.core.errors import ConflictError, NotFoundError
from campus_events.crud import category as category_crud
from campus_events.db.models.Category import Category
from campus_events.db.models.Role import PRIVILEGED_ROLES
from campus_events.db.session import get_db
from campus_events.schemas.base import MessageResponse
from campus_events.schemas.category import (
    Category as CategorySchema,
    CategoryCreate,
    CategoryListResponse,
    CategoryMutationResponse,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithCount,
)
from campus_events.security.auth import AuthContext, require_role

router = APIRouter()
logger = logging.getLogger(__name__)

require_category_manager = require_role(*PRIVILEGED_ROLES)


def _with_count(category: Category, count: int) -> CategoryWithCount:
    data = CategorySchema.model_validate(category).model_dump()
    return CategoryWithCount.model_validate({**data, "counts": {"activities": count}})


def get_category_or_404(db: Session, category_id: str) -> Category:
    category = category_crud.get_category(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


@router.get("", response_model=CategoryListResponse)
def get_categories(db: Session = Depends(get_db)):
    categories = category_crud.list_categories(db)
    counts = category_crud.get_activity_counts(db, [category.id for category in categories])
    return CategoryListResponse(
        categories=[_with_count(category, counts.get(category.id, 0)) for category in categories]
    )


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = get_category_or_404(db, category_id)
    return CategoryResponse(category=_with_count(category, category_crud.count_activities(db, category.id)))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CategoryMutationResponse)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_category_manager)
):
    if category_crud.get_category_by_name(db, category_in.name):
        raise ConflictError(category_crud.NAME_CONFLICT)

    category = category_crud.create_category(
        db,
        name=category_in.name,
        description=category_in.description,
        color=category_in.color,
        icon=category_in.icon
    )
    logger.info(f"Category {category.id} created by {current_user.id}")
    return CategoryMutationResponse(
        message="Category created successfully",
        category=CategorySchema.model_validate(category)
    )


@router.put("/{category_id}", response_model=CategoryMutationResponse)
def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_category_manager)
):
    category = get_category_or_404(db, category_id)

    changes = {key: value for key, value in category_in.model_dump(exclude_unset=True).items() if value is not None}
    new_name = changes.get("name")
    if new_name and new_name != category.name and category_crud.get_category_by_name(db, new_name):
        raise ConflictError(category_crud.NAME_CONFLICT)

    category = category_crud.update_category(db, category, changes)
    logger.info(f"Category {category.id} updated by {current_user.id}")
    return CategoryMutationResponse(
        message="Category updated successfully",
        category=CategorySchema.model_validate(category)
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(require_category_manager)
):
    category = get_category_or_404(db, category_id)
    if category_crud.count_activities(db, category.id) > 0:
        raise ConflictError(category_crud.IN_USE)

    category_crud.delete_category(db, category)
    logger.info(f"Category {category_id} deleted by {current_user.id}")
    return MessageResponse(message="Category deleted successfully")
