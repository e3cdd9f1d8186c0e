from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_events.db.models.Activity import Activity
from campus_events.db.models.Category import Category
from campus_events.db.session import commit_or_conflict

NAME_CONFLICT = "Category name already exists"
IN_USE = "Cannot delete category with existing activities"


def get_category(db: Session, category_id: str) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()

def get_category_by_name(db: Session, name: str) -> Optional[Category]:
    return db.query(Category).filter(Category.name == name).first()

def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()

def get_activity_counts(db: Session, category_ids: List[str]) -> Dict[str, int]:
    if not category_ids:
        return {}
    rows = db.query(Activity.category_id, func.count(Activity.id)) \
        .filter(Activity.category_id.in_(category_ids)) \
        .group_by(Activity.category_id).all()
    return {category_id: count for category_id, count in rows}

def count_activities(db: Session, category_id: str) -> int:
    return db.query(func.count(Activity.id)).filter(Activity.category_id == category_id).scalar()

def create_category(db: Session, name: str, description: str, color: str, icon: str) -> Category:
    category = Category(name=name, description=description, color=color, icon=icon)
    db.add(category)
    commit_or_conflict(db, NAME_CONFLICT)
    db.refresh(category)
    return category

def update_category(db: Session, category: Category, changes: dict) -> Category:
    for key, value in changes.items():
        setattr(category, key, value)
    commit_or_conflict(db, NAME_CONFLICT)
    db.refresh(category)
    return category

def delete_category(db: Session, category: Category):
    db.delete(category)
    # an activity created after the pre-check still trips the foreign key
    commit_or_conflict(db, IN_USE)
