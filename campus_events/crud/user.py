from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_events.db.models.Activity import Activity
from campus_events.db.models.Comment import Comment
from campus_events.db.models.Like import Like
from campus_events.db.models.Role import Role
from campus_events.db.models.User import User
from campus_events.db.session import commit_or_conflict


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def find_registration_conflict(db: Session, email: str, username: str) -> Optional[str]:
    existing_user = db.query(User).filter(
        (User.email == email) | (User.username == username)
    ).first()
    if existing_user is None:
        return None
    return "Email already registered" if existing_user.email == email else "Username already taken"

def create_user(db: Session, email: str, username: str, first_name: str, last_name: str, password_hash: str) -> User:
    new_user = User(
        email=email,
        username=username,
        first_name=first_name,
        last_name=last_name,
        password_hash=password_hash,
        role=Role.STUDENT,
        is_active=True
    )
    db.add(new_user)
    commit_or_conflict(db, "Email or username already in use")
    db.refresh(new_user)
    return new_user

def _count_by(db: Session, column, ids: List[str]) -> Dict[str, int]:
    if not ids:
        return {}
    rows = db.query(column, func.count()).filter(column.in_(ids)).group_by(column).all()
    return {key: count for key, count in rows}

def get_user_counts(db: Session, user_ids: Iterable[str]) -> Dict[str, dict]:
    """Activity, comment and like totals keyed by user id."""
    ids = list(user_ids)
    activities = _count_by(db, Activity.author_id, ids)
    comments = _count_by(db, Comment.author_id, ids)
    likes = _count_by(db, Like.user_id, ids)
    return {
        user_id: {
            "activities": activities.get(user_id, 0),
            "comments": comments.get(user_id, 0),
            "likes": likes.get(user_id, 0),
        }
        for user_id in ids
    }

def list_users(
        db: Session,
        page: int,
        limit: int,
        search: Optional[str] = None,
        role: Optional[Role] = None,
        include_inactive: bool = False
) -> Tuple[List[User], int]:
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active.is_(True))
    if search:
        query = query.filter(or_(
            User.first_name.icontains(search, autoescape=True),
            User.last_name.icontains(search, autoescape=True),
            User.username.icontains(search, autoescape=True),
            User.email.icontains(search, autoescape=True),
        ))
    if role:
        query = query.filter(User.role == role)

    total = query.count()
    skip = (page - 1) * limit
    users = query.order_by(User.created_at.desc(), User.id).offset(skip).limit(limit).all()
    return users, total

def get_recent_activities(db: Session, user_id: str, limit: int = 10) -> List[Activity]:
    return db.query(Activity).filter(Activity.author_id == user_id) \
        .order_by(Activity.created_at.desc()).limit(limit).all()

def update_role(db: Session, user: User, role: Role) -> User:
    user.role = role
    db.commit()
    db.refresh(user)
    return user

def set_active(db: Session, user: User, is_active: bool) -> User:
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user
