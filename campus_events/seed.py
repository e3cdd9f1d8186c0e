"""Populate a database with default categories, sample users and activities.

Run with ``python -m campus_events.seed``. Rows whose unique key already
exists are left alone, so the script can be re-run safely.
"""
import logging
import os
from datetime import timedelta

from sqlalchemy.orm import Session

from campus_events.db.base import Base
from campus_events.db.models import Activity, ActivityStatus, Category, Role, User
from campus_events.db.session import SessionLocal, engine
from campus_events.security.auth import get_password_hash
from campus_events.utils.dates import utcnow

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"name": "Sports", "description": "Athletic events, games, and sports activities", "color": "#FF6B6B", "icon": "sports"},
    {"name": "Academic", "description": "Lectures, workshops, and educational events", "color": "#4ECDC4", "icon": "academic"},
    {"name": "Social", "description": "Social gatherings, parties, and community events", "color": "#45B7D1", "icon": "social"},
    {"name": "Cultural", "description": "Art shows, concerts, and cultural celebrations", "color": "#F7DC6F", "icon": "cultural"},
    {"name": "Community Service", "description": "Volunteer work and community outreach", "color": "#BB8FCE", "icon": "volunteer"},
    {"name": "Food & Dining", "description": "Food events, dining experiences, and culinary activities", "color": "#F8C471", "icon": "food"},
]

USERS = [
    {"email": "admin@campus.edu", "username": "admin", "first_name": "Admin", "last_name": "User", "role": Role.ADMIN},
    {"email": "senate@campus.edu", "username": "student_senate", "first_name": "Student", "last_name": "Senate", "role": Role.STUDENT_SENATE},
    {"email": "john.doe@campus.edu", "username": "johndoe", "first_name": "John", "last_name": "Doe", "role": Role.STUDENT},
    {"email": "jane.smith@campus.edu", "username": "janesmith", "first_name": "Jane", "last_name": "Smith", "role": Role.STUDENT},
]

# (title, description, location, category, author username, days from now, hours long, tags)
ACTIVITIES = [
    ("Intramural Basketball Tournament", "Sign up your team for the spring intramural tournament.",
     "Lund Center", "Sports", "johndoe", 3, 4, ["basketball", "intramural"]),
    ("Guest Lecture: Climate Science", "A visiting professor discusses recent climate research.",
     "Science Hall 101", "Academic", "student_senate", 5, 2, ["lecture", "science"]),
    ("Spring Formal", "Annual spring dance hosted by Student Senate.",
     "Campus Center Ballroom", "Social", "student_senate", 14, 4, ["dance", "formal"]),
    ("International Food Festival", "Taste dishes from student cultural organizations.",
     "Courtyard", "Food & Dining", "janesmith", 7, 3, ["food", "culture"]),
    ("Community Garden Cleanup", "Help prepare the community garden for planting season.",
     "Community Garden", "Community Service", "janesmith", 10, 3, ["volunteer", "outdoors"]),
]

SEED_PASSWORD = os.getenv("SEED_PASSWORD", "password123")


def seed_categories(db: Session):
    for data in CATEGORIES:
        if db.query(Category).filter(Category.name == data["name"]).first():
            continue
        db.add(Category(**data))
    db.commit()


def seed_users(db: Session):
    password_hash = get_password_hash(SEED_PASSWORD)
    for data in USERS:
        exists = db.query(User).filter(
            (User.email == data["email"]) | (User.username == data["username"])
        ).first()
        if exists:
            continue
        db.add(User(password_hash=password_hash, **data))
    db.commit()


def seed_activities(db: Session):
    now = utcnow().replace(minute=0, second=0, microsecond=0)
    for title, description, location, category_name, username, days, hours, tags in ACTIVITIES:
        if db.query(Activity).filter(Activity.title == title).first():
            continue
        category = db.query(Category).filter(Category.name == category_name).first()
        author = db.query(User).filter(User.username == username).first()
        start_time = now + timedelta(days=days)
        db.add(Activity(
            title=title,
            description=description,
            location=location,
            start_time=start_time,
            end_time=start_time + timedelta(hours=hours),
            category_id=category.id,
            author_id=author.id,
            status=ActivityStatus.UPCOMING,
            tags=tags
        ))
    db.commit()


def main():
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_categories(db)
        seed_users(db)
        seed_activities(db)
        logger.info("Database seeded")
    finally:
        db.close()


if __name__ == "__main__":
    main()
