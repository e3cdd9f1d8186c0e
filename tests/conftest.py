import itertools
import os
from datetime import datetime, timedelta

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SSM_PARAMETER_PREFIX", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campus_events.db.base import Base
from campus_events.db.models import Activity, ActivityStatus, Category, Comment, Like, Role, User
from campus_events.db.session import build_engine, get_db
from campus_events.security.auth import create_access_token, get_password_hash
from main import app

DEFAULT_PASSWORD = "password123"
BASE_START = datetime(2030, 1, 1, 10, 0, 0)


@pytest.fixture()
def session_factory():
    """A fresh in-memory database per test, shared by every session through StaticPool."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _persist(session_factory, obj):
    session = session_factory()
    try:
        session.add(obj)
        session.commit()
        session.refresh(obj)
        session.expunge(obj)
        return obj
    finally:
        session.close()


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash(DEFAULT_PASSWORD)


@pytest.fixture()
def make_user(session_factory, password_hash):
    counter = itertools.count(1)

    def _make_user(role=Role.STUDENT, is_active=True, **overrides):
        n = next(counter)
        data = {
            "email": f"user{n}@campus.edu",
            "username": f"user{n}",
            "first_name": "Test",
            "last_name": f"User{n}",
            "password_hash": password_hash,
            "role": role,
            "is_active": is_active,
        }
        data.update(overrides)
        return _persist(session_factory, User(**data))

    return _make_user


@pytest.fixture()
def make_category(session_factory):
    counter = itertools.count(1)

    def _make_category(**overrides):
        n = next(counter)
        data = {
            "name": f"Category {n}",
            "description": f"Description {n}",
            "color": "#4ECDC4",
            "icon": "academic",
        }
        data.update(overrides)
        return _persist(session_factory, Category(**data))

    return _make_category


@pytest.fixture()
def make_activity(session_factory):
    counter = itertools.count(1)

    def _make_activity(author, category, **overrides):
        n = next(counter)
        start_time = overrides.pop("start_time", BASE_START + timedelta(days=n))
        data = {
            "title": f"Activity {n}",
            "description": f"Details for activity {n}",
            "location": "Campus Center",
            "start_time": start_time,
            "end_time": start_time + timedelta(hours=2),
            "category_id": category.id,
            "author_id": author.id,
            "status": ActivityStatus.UPCOMING,
            "tags": [],
        }
        data.update(overrides)
        tags = data.pop("tags")
        activity = Activity(**data)
        activity.tags = tags
        session = session_factory()
        try:
            session.add(activity)
            session.commit()
            return session.query(Activity).filter(Activity.id == activity.id).one()
        finally:
            session.close()

    return _make_activity


@pytest.fixture()
def add_like(session_factory):
    def _add_like(user, activity):
        return _persist(session_factory, Like(user_id=user.id, activity_id=activity.id))

    return _add_like


@pytest.fixture()
def add_comment(session_factory):
    def _add_comment(user, activity, content="Looks fun!"):
        return _persist(session_factory, Comment(author_id=user.id, activity_id=activity.id, content=content))

    return _add_comment


@pytest.fixture()
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers


@pytest.fixture()
def student(make_user):
    return make_user(role=Role.STUDENT, username="student", email="student@campus.edu")


@pytest.fixture()
def other_student(make_user):
    return make_user(role=Role.STUDENT, username="other", email="other@campus.edu")


@pytest.fixture()
def senate(make_user):
    return make_user(role=Role.STUDENT_SENATE, username="senate", email="senate@campus.edu")


@pytest.fixture()
def admin(make_user):
    return make_user(role=Role.ADMIN, username="admin", email="admin@campus.edu")


@pytest.fixture()
def category(make_category):
    return make_category(name="Sports", description="Athletic events", color="#FF6B6B", icon="sports")
