"""Pytest configuration and shared fixtures."""

import os
from datetime import date, time, timedelta

# settings are read once at import time, so configure them first
os.environ.setdefault("SECRET_KEY", "test-secret-key-" + "x" * 64)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.database import Base, get_db
from app.main import app
from app.models.event_models import Event
from app.models.project_models import DifficultyLevel, Project
from app.models.user_models import User, UserRole
from app.services.token_service import TokenKind, get_token_codec
from app.utils.clock import utcnow
from app.utils.hashing import get_password_hash

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def engine(tmp_path):
    # file database so several threads can share it
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
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


@pytest.fixture
def codec():
    return get_token_codec()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(
        username: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.STUDENT,
        is_active: bool = True,
        **fields,
    ) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = User(
            username=username,
            email=email or f"{username}@campus.edu",
            password_hash=get_password_hash(password),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"User{counter['n']}"),
            role=role,
            is_active=is_active,
            email_verified=False,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_event(db):
    def _make_event(organizer: User, **fields) -> Event:
        values = {
            "title": "Hack Night",
            "description": "Build something in one evening",
            "category": "Workshop",
            "event_date": date.today() + timedelta(days=7),
            "start_time": time(18, 0),
            "end_time": time(22, 0),
            "location": "Main Hall",
            "max_attendees": 10,
            "current_attendees": 0,
            "tags": [],
            "is_featured": False,
            "is_active": True,
        }
        values.update(fields)
        event = Event(organizer_id=organizer.id, **values)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_project(db):
    def _make_project(owner: User, **fields) -> Project:
        values = {
            "title": "Campus Map",
            "description": "Interactive map of the campus",
            "category": "Web",
            "difficulty_level": DifficultyLevel.BEGINNER,
            "required_skills": ["python"],
            "tags": ["maps"],
            "is_active": True,
            "likes_count": 0,
            "comments_count": 0,
            "views_count": 0,
        }
        values.update(fields)
        project = Project(owner_id=owner.id, **values)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make_project


@pytest.fixture
def auth_headers(codec):
    def _auth_headers(user: User) -> dict:
        token = codec.issue(user.id, user.role, TokenKind.ACCESS, now=utcnow(), email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
