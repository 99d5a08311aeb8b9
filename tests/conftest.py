import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.security import create_access_token
from app.db.init_db import create_all_tables
from app.db.session import build_engine, get_db
from app.main import app
from app.modules.user_management.models.user import User
from app.modules.workouts.services.workout import create_workout


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    assert create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
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
def make_user(db):
    def _make_user(first_name, last_name="", email=None, nickname=None,
                   display_preference="firstName", avatar_url=None):
        user = User(
            id=str(uuid.uuid4()),
            email=email or f"{first_name.lower()}.{uuid.uuid4().hex[:6]}@example.com",
            first_name=first_name,
            last_name=last_name,
            nickname=nickname,
            display_preference=display_preference,
            avatar_url=avatar_url,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_workout(db):
    def _make_workout(user, start_time, title=None, activities=None):
        if isinstance(start_time, str):
            start_time = datetime.fromisoformat(start_time)
        return create_workout(
            db,
            user_id=user.id,
            start_time=start_time,
            title=title,
            activities=activities or [],
        )

    return _make_workout


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
