"""
Shared fixtures: in-memory database, users, quiz factory and API client
"""
import os

# Must be set before quiz_platform is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEED_DEFAULT_USERS"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RATE_LIMIT_PER_HOUR"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

import quiz_platform.models  # noqa: F401
from quiz_platform.api.deps import get_clock
from quiz_platform.database import Base, SessionLocal, engine
from quiz_platform.main import app
from quiz_platform.models import User, UserRole
from quiz_platform.schemas.quiz import QuizRequest
from quiz_platform.services.quiz_service import quiz_service
from quiz_platform.utils.rate_limiter import rate_limiter

START_TIME = datetime(2026, 3, 2, 9, 0, 0)


def sample_questions():
    return [
        {
            "question_text": "Which keyword defines a function?",
            "type": "MULTIPLE_CHOICE",
            "points": 3,
            "options": [
                {"option_text": "func", "is_correct": False},
                {"option_text": "def", "is_correct": True},
                {"option_text": "lambda", "is_correct": False},
            ],
        },
        {
            "question_text": "Tuples are immutable.",
            "type": "TRUE_FALSE",
            "points": 2,
            "options": [
                {"option_text": "True", "is_correct": True},
                {"option_text": "False", "is_correct": False},
            ],
        },
        {
            "question_text": "Explain what a generator is.",
            "type": "SHORT_ANSWER",
        },
    ]


def quiz_payload(**overrides):
    payload = {
        "title": "Python Basics",
        "description": "Core language questions",
        "duration": 10,
        "questions": sample_questions(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _add_user(db, email, name, role):
    user = User(email=email, name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _add_user(db, "admin@example.com", "Ada Admin", UserRole.ADMIN)


@pytest.fixture
def candidate(db):
    return _add_user(db, "cand@example.com", "Cam Candidate", UserRole.CANDIDATE)


@pytest.fixture
def other_candidate(db):
    return _add_user(db, "other@example.com", "Olu Other", UserRole.CANDIDATE)


@pytest.fixture
def make_quiz(db, admin):
    """Create a quiz through the authoring service; returns the admin view"""

    def _make(**overrides):
        return quiz_service.create_quiz(db, QuizRequest(**quiz_payload(**overrides)), admin.email)

    return _make


class FixedClock:
    """Settable 'now' for the API clock dependency"""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FixedClock(START_TIME)


@pytest.fixture
def client(clock):
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)


def auth(user):
    return {"X-User-Email": user.email}
