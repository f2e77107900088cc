"""Shared fixtures: an in-memory Mongo, an HTTP client over the app and token helpers."""
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from config import JWT_ALGORITHM, JWT_SECRET
from database import get_db, init_db
from main import app
from models.question import Question


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["upsc_prep_test"]
    await init_db(database)
    return database


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id="user-1"):
        token = jwt.encode({"sub": user_id}, JWT_SECRET, algorithm=JWT_ALGORITHM)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def make_questions():
    """Build ``count`` questions; ``subjects`` and ``correct`` cycle over the list."""
    def _make(count, subjects=("History",), correct=("A",), difficulty="easy"):
        return [
            Question(
                id=f"q{i}",
                question=f"Question {i}?",
                options=["first", "second", "third", "fourth"],
                correctAnswer=correct[i % len(correct)],
                explanation=f"Explanation {i}.",
                subject=subjects[i % len(subjects)],
                difficulty=difficulty,
            )
            for i in range(count)
        ]
    return _make


@pytest.fixture
def set_subscription(db):
    async def _set(user_id, tier, expires_in_days=None):
        doc = {"userId": user_id, "tier": tier}
        if expires_in_days is not None:
            doc["expiresAt"] = (datetime.utcnow() + timedelta(days=expires_in_days)).isoformat()
        await db.userSubscriptions.update_one({"userId": user_id}, {"$set": doc}, upsert=True)
    return _set
