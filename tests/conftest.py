import random

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from config import JWT_ALGORITHM, JWT_SECRET
from database import get_db
from main import app


def make_question(**fields):
    question = {
        "_id": ObjectId(),
        "education_board": "CBSE",
        "class": "10",
        "subject": "Mathematics",
        "topic": "Algebra",
        "difficulty_level": "medium",
        "q_type": "MCQ",
        "question": "Solve $x + 2 = 5$",
        "solution": "$x = 3$",
        "DPS_approved": True,
    }
    question.update(fields)
    return question


def make_user(user_type="student", **fields):
    user = {
        "_id": ObjectId(),
        "username": f"{user_type}-{ObjectId()}",
        "first_name": "Test",
        "last_name": user_type.title(),
        "education_board": "CBSE",
        "type": user_type,
        "password": "hashed",
    }
    user.update(fields)
    return user


def auth_headers(user):
    token = jwt.encode({"userId": str(user["_id"])}, JWT_SECRET, algorithm=JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def question_factory():
    return make_question


@pytest.fixture
def db():
    return AsyncMongoMockClient()["question_bank_test"]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    async def _create(user_type="student", **fields):
        user = make_user(user_type, **fields)
        await db.Users.insert_one(user)
        return user
    return _create


@pytest.fixture
def login():
    return auth_headers
