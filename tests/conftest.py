import os

os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, init_db
from achievements.achievements_init import init_achievements
from main import app


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    init_achievements(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


def register(client, username, role="student", password="password123"):
    resp = client.post("/api/register", json={
        "username": username, "password": password, "role": role})
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


SAMPLE_QUIZ = {
    "title": "Python basics",
    "time_limit": 10,
    "questions": [
        {"type": "MCQ", "text": "Which keyword defines a function?",
         "options": ["def", "fun", "lambda"], "correct_answer": "def"},
        {"type": "TrueFalse", "text": "Tuples are mutable.",
         "correct_answer": "false"},
        {"type": "ShortAnswer", "text": "Name the package installer.",
         "correct_answer": "pip"},
        {"type": "MCQ", "text": "Which one is a list literal?",
         "options": ["()", "[]", "{}"], "correct_answer": "[]"},
    ]
}

ALL_CORRECT = [
    {"question_id": 1, "answer": "def"},
    {"question_id": 2, "answer": "False"},
    {"question_id": 3, "answer": " PIP "},
    {"question_id": 4, "answer": "[]"},
]
