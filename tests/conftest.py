import os
import tempfile

# Settings are read at import time, so point them at a throwaway database first
_TMP_DIR = tempfile.mkdtemp(prefix="exam_portal_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from exam_portal.database import Base, SessionLocal, engine, init_db
from exam_portal.main import app


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    init_db()
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


def question_payload(**overrides):
    payload = {
        "questionText": "Capital of France?",
        "type": "mcq",
        "options": ["Paris", "Rome", "Madrid"],
        "correctAnswer": "Paris",
        "assignedToEmails": ["alice@example.com"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_question(client):
    def _make(**overrides):
        response = client.post("/api/questions/questions", json=question_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()
    return _make
