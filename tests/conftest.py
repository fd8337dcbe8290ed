"""
Shared fixtures: a throwaway SQLite database, auth env vars and an exam factory.
"""

import json
import os
import tempfile
from pathlib import Path

# Must be set before db.py is imported anywhere
_TMP = Path(tempfile.mkdtemp(prefix="ielts-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"

import pytest  # noqa: E402

from db import Base, SessionLocal, engine  # noqa: E402
from models import Exam, SkillItem  # noqa: E402

ADMIN_TOKEN = "admin-secret"
API_KEY = "client-key"


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture(autouse=True)
def auth_env(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", ADMIN_TOKEN)
    monkeypatch.setenv("GRADING_API_KEY", API_KEY)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_exam(db):
    """
    make_exam("reading", [("reading", ["a", "b"]), ...]) -> Exam

    Each item is (kind, canonical answers); a str instead of a list is stored
    verbatim as correct_answer (for malformed-JSON cases).
    """

    def _make(exam_type, items=(), name="Practice test"):
        exam = Exam(name=name, type=exam_type)
        for order, (kind, answers) in enumerate(items):
            stored = answers if isinstance(answers, str) or answers is None else json.dumps(answers)
            exam.items.append(SkillItem(kind=kind, display_order=order, correct_answer=stored))
        db.add(exam)
        db.commit()
        return exam

    return _make


def answer_text(*groups):
    """answer_text((item_id, ["x", "y"]), ...) -> JSON payload string."""
    return json.dumps([{"skillId": sid, "answers": list(ans)} for sid, ans in groups])
