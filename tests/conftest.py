from __future__ import annotations

import base64
import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# app.db.session builds its engine at import time
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

import app.db.base  # noqa: F401,E402
from app.backend.core.config import Settings  # noqa: E402
from app.backend.main import create_app  # noqa: E402
from app.backend.models.task import Task  # noqa: E402
from app.backend.services.auth_service import Identity  # noqa: E402
from app.backend.services.user_service import create_user  # noqa: E402
from app.db.session import engine  # noqa: E402

TEST_PASSWORD = "correct horse battery staple"


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": "test-secret",
        "auto_create_tables": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def basic_auth(username: str, password: str = TEST_PASSWORD) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


@pytest.fixture(autouse=True)
def _tables():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db():
    with Session(engine) as s:
        yield s


@pytest.fixture
def make_user():
    def _make(username: str, password: str = TEST_PASSWORD, **kwargs) -> Identity:
        with Session(engine) as s:
            user = create_user(
                s,
                username=username,
                email=kwargs.pop("email", f"{username}@example.com"),
                password=password,
                iterations=1000,
                **kwargs,
            )
            return Identity(user_id=user.id, username=user.username, source="test")

    return _make


@pytest.fixture
def seed_task():
    def _seed(
        text: str,
        *,
        user_id: Optional[int] = None,
        due_date: Optional[date] = None,
        completed: bool = False,
        created_at: Optional[datetime] = None,
        category: str = "general",
        description: str = "",
    ) -> int:
        with Session(engine) as s:
            task = Task(
                user_id=user_id,
                text=text,
                description=description,
                due_date=due_date,
                category=category,
                completed=completed,
                created_at=created_at or datetime.now(timezone.utc),
            )
            s.add(task)
            s.commit()
            s.refresh(task)
            return task.id

    return _seed


@pytest.fixture
def load_task():
    def _load(task_id: int) -> Optional[Task]:
        with Session(engine) as s:
            task = s.get(Task, task_id)
            if task is not None:
                s.expunge(task)
            return task

    return _load


@pytest.fixture
def client():
    return TestClient(create_app(make_settings(ownership_enforced=True)))


@pytest.fixture
def open_client():
    return TestClient(create_app(make_settings(ownership_enforced=False)))
