# tests/conftest.py
from __future__ import annotations

import logging
import os
import sys

import pytest
from fastapi.testclient import TestClient

from database import SchoolStore
from main import create_app
from session import Session
from schemas import SessionUser

PASSWORD = "password123"
ADMIN_EMAIL = "admin@school.com"
TEACHER_EMAIL = "sarah.johnson@school.edu"      # resolves to Teacher 1
STUDENT_EMAIL = "emma.thompson@student.edu"     # resolves to Student 1
ORPHAN_TEACHER_EMAIL = "teacher@school.com"     # no Teacher record
ORPHAN_STUDENT_EMAIL = "student@school.com"     # no Student record


@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """Route test logs to stdout so they show under pytest -s."""
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
               for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


@pytest.fixture
def store() -> SchoolStore:
    return SchoolStore.seeded()


@pytest.fixture
def session() -> Session:
    return Session()


def user_for(email: str) -> SessionUser:
    s = Session()
    assert s.login(email, PASSWORD)
    return s.current_user


@pytest.fixture
def admin() -> SessionUser:
    return user_for(ADMIN_EMAIL)


@pytest.fixture
def teacher() -> SessionUser:
    return user_for(TEACHER_EMAIL)


@pytest.fixture
def student() -> SessionUser:
    return user_for(STUDENT_EMAIL)


@pytest.fixture
def app():
    return create_app(seeded=True)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    def _login(email: str, password: str = PASSWORD):
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return r.json()
    return _login
