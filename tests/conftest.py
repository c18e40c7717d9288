"""Shared fixtures: stores, seeded users, and an API client bound to a fresh store."""

import itertools

import pytest
from fastapi.testclient import TestClient

from placement_portal.db import get_store
from placement_portal.db.memory import MemoryStore
from placement_portal.db.sql import SqlStore
from placement_portal.main import app
from placement_portal.models.entities import Role, StudentProfile, User
from placement_portal.utils.timestamp import utcnow

_emails = itertools.count(1)


# ============ STORES ============

@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every service test runs once per backend."""
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SqlStore("sqlite://")
    yield s
    s.close()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture(params=["memory", "sql-file"])
def threaded_store(request, tmp_path):
    """Stores that real threads can share (in-memory SQLite pins a single connection)."""
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SqlStore(f"sqlite:///{tmp_path / 'placement.db'}")
    yield s
    s.close()


# ============ DIRECT SEEDING ============

def _add_user(store, role: Role, name: str = "") -> User:
    """Insert a user directly (no password, cannot log in)."""
    return store.users.add(User(name=name, email=f"user{next(_emails)}@example.com", role=role))


def _add_student(store, name="Asha", branch="CS", cgpa=8.0, backlogs=0, skills=None) -> User:
    user = _add_user(store, Role.student, name=name)
    now = utcnow()
    store.profiles.save(StudentProfile(
        user_id=user.id,
        branch=branch,
        cgpa=cgpa,
        current_backlogs=backlogs,
        skills=skills or [],
        created_at=now,
        updated_at=now,
    ))
    return user


@pytest.fixture
def make_user():
    return _add_user


@pytest.fixture
def make_student():
    return _add_student


# ============ API ============

@pytest.fixture
def api_store():
    return MemoryStore()


@pytest.fixture
def client(api_store):
    app.dependency_overrides[get_store] = lambda: api_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _register(client, role: str, email: str, name: str = "", password: str = "secret123") -> dict:
    """Register through the API and return the body plus ready-made auth headers."""
    response = client.post("/api/auth/register", json={
        "name": name, "email": email, "password": password, "role": role,
    })
    assert response.status_code == 201, response.text
    body = response.json()
    body["headers"] = {"Authorization": f"Bearer {body['token']}"}
    return body


@pytest.fixture
def register(client):
    return lambda role, email, name="", password="secret123": _register(client, role, email, name, password)


@pytest.fixture
def tpo(register):
    return register("TPO", "tpo@college.edu", name="Placement Officer")


@pytest.fixture
def student(register):
    return register("STUDENT", "riya@college.edu", name="Riya")


@pytest.fixture
def alumni(register):
    return register("ALUMNI", "karan@alumni.edu", name="Karan")
