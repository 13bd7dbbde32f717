"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seed data shared by the model and route tests
- Auth headers for an admin (u1) and a regular user (u2)
"""

import os

# Must be set before the app reads its settings
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("SECRET_KEY", "jobly-test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.crud import company as company_crud
from app.crud import job as job_crud
from app.crud import technology as technology_crud
from app.crud import user as user_crud
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TECHNOLOGIES = ["python", "javascript", "react", "perl", "angular"]


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seed(db_session):
    """
    Shared data set:

    - technologies: python, javascript, react, perl, angular
    - companies c1 (1 employee), c2 (2), c3 (3)
    - jobs j1(c1, 20000, 0), j2(c1, 40000, 0.8), j3(c2, 60000, 0), j4(c3, 80000, 0.4)
    - users u1 (admin), u2, u3 with passwords password1..3
    - u1 applied to j1, interested in j2

    Returns a dict of job ids keyed by title.
    """
    for name in TECHNOLOGIES:
        technology_crud.create(db_session, name)

    for n in (1, 2, 3):
        company_crud.create(
            db_session,
            handle=f"c{n}",
            name=f"C{n}",
            num_employees=n,
            description=f"Desc{n}",
            logo_url=f"http://c{n}.img",
        )

    jobs = {}
    for title, salary, equity, handle, technology in [
        ("j1", 20000, 0, "c1", ["python", "javascript", "react"]),
        ("j2", 40000, 0.8, "c1", ["python", "javascript"]),
        ("j3", 60000, 0, "c2", ["perl", "javascript", "angular"]),
        ("j4", 80000, 0.4, "c3", None),
    ]:
        data = {"title": title, "salary": salary, "equity": equity, "companyHandle": handle}
        if technology is not None:
            data["technology"] = technology
        jobs[title] = job_crud.create(db_session, data)["id"]

    for n, is_admin, technology in [
        (1, True, ["python", "javascript", "react"]),
        (2, False, ["python", "perl", "angular"]),
        (3, False, None),
    ]:
        user_crud.register(db_session, {
            "username": f"u{n}",
            "password": f"password{n}",
            "firstName": f"U{n}F",
            "lastName": f"U{n}L",
            "email": f"user{n}@user.com",
            "isAdmin": is_admin,
            "technology": technology,
        })

    user_crud.apply_for_job(db_session, "u1", jobs["j1"], "applied")
    user_crud.apply_for_job(db_session, "u1", jobs["j2"], "interested")

    return jobs


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """Bearer header for u1 (admin)."""
    token = create_access_token(data={"sub": "u1", "is_admin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    """Bearer header for u2 (not admin)."""
    token = create_access_token(data={"sub": "u2", "is_admin": False})
    return {"Authorization": f"Bearer {token}"}
