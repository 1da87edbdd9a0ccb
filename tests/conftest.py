"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Staff accounts and auth headers
- Evaluation payloads
"""

import os

# Must be set before app.core.config is imported
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, Database, get_db
from app.core.security import get_password_hash
from app.models.department import Department
from app.models.user import User, UserRole
from main import app
from tests.utils import DEFAULT_PASSWORD, auth_headers, score_payload


# Use in-memory SQLite for testing (fast, isolated)
test_database = Database("sqlite:///:memory:")

# Hashing with bcrypt is slow; every fixture user shares one hash
DEFAULT_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    test_database.create_all()
    db = test_database.session()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_database.engine)


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
def department(db_session):
    """Department without a manager yet; the admin fixture claims it."""
    dept = Department(name="IT Department")
    db_session.add(dept)
    db_session.commit()
    return dept


@pytest.fixture
def make_user(db_session, department):
    """Factory creating users in the shared test department."""
    counter = {"n": 0}

    def _make_user(role=UserRole.STAFF, **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            employee_id=f"EMP{n:03d}",
            name_en=f"User {n}",
            name_kh=f"អ្នកប្រើ {n}",
            email=f"user{n}@example.com",
            hashed_password=DEFAULT_PASSWORD_HASH,
            role=role,
            position="Officer",
            department_id=department.id,
        )
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin_user(make_user, department, db_session):
    admin = make_user(role=UserRole.ADMIN, name_en="Admin User", email="admin@example.com")
    department.manager_id = admin.id
    db_session.commit()
    return admin


@pytest.fixture
def staff_user(make_user):
    return make_user(role=UserRole.STAFF, name_en="Test User", email="staff@example.com")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def staff_headers(staff_user):
    return auth_headers(staff_user)


@pytest.fixture
def evaluation_payload(staff_user, admin_user):
    """Valid create request: the admin evaluates the staff member."""
    return {
        "employee_id": str(staff_user.id),
        "evaluator_id": str(admin_user.id),
        "type": "SUPERVISOR",
        "month": 1,
        "year": 2024,
        "comments": "Good performance overall",
        **score_payload(40),
    }
