"""
Unit tests for authentication endpoints.

Tests:
- Login
- Token refresh
- Current user profile
- Token validation
"""

import uuid
from datetime import timedelta

from app.core.security import create_access_token, create_refresh_token
from tests.utils import DEFAULT_PASSWORD


class TestLogin:
    """Test login endpoint"""

    def test_login_success(self, client, admin_user, db_session):
        """Test successful login returns tokens and the profile"""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "admin@example.com"
        assert data["user"]["role"] == "ADMIN"
        assert "hashed_password" not in data["user"]

        db_session.refresh(admin_user)
        assert admin_user.last_login_at is not None

    def test_login_wrong_password(self, client, admin_user):
        """Test login with wrong password fails"""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@example.com", "password": "WrongPassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    def test_login_unknown_email(self, client):
        """Test login with unknown email fails the same way"""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401

    def test_login_inactive_user(self, client, make_user):
        """Test inactive accounts cannot log in"""
        make_user(email="gone@example.com", is_active=False)

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "gone@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 403


class TestTokenRefresh:
    """Test token refresh endpoint"""

    def test_refresh_success(self, client, staff_user):
        refresh = create_refresh_token(data={"sub": str(staff_user.id)})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(staff_user.id)

    def test_access_token_is_not_a_refresh_token(self, client, staff_user):
        access = create_access_token(data={"sub": str(staff_user.id)})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": access})

        assert response.status_code == 401

    def test_refresh_garbage(self, client):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"})

        assert response.status_code == 401

    def test_refresh_unknown_user(self, client):
        refresh = create_refresh_token(data={"sub": str(uuid.uuid4())})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

        assert response.status_code == 401


class TestCurrentUser:
    """Test /auth/me and token validation"""

    def test_me(self, client, staff_headers):
        response = client.get("/api/v1/auth/me", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "staff@example.com"
        assert data["department"]["name"] == "IT Department"

    def test_invalid_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer invalid"})

        assert response.status_code == 401

    def test_expired_token(self, client, staff_user):
        token = create_access_token(
            data={"sub": str(staff_user.id)},
            expires_delta=timedelta(minutes=-1)
        )

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_refresh_token_rejected_as_access(self, client, staff_user):
        token = create_refresh_token(data={"sub": str(staff_user.id)})

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_deactivated_user(self, client, staff_user, staff_headers, db_session):
        staff_user.is_active = False
        db_session.commit()

        response = client.get("/api/v1/auth/me", headers=staff_headers)

        assert response.status_code == 403
