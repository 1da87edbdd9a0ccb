"""
Tests for staff account endpoints.
"""

import uuid

from app.core.security import verify_password
from app.models.user import User, UserRole


def user_payload(department, **overrides):
    payload = {
        "employee_id": "EMP100",
        "name_en": "New Hire",
        "name_kh": "បុគ្គលិកថ្មី",
        "email": "newhire@example.com",
        "password": "welcome1",
        "role": "STAFF",
        "position": "Accountant",
        "department_id": str(department.id),
        "gender": "FEMALE",
    }
    payload.update(overrides)
    return payload


class TestListUsers:
    """Test user listing"""

    def test_list(self, client, staff_headers, admin_user):
        response = client.get("/api/v1/users/", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        assert all("hashed_password" not in u for u in data)

    def test_role_filter_is_case_insensitive(self, client, admin_headers, staff_user):
        response = client.get("/api/v1/users/?role=staff", headers=admin_headers)

        data = response.json()
        assert [u["email"] for u in data] == ["staff@example.com"]

    def test_unknown_role(self, client, admin_headers):
        response = client.get("/api/v1/users/?role=wizard", headers=admin_headers)

        assert response.status_code == 400


class TestCreateUser:
    """Test user creation"""

    def test_create(self, client, admin_headers, department, db_session):
        response = client.post("/api/v1/users/", json=user_payload(department), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["employee_id"] == "EMP100"
        assert data["department"]["name"] == "IT Department"
        assert data["join_date"] is not None

        user = db_session.query(User).filter(User.email == "newhire@example.com").first()
        assert user.hashed_password != "welcome1"
        assert verify_password("welcome1", user.hashed_password)

    def test_duplicate_email(self, client, admin_headers, department, staff_user):
        response = client.post(
            "/api/v1/users/",
            json=user_payload(department, email="staff@example.com"),
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already in use"

    def test_duplicate_employee_id(self, client, admin_headers, department, staff_user):
        response = client.post(
            "/api/v1/users/",
            json=user_payload(department, employee_id=staff_user.employee_id),
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Employee ID already in use"

    def test_unknown_department(self, client, admin_headers, department):
        response = client.post(
            "/api/v1/users/",
            json=user_payload(department, department_id=str(uuid.uuid4())),
            headers=admin_headers
        )

        assert response.status_code == 400

    def test_short_password(self, client, admin_headers, department):
        response = client.post(
            "/api/v1/users/",
            json=user_payload(department, password="abc"),
            headers=admin_headers
        )

        assert response.status_code == 422

    def test_staff_cannot_create(self, client, staff_headers, department):
        response = client.post("/api/v1/users/", json=user_payload(department), headers=staff_headers)

        assert response.status_code == 403


class TestUpdateUser:
    """Test user updates"""

    def test_update_keeps_password_when_omitted(self, client, admin_headers, department, staff_user, db_session):
        old_hash = staff_user.hashed_password
        payload = user_payload(
            department,
            employee_id=staff_user.employee_id,
            email=staff_user.email,
            role="HR",
        )
        del payload["password"]

        response = client.put(f"/api/v1/users/{staff_user.id}", json=payload, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "HR"
        db_session.refresh(staff_user)
        assert staff_user.role == UserRole.HR
        assert staff_user.hashed_password == old_hash

    def test_blank_password_leaves_hash(self, client, admin_headers, department, staff_user, db_session):
        old_hash = staff_user.hashed_password
        payload = user_payload(
            department,
            employee_id=staff_user.employee_id,
            email=staff_user.email,
            password="",
        )

        response = client.put(f"/api/v1/users/{staff_user.id}", json=payload, headers=admin_headers)

        assert response.status_code == 200
        db_session.refresh(staff_user)
        assert staff_user.hashed_password == old_hash

    def test_update_to_taken_email(self, client, admin_headers, department, staff_user, admin_user):
        payload = user_payload(department, employee_id=staff_user.employee_id, email=admin_user.email)

        response = client.put(f"/api/v1/users/{staff_user.id}", json=payload, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already in use"


class TestDeleteUser:
    """Test user deletion"""

    def test_delete(self, client, admin_headers, staff_user, db_session):
        response = client.delete(f"/api/v1/users/{staff_user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert db_session.query(User).filter(User.email == "staff@example.com").first() is None

    def test_delete_with_evaluations_refused(self, client, admin_headers, staff_user, evaluation_payload):
        client.post("/api/v1/evaluations/", json=evaluation_payload, headers=admin_headers)

        response = client.delete(f"/api/v1/users/{staff_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete user with existing evaluations"

    def test_delete_not_found(self, client, admin_headers):
        response = client.delete(f"/api/v1/users/{uuid.uuid4()}", headers=admin_headers)

        assert response.status_code == 404
