"""
Tests for bulk evaluation import and export.
"""

import pytest
from sqlalchemy import event, text

from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.user import UserRole
from tests.utils import auth_headers, score_payload


def bulk_record(employee_code, evaluator, **overrides):
    record = {
        "employee_id": employee_code,
        "evaluator_id": str(evaluator.id),
        "month": 2,
        "year": 2024,
        "type": "SUPERVISOR",
        "comments": "Imported",
        **score_payload(40),
    }
    record.update(overrides)
    return record


@pytest.fixture
def failing_insert():
    """Make the INSERT of any evaluation commented "fail" hit a database error."""
    def break_insert(mapper, connection, target):
        if target.comments == "fail":
            connection.execute(text("INSERT INTO missing_table VALUES (1)"))

    event.listen(Evaluation, "before_insert", break_insert)
    yield
    event.remove(Evaluation, "before_insert", break_insert)


class TestBulkImport:
    """Test bulk evaluation import"""

    def test_all_records_imported(self, client, admin_headers, admin_user, staff_user, db_session):
        records = [
            bulk_record(staff_user.employee_id, admin_user),
            bulk_record(staff_user.employee_id, admin_user, month=3, **score_payload(50)),
        ]

        response = client.post("/api/v1/evaluations/bulk", json=records, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["successful"] == 2
        assert data["failed"] == 0
        assert data["message"] == "Processed 2 evaluations. 2 successful, 0 failed."

        evaluations = db_session.query(Evaluation).order_by(Evaluation.month).all()
        assert [e.grade for e in evaluations] == ["B", "A"]
        assert all(e.status == EvaluationStatus.PENDING for e in evaluations)
        assert all(e.employee_id == staff_user.id for e in evaluations)

    def test_partial_success(self, client, admin_headers, admin_user, staff_user, db_session):
        records = [
            bulk_record(staff_user.employee_id, admin_user),
            bulk_record("EMP999", admin_user),
            bulk_record(staff_user.employee_id, admin_user, work_quality=51),
        ]

        response = client.post("/api/v1/evaluations/bulk", json=records, headers=admin_headers)

        data = response.json()
        assert data["successful"] == 1
        assert data["failed"] == 2
        assert data["message"] == "Processed 3 evaluations. 1 successful, 2 failed."

        results = data["results"]
        assert [r["index"] for r in results] == [0, 1, 2]
        assert results[0]["success"] is True
        assert results[0]["evaluation_id"] is not None
        assert results[1]["error"] == "Employee with ID EMP999 not found"
        assert "Invalid score values for fields: work_quality" in results[2]["error"]

        assert db_session.query(Evaluation).count() == 1

    def test_database_error_isolated_to_one_record(self, client, admin_headers, admin_user, staff_user, db_session, failing_insert):
        records = [
            bulk_record(staff_user.employee_id, admin_user, month=1),
            bulk_record(staff_user.employee_id, admin_user, month=2, comments="fail"),
            bulk_record(staff_user.employee_id, admin_user, month=3),
        ]

        response = client.post("/api/v1/evaluations/bulk", json=records, headers=admin_headers)

        data = response.json()
        assert data["successful"] == 2
        assert data["failed"] == 1
        assert data["message"] == "Processed 3 evaluations. 2 successful, 1 failed."
        assert data["results"][1]["success"] is False
        assert data["results"][1]["error"].startswith("Database error")

        months = [e.month for e in db_session.query(Evaluation).order_by(Evaluation.month)]
        assert months == [1, 3]

    def test_missing_score_reported(self, client, admin_headers, admin_user, staff_user):
        record = bulk_record(staff_user.employee_id, admin_user)
        del record["other_factors"]

        response = client.post("/api/v1/evaluations/bulk", json=[record], headers=admin_headers)

        result = response.json()["results"][0]
        assert result["success"] is False
        assert result["error"] == "Missing required fields: other_factors"

    def test_non_object_record(self, client, admin_headers):
        response = client.post("/api/v1/evaluations/bulk", json=["not a record"], headers=admin_headers)

        result = response.json()["results"][0]
        assert result["error"] == "Invalid record format. Expected an object."

    def test_invalid_month_reported(self, client, admin_headers, admin_user, staff_user):
        record = bulk_record(staff_user.employee_id, admin_user, month=13)

        response = client.post("/api/v1/evaluations/bulk", json=[record], headers=admin_headers)

        result = response.json()["results"][0]
        assert result["success"] is False
        assert result["error"].startswith("month:")

    def test_non_list_body(self, client, admin_headers):
        response = client.post("/api/v1/evaluations/bulk", json={"employee_id": "EMP001"}, headers=admin_headers)

        assert response.status_code == 400
        assert "Expected an array" in response.json()["detail"]

    def test_empty_list(self, client, admin_headers):
        response = client.post("/api/v1/evaluations/bulk", json=[], headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Processed 0 evaluations. 0 successful, 0 failed."

    def test_staff_forbidden(self, client, staff_headers):
        response = client.post("/api/v1/evaluations/bulk", json=[], headers=staff_headers)

        assert response.status_code == 403

    def test_hr_allowed(self, client, make_user, admin_user, staff_user):
        hr = make_user(role=UserRole.HR, email="hr@example.com")
        records = [bulk_record(staff_user.employee_id, admin_user)]

        response = client.post("/api/v1/evaluations/bulk", json=records, headers=auth_headers(hr))

        assert response.status_code == 200
        assert response.json()["successful"] == 1


class TestBulkExport:
    """Test evaluation export"""

    def test_filter_by_year_and_month(self, client, admin_headers, admin_user, staff_user):
        records = [
            bulk_record(staff_user.employee_id, admin_user, month=1, year=2024),
            bulk_record(staff_user.employee_id, admin_user, month=2, year=2024),
            bulk_record(staff_user.employee_id, admin_user, month=2, year=2023),
        ]
        client.post("/api/v1/evaluations/bulk", json=records, headers=admin_headers)

        by_year = client.get("/api/v1/evaluations/bulk?year=2024", headers=admin_headers).json()
        assert sorted(e["month"] for e in by_year) == [1, 2]

        by_month = client.get("/api/v1/evaluations/bulk?year=2024&month=2", headers=admin_headers).json()
        assert len(by_month) == 1
        assert by_month[0]["employee"]["employee_id"] == staff_user.employee_id
        assert by_month[0]["percentage"] == 80

    def test_staff_forbidden(self, client, staff_headers):
        response = client.get("/api/v1/evaluations/bulk?year=2024", headers=staff_headers)

        assert response.status_code == 403
