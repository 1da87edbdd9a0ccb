"""
Script to load demo data into an empty database.

Creates:
1. The "IT Department", managed by the admin account
2. An admin (admin@example.com / admin123) and a staff member (user@example.com / user123)
3. Two supervisor evaluations of the staff member for January and February 2024

Run this script from the project root after "alembic upgrade head":
    python seed_db.py
"""

import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.core.database import Database
from app.core.security import get_password_hash
from app.crud import evaluation as evaluation_crud
from app.models.department import Department
from app.models.evaluation import EvaluationStatus, EvaluationType
from app.models.user import Gender, User, UserRole
from app.services.scoring import SCORE_FIELDS

# Sub-scores per evaluation, in SCORE_FIELDS order
DEMO_EVALUATIONS = [
    {
        "month": 1,
        "scores": [42.5, 40, 42.5, 37.5, 45, 40, 45, 37.5, 42.5, 40],
        "comments": "Good performance overall",
        "status": EvaluationStatus.COMPLETE,
    },
    {
        "month": 2,
        "scores": [40] * len(SCORE_FIELDS),
        "comments": "",
        "status": EvaluationStatus.PENDING,
    },
]


def seed_db():
    """Insert the demo department, users and evaluations."""

    database = Database(settings.DATABASE_URL)
    db = database.session()

    try:
        if db.query(User).filter(User.email == "admin@example.com").first():
            print("Demo data already present. Nothing to do.")
            return

        department = Department(name="IT Department")
        db.add(department)
        db.flush()
        print(f"Created department: {department.name}")

        admin = User(
            employee_id="EMP001",
            name_en="Admin User",
            name_kh="អ្នកគ្រប់គ្រង",
            gender=Gender.MALE,
            role=UserRole.ADMIN,
            position="System Administrator",
            email="admin@example.com",
            hashed_password=get_password_hash("admin123"),
            department_id=department.id,
        )
        staff = User(
            employee_id="EMP002",
            name_en="Test User",
            name_kh="អ្នកប្រើប្រាស់",
            gender=Gender.FEMALE,
            role=UserRole.STAFF,
            position="Software Developer",
            email="user@example.com",
            hashed_password=get_password_hash("user123"),
            department_id=department.id,
        )
        db.add_all([admin, staff])
        db.flush()

        department.manager_id = admin.id
        print(f"Created admin user: {admin.email}")
        print(f"Created staff user: {staff.email}")

        for demo in DEMO_EVALUATIONS:
            evaluation = evaluation_crud.build(
                scores=dict(zip(SCORE_FIELDS, demo["scores"])),
                employee_id=staff.id,
                evaluator_id=admin.id,
                evaluation_type=EvaluationType.SUPERVISOR,
                month=demo["month"],
                year=2024,
                comments=demo["comments"],
                status=demo["status"],
            )
            db.add(evaluation)
            print(f"  ✓ Evaluation {demo['month']}/2024: {evaluation.percentage}% ({evaluation.grade})")

        db.commit()
        print("\n✓ Demo data loaded successfully!")

    except Exception as e:
        db.rollback()
        print(f"\n✗ Error during seeding: {e}")
        print("Database changes have been rolled back.")
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed_db()
