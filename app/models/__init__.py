"""
Database models package.
"""

from app.models.user import User, UserRole, Gender
from app.models.department import Department
from app.models.evaluation import Evaluation, EvaluationType, EvaluationStatus, ReviewStatus

__all__ = [
    "User", "UserRole", "Gender",
    "Department",
    "Evaluation", "EvaluationType", "EvaluationStatus", "ReviewStatus",
]
