"""
Aggregate queries backing the dashboard and analytics views.
"""

from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from app.models.department import Department
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.user import User


def _to_float(value, digits: int = 2) -> float:
    return round(float(value), digits) if value is not None else 0.0


def count_by_status(db: Session) -> Dict[EvaluationStatus, int]:
    rows = db.query(Evaluation.status, func.count(Evaluation.id)).group_by(Evaluation.status).all()
    return {status: count for status, count in rows}


def extreme_complete_evaluation(db: Session, highest: bool = True) -> Optional[Evaluation]:
    """Highest (or lowest) scoring COMPLETE evaluation, with its employee."""
    order = Evaluation.percentage.desc() if highest else Evaluation.percentage.asc()
    return (
        db.query(Evaluation)
        .options(joinedload(Evaluation.employee))
        .filter(Evaluation.status == EvaluationStatus.COMPLETE)
        .order_by(order)
        .first()
    )


def average_percentage(db: Session, status: Optional[EvaluationStatus] = None) -> float:
    query = db.query(func.avg(Evaluation.percentage))
    if status is not None:
        query = query.filter(Evaluation.status == status)
    return _to_float(query.scalar())


def overall_stats(db: Session) -> dict:
    total, avg_total, avg_percentage = db.query(
        func.count(Evaluation.id),
        func.avg(Evaluation.total_score),
        func.avg(Evaluation.percentage),
    ).one()
    return {
        "total_evaluations": total or 0,
        "average_score": _to_float(avg_total),
        "average_percentage": _to_float(avg_percentage),
    }


def grade_distribution(db: Session) -> List[dict]:
    rows = (
        db.query(Evaluation.grade, func.count(Evaluation.id))
        .group_by(Evaluation.grade)
        .order_by(Evaluation.grade.asc())
        .all()
    )
    return [{"grade": grade or "N/A", "count": count} for grade, count in rows]


def monthly_averages(db: Session) -> List[dict]:
    rows = (
        db.query(Evaluation.month, func.avg(Evaluation.percentage))
        .group_by(Evaluation.month)
        .order_by(Evaluation.month.asc())
        .all()
    )
    return [{"month": month, "percentage": _to_float(avg)} for month, avg in rows]


def department_averages(db: Session) -> List[dict]:
    """Average percentage per department, via each evaluation's employee."""
    avg_percentage = func.avg(Evaluation.percentage)
    rows = (
        db.query(Department.name, avg_percentage, func.count(Evaluation.id))
        .select_from(Evaluation)
        .join(User, Evaluation.employee_id == User.id)
        .join(Department, User.department_id == Department.id)
        .group_by(Department.id, Department.name)
        .order_by(avg_percentage.desc())
        .all()
    )
    return [
        {"name": name or "Unknown", "percentage": _to_float(avg), "count": count}
        for name, avg, count in rows
    ]
