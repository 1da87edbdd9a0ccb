"""
Dashboard and analytics endpoints.

Read-only aggregates over all evaluations, available to any signed-in user.
"""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.crud import analytics
from app.crud import user as user_crud
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.user import User
from app.schemas.dashboard import (
    AnalyticsResponse,
    DashboardStats,
    DashboardSummary,
    ScoreHolder,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _score_holder(evaluation: Optional[Evaluation]) -> Optional[ScoreHolder]:
    if evaluation is None:
        return None
    return ScoreHolder(
        score=float(evaluation.percentage),
        staff_name=evaluation.employee.name_en,
        staff_name_kh=evaluation.employee.name_kh,
    )


@router.get("/", response_model=DashboardSummary)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Headline figures: completion counts, staff headcount, and the best and
    worst scoring completed evaluations.
    """
    by_status = analytics.count_by_status(db)

    return DashboardSummary(
        total_complete=by_status.get(EvaluationStatus.COMPLETE, 0),
        total_incomplete=by_status.get(EvaluationStatus.INCOMPLETE, 0),
        total_staff=user_crud.count_all(db),
        highest_score=_score_holder(analytics.extreme_complete_evaluation(db, highest=True)),
        lowest_score=_score_holder(analytics.extreme_complete_evaluation(db, highest=False)),
    )


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Evaluation counts and the average percentage of completed evaluations."""
    by_status = analytics.count_by_status(db)

    return DashboardStats(
        total_evaluations=sum(by_status.values()),
        pending_evaluations=by_status.get(EvaluationStatus.PENDING, 0),
        completed_evaluations=by_status.get(EvaluationStatus.COMPLETE, 0),
        average_score=analytics.average_percentage(db, status=EvaluationStatus.COMPLETE),
    )


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Analytics page data:
    - overall count, average total score and average percentage
    - grade distribution
    - average percentage per month
    - average percentage per department (via each employee's department)
    """
    return AnalyticsResponse(
        overall=analytics.overall_stats(db),
        grade_distribution=analytics.grade_distribution(db),
        monthly_averages=analytics.monthly_averages(db),
        department_averages=analytics.department_averages(db),
    )
