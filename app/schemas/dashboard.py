"""
Response schemas for dashboard and analytics aggregates.
"""

from pydantic import BaseModel
from typing import List, Optional


class ScoreHolder(BaseModel):
    score: float
    staff_name: str
    staff_name_kh: str


class DashboardSummary(BaseModel):
    total_complete: int
    total_incomplete: int
    total_staff: int
    highest_score: Optional[ScoreHolder] = None
    lowest_score: Optional[ScoreHolder] = None


class DashboardStats(BaseModel):
    total_evaluations: int
    pending_evaluations: int
    completed_evaluations: int
    average_score: float


class OverallStats(BaseModel):
    total_evaluations: int = 0
    average_score: float = 0
    average_percentage: float = 0


class GradeCount(BaseModel):
    grade: str
    count: int


class MonthlyAverage(BaseModel):
    month: int
    percentage: float


class DepartmentAverage(BaseModel):
    name: str
    percentage: float
    count: int


class AnalyticsResponse(BaseModel):
    overall: OverallStats
    grade_distribution: List[GradeCount]
    monthly_averages: List[MonthlyAverage]
    department_averages: List[DepartmentAverage]
