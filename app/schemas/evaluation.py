from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from app.models.evaluation import EvaluationType, EvaluationStatus, ReviewStatus

SubScore = Annotated[
    Decimal,
    Field(ge=0, le=50, decimal_places=2, description="Criterion rating between 0 and 50, at most two decimals"),
]


class EvaluationScores(BaseModel):
    """The ten criterion sub-scores, all required."""
    work_quality: SubScore
    work_quantity: SubScore
    knowledge: SubScore
    initiative: SubScore
    teamwork: SubScore
    communication: SubScore
    punctuality: SubScore
    management: SubScore
    reliability: SubScore
    other_factors: SubScore


class EvaluationCreateRequest(EvaluationScores):
    """
    Schema for creating an evaluation.

    Total, percentage and grade are computed server-side. ``evaluator_id``
    defaults to the caller; ``month``/``year`` default to the current date.
    """
    employee_id: UUID
    evaluator_id: Optional[UUID] = None
    type: EvaluationType
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)
    comments: str = ""


class EvaluationUpdateRequest(EvaluationScores):
    """Score edit. Comments are left untouched when omitted."""
    comments: Optional[str] = None


class EvaluationStatusUpdateRequest(BaseModel):
    status: EvaluationStatus

    @field_validator("status")
    @classmethod
    def validate_transition_target(cls, v: EvaluationStatus) -> EvaluationStatus:
        if v == EvaluationStatus.PENDING:
            raise ValueError("Status can only be set to COMPLETE or INCOMPLETE")
        return v


class EvaluationReviewRequest(BaseModel):
    decision: ReviewStatus

    @field_validator("decision")
    @classmethod
    def validate_decision(cls, v: ReviewStatus) -> ReviewStatus:
        if v == ReviewStatus.PENDING:
            raise ValueError("Decision must be APPROVED or REJECTED")
        return v


class EvaluationPreviewRequest(BaseModel):
    """
    Partially filled evaluation form.

    Empty strings are treated as "not entered yet". Bounds are checked by
    the scoring service so the caller gets one message for all bad fields.
    """
    work_quality: Optional[Decimal] = None
    work_quantity: Optional[Decimal] = None
    knowledge: Optional[Decimal] = None
    initiative: Optional[Decimal] = None
    teamwork: Optional[Decimal] = None
    communication: Optional[Decimal] = None
    punctuality: Optional[Decimal] = None
    management: Optional[Decimal] = None
    reliability: Optional[Decimal] = None
    other_factors: Optional[Decimal] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class ScoreResponse(BaseModel):
    total_score: float
    percentage: float
    grade: str


class EmployeeSummary(BaseModel):
    id: UUID
    employee_id: str
    name_en: str
    name_kh: str

    class Config:
        from_attributes = True


class EvaluatorSummary(BaseModel):
    id: UUID
    name_en: str
    position: Optional[str] = None

    class Config:
        from_attributes = True


class DepartmentName(BaseModel):
    name: str

    class Config:
        from_attributes = True


class EmployeeDetail(EmployeeSummary):
    position: Optional[str] = None
    department: Optional[DepartmentName] = None


class EvaluationListItem(BaseModel):
    """Row in evaluation list views."""
    id: UUID
    month: int
    year: int
    type: EvaluationType
    status: EvaluationStatus
    review_status: ReviewStatus
    percentage: Optional[float] = None
    grade: str
    employee: EmployeeSummary
    evaluator: EvaluatorSummary

    class Config:
        from_attributes = True


class EvaluationResponse(BaseModel):
    """Full evaluation with sub-scores and people."""
    id: UUID
    month: int
    year: int
    type: EvaluationType
    status: EvaluationStatus
    review_status: ReviewStatus
    employee_id: UUID
    evaluator_id: UUID
    work_quality: float
    work_quantity: float
    knowledge: float
    initiative: float
    teamwork: float
    communication: float
    punctuality: float
    management: float
    reliability: float
    other_factors: float
    total_score: float
    ratio: float
    percentage: float
    grade: str
    comments: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: EmployeeDetail
    evaluator: EvaluatorSummary

    class Config:
        from_attributes = True


class BulkEvaluationItem(EvaluationScores):
    """
    One record of a bulk import.

    ``employee_id`` is the human staff code (e.g. "EMP002"), not the UUID,
    so spreadsheets exported from payroll can be uploaded directly.
    """
    employee_id: str = Field(..., min_length=1)
    evaluator_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    type: EvaluationType
    comments: str = ""


class BulkItemResult(BaseModel):
    index: int
    success: bool
    evaluation_id: Optional[UUID] = None
    error: Optional[str] = None


class BulkImportResponse(BaseModel):
    success: bool
    message: str
    successful: int
    failed: int
    results: List[BulkItemResult]

