"""
Evaluation model for monthly staff performance assessments.

An evaluation stores ten criterion sub-scores (0-50 each) given by an
evaluator to an employee, together with the derived total, percentage and
letter grade produced by ``app.services.scoring``.
"""

import enum
import uuid
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class EvaluationType(str, enum.Enum):
    SUPERVISOR = "SUPERVISOR"
    STAFF_COMMENDATION = "STAFF_COMMENDATION"
    SELF_COMMENDATION = "SELF_COMMENDATION"


class EvaluationStatus(str, enum.Enum):
    """
    Completion state, set by the evaluator or an administrator.

    - PENDING: imported or not yet reviewed by its evaluator
    - COMPLETE: evaluator considers the assessment final
    - INCOMPLETE: evaluator flagged it as missing information
    """
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    INCOMPLETE = "INCOMPLETE"


class ReviewStatus(str, enum.Enum):
    """Approval decision recorded by a department head."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Evaluation(Base):
    __tablename__ = "evaluations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    month = Column(Integer, nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    type = Column(Enum(EvaluationType), nullable=False)

    employee_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    evaluator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Criterion sub-scores, 0-50 each
    work_quality = Column(Numeric(5, 2), nullable=False)
    work_quantity = Column(Numeric(5, 2), nullable=False)
    knowledge = Column(Numeric(5, 2), nullable=False)
    initiative = Column(Numeric(5, 2), nullable=False)
    teamwork = Column(Numeric(5, 2), nullable=False)
    communication = Column(Numeric(5, 2), nullable=False)
    punctuality = Column(Numeric(5, 2), nullable=False)
    management = Column(Numeric(5, 2), nullable=False)
    reliability = Column(Numeric(5, 2), nullable=False)
    other_factors = Column(Numeric(5, 2), nullable=False)

    # Derived fields
    total_score = Column(Numeric(6, 2), nullable=False)
    ratio = Column(Numeric(5, 2), nullable=False, default=1)
    percentage = Column(Numeric(5, 2), nullable=False, index=True)
    grade = Column(String(1), nullable=False, index=True)

    comments = Column(Text, nullable=False, default="")

    status = Column(Enum(EvaluationStatus), default=EvaluationStatus.PENDING, nullable=False, index=True)
    review_status = Column(Enum(ReviewStatus), default=ReviewStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    employee = relationship("User", back_populates="evaluations_as_employee", foreign_keys=[employee_id])
    evaluator = relationship("User", back_populates="evaluations_as_evaluator", foreign_keys=[evaluator_id])

    def __repr__(self):
        return f"<Evaluation(id={self.id}, employee_id={self.employee_id}, {self.month}/{self.year}, grade={self.grade})>"
