"""
CRUD operations for Evaluation model.

Derived score fields are always produced by ``app.services.scoring`` here,
never taken from the client.
"""

from datetime import date
from typing import Any, List, Mapping, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from app.models.evaluation import Evaluation, EvaluationStatus, EvaluationType, ReviewStatus
from app.models.user import User
from app.services.scoring import SCORE_FIELDS, calculate_score

# Stored for every record; reserved for a future weighting factor
DEFAULT_RATIO = 1


def _with_people(query):
    return query.options(
        joinedload(Evaluation.employee).joinedload(User.department),
        joinedload(Evaluation.evaluator),
    )


def apply_scores(evaluation: Evaluation, scores: Mapping[str, Any]) -> Evaluation:
    """
    Copy the ten sub-scores onto ``evaluation`` and recompute its totals.

    Raises:
        MissingScoreError, ScoreValidationError: from the scoring service;
            ``evaluation`` is left untouched in that case.
    """
    result = calculate_score(scores)

    for field in SCORE_FIELDS:
        setattr(evaluation, field, result.scores[field])
    evaluation.total_score = result.total_score
    evaluation.percentage = result.percentage
    evaluation.grade = result.grade

    return evaluation


def build(
    scores: Mapping[str, Any],
    employee_id: UUID,
    evaluator_id: UUID,
    evaluation_type: EvaluationType,
    month: Optional[int] = None,
    year: Optional[int] = None,
    comments: Optional[str] = "",
    status: EvaluationStatus = EvaluationStatus.COMPLETE,
) -> Evaluation:
    """Construct a scored, unsaved Evaluation."""
    today = date.today()
    evaluation = Evaluation(
        employee_id=employee_id,
        evaluator_id=evaluator_id,
        type=evaluation_type,
        month=month or today.month,
        year=year or today.year,
        comments=comments or "",
        ratio=DEFAULT_RATIO,
        status=status,
        review_status=ReviewStatus.PENDING,
    )
    return apply_scores(evaluation, scores)


def create(db: Session, evaluation: Evaluation) -> Evaluation:
    db.add(evaluation)
    db.commit()
    db.refresh(evaluation)

    return evaluation


def get_by_id(db: Session, evaluation_id: UUID) -> Optional[Evaluation]:
    return _with_people(db.query(Evaluation)).filter(Evaluation.id == evaluation_id).first()


def get_multi(db: Session, employee_id: Optional[UUID] = None) -> List[Evaluation]:
    """
    List evaluations, newest period first.

    Args:
        db: Database session
        employee_id: Restrict to evaluations of this employee
    """
    query = _with_people(db.query(Evaluation))

    if employee_id is not None:
        query = query.filter(Evaluation.employee_id == employee_id)

    return query.order_by(Evaluation.year.desc(), Evaluation.month.desc()).all()


def get_for_export(db: Session, year: int, month: Optional[int] = None) -> List[Evaluation]:
    """Evaluations of ``year`` (and ``month`` when given) for bulk export."""
    query = _with_people(db.query(Evaluation)).filter(Evaluation.year == year)

    if month:
        query = query.filter(Evaluation.month == month)

    return query.order_by(
        Evaluation.year.desc(),
        Evaluation.month.desc(),
        Evaluation.created_at.desc(),
    ).all()


def update_scores(
    db: Session,
    evaluation: Evaluation,
    scores: Mapping[str, Any],
    comments: Optional[str] = None,
) -> Evaluation:
    apply_scores(evaluation, scores)
    if comments is not None:
        evaluation.comments = comments

    db.commit()
    db.refresh(evaluation)

    return evaluation


def update_status(db: Session, evaluation: Evaluation, status: EvaluationStatus) -> Evaluation:
    """Set the completion status. Setting the current value is a no-op."""
    if evaluation.status == status:
        return evaluation

    evaluation.status = status
    db.commit()
    db.refresh(evaluation)

    return evaluation


def update_review(db: Session, evaluation: Evaluation, decision: ReviewStatus) -> Evaluation:
    """
    Record a review decision.

    Callers must check that the evaluation is still PENDING review or
    already carries ``decision``.
    """
    if evaluation.review_status == decision:
        return evaluation

    evaluation.review_status = decision
    db.commit()
    db.refresh(evaluation)

    return evaluation


def delete(db: Session, evaluation: Evaluation) -> None:
    db.delete(evaluation)
    db.commit()
