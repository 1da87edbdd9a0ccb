"""
API endpoints for employee evaluations.

Covers single create/read/edit/delete, the completion and review
workflows, the draft score preview, and bulk import/export.
"""

import logging
from datetime import date
from typing import Any, Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, get_current_user, get_hr_or_admin_user, require_roles
from app.crud import evaluation as evaluation_crud
from app.crud import user as user_crud
from app.models.evaluation import Evaluation, EvaluationStatus, ReviewStatus
from app.models.user import User, UserRole
from app.schemas.evaluation import (
    BulkImportResponse,
    EvaluationCreateRequest,
    EvaluationListItem,
    EvaluationPreviewRequest,
    EvaluationResponse,
    EvaluationReviewRequest,
    EvaluationStatusUpdateRequest,
    EvaluationUpdateRequest,
    ScoreResponse,
)
from app.services.evaluation_import import import_evaluations
from app.services.scoring import extract_scores, preview_score

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])
logger = logging.getLogger(__name__)

# Roles that may read any evaluation
VIEW_ALL_ROLES = {UserRole.ADMIN, UserRole.HR, UserRole.DEPARTMENT_HEAD}
# Roles that may edit any evaluation, on top of its own evaluator
EDIT_ALL_ROLES = {UserRole.ADMIN, UserRole.DEPARTMENT_HEAD}

get_reviewer = require_roles(UserRole.ADMIN, UserRole.DEPARTMENT_HEAD)


def _get_or_404(db: Session, evaluation_id: UUID) -> Evaluation:
    evaluation = evaluation_crud.get_by_id(db, evaluation_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return evaluation


def _can_view(user: User, evaluation: Evaluation) -> bool:
    return user.role in VIEW_ALL_ROLES or user.id in (evaluation.employee_id, evaluation.evaluator_id)


def _can_edit(user: User, evaluation: Evaluation) -> bool:
    return user.role in EDIT_ALL_ROLES or user.id == evaluation.evaluator_id


@router.get("/", response_model=list[EvaluationListItem])
def list_evaluations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List evaluations, newest period first.

    STAFF users only see evaluations about themselves.
    """
    employee_filter = current_user.id if current_user.role == UserRole.STAFF else None
    return evaluation_crud.get_multi(db, employee_id=employee_filter)


@router.get("/my", response_model=list[EvaluationListItem])
def list_my_evaluations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Evaluations in which the caller is the employee being assessed."""
    return evaluation_crud.get_multi(db, employee_id=current_user.id)


@router.post("/preview", response_model=ScoreResponse)
def preview_evaluation_score(
    request: EvaluationPreviewRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Compute total, percentage and grade for a form still being filled in.

    Sub-scores not entered yet count as 0. Nothing is stored.
    """
    try:
        result = preview_score(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScoreResponse(**result.as_dict())


@router.post("/bulk", response_model=BulkImportResponse)
def bulk_import_evaluations(
    records: Any = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_or_admin_user)
):
    """
    Import a batch of evaluations.

    Each record carries the employee's staff code (``employee_id``), the
    evaluator's user id, month, year, type, the ten sub-scores and optional
    comments. Records are processed independently; failures are reported
    per record and do not stop the batch. Imported evaluations start as
    PENDING.
    """
    if not isinstance(records, list):
        raise HTTPException(status_code=400, detail="Invalid data format. Expected an array of evaluations.")

    try:
        results = import_evaluations(db, records)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Bulk import error: {e}")
        raise HTTPException(status_code=500, detail="Failed to process bulk import")

    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    return BulkImportResponse(
        success=True,
        message=f"Processed {len(results)} evaluations. {successful} successful, {failed} failed.",
        successful=successful,
        failed=failed,
        results=results,
    )


@router.get("/bulk", response_model=list[EvaluationResponse])
def bulk_export_evaluations(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: int = Query(0, ge=0, le=12),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_hr_or_admin_user)
):
    """
    Export evaluations for a year, optionally narrowed to one month.

    Args:
        year: Defaults to the current year
        month: 1-12, or 0 for every month
    """
    return evaluation_crud.get_for_export(db, year=year or date.today().year, month=month or None)


@router.post("/", status_code=201, response_model=EvaluationResponse)
def create_evaluation(
    request: EvaluationCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create an evaluation from its ten sub-scores.

    Total score, percentage and grade are computed server-side. The
    evaluator defaults to the caller and the period to the current month.
    New evaluations are COMPLETE and awaiting review.
    """
    if not user_crud.get_by_id(db, request.employee_id):
        raise HTTPException(status_code=400, detail=f"Employee {request.employee_id} not found")

    evaluator_id = request.evaluator_id or current_user.id
    if evaluator_id != current_user.id and not user_crud.get_by_id(db, evaluator_id):
        raise HTTPException(status_code=400, detail=f"Evaluator {evaluator_id} not found")

    try:
        evaluation = evaluation_crud.build(
            scores=extract_scores(request),
            employee_id=request.employee_id,
            evaluator_id=evaluator_id,
            evaluation_type=request.type,
            month=request.month,
            year=request.year,
            comments=request.comments,
            status=EvaluationStatus.COMPLETE,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        evaluation = evaluation_crud.create(db, evaluation)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating evaluation: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating evaluation: {e}")
        raise HTTPException(status_code=500, detail="Failed to create evaluation")

    logger.info(
        f"Created evaluation {evaluation.id} for employee {evaluation.employee_id} "
        f"({evaluation.month}/{evaluation.year}): {evaluation.percentage}% {evaluation.grade}"
    )
    return evaluation


@router.get("/{evaluation_id}", response_model=EvaluationResponse)
def get_evaluation(
    evaluation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Retrieve one evaluation with its sub-scores.

    Visible to admins, HR, department heads, the employee and the evaluator.
    """
    evaluation = _get_or_404(db, evaluation_id)

    if not _can_view(current_user, evaluation):
        raise HTTPException(status_code=403, detail="Forbidden")

    return evaluation


@router.put("/{evaluation_id}", response_model=EvaluationResponse)
def update_evaluation(
    evaluation_id: UUID,
    request: EvaluationUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Replace the ten sub-scores (and optionally the comments).

    Total, percentage and grade are recomputed. Allowed for admins,
    department heads and the original evaluator.
    """
    evaluation = _get_or_404(db, evaluation_id)

    if not _can_edit(current_user, evaluation):
        raise HTTPException(status_code=403, detail="Forbidden")

    try:
        evaluation = evaluation_crud.update_scores(
            db, evaluation, extract_scores(request), comments=request.comments
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating evaluation {evaluation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update evaluation")

    logger.info(f"Updated scores of evaluation {evaluation_id}: {evaluation.percentage}% {evaluation.grade}")
    return evaluation


@router.patch("/{evaluation_id}/status", response_model=EvaluationResponse)
def update_evaluation_status(
    evaluation_id: UUID,
    request: EvaluationStatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Mark an evaluation COMPLETE or INCOMPLETE.

    Re-sending the current status changes nothing.
    """
    evaluation = _get_or_404(db, evaluation_id)

    if not _can_edit(current_user, evaluation):
        raise HTTPException(status_code=403, detail="Forbidden")

    previous = evaluation.status
    evaluation = evaluation_crud.update_status(db, evaluation, request.status)

    if previous != evaluation.status:
        logger.info(f"Evaluation {evaluation_id} status {previous.value} -> {evaluation.status.value}")
    return evaluation


@router.post("/{evaluation_id}/review", response_model=EvaluationResponse)
def review_evaluation(
    evaluation_id: UUID,
    request: EvaluationReviewRequest,
    db: Session = Depends(get_db),
    reviewer: User = Depends(get_reviewer)
):
    """
    Approve or reject an evaluation (department heads and admins).

    A decided review cannot be flipped; repeating the same decision is a no-op.
    """
    evaluation = _get_or_404(db, evaluation_id)

    if evaluation.review_status not in (ReviewStatus.PENDING, request.decision):
        raise HTTPException(
            status_code=409,
            detail=f"Evaluation has already been {evaluation.review_status.value.lower()}"
        )

    previous = evaluation.review_status
    evaluation = evaluation_crud.update_review(db, evaluation, request.decision)

    if previous != evaluation.review_status:
        logger.info(f"Evaluation {evaluation_id} {evaluation.review_status.value} by {reviewer.email}")
    return evaluation


@router.delete("/{evaluation_id}", status_code=204)
def delete_evaluation(
    evaluation_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Delete an evaluation (admins only)."""
    evaluation = _get_or_404(db, evaluation_id)

    evaluation_crud.delete(db, evaluation)
    logger.info(f"Admin {admin_user.email} deleted evaluation {evaluation_id}")
    return Response(status_code=204)
