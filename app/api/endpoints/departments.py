"""
API endpoints for department management.

Listing is open to any signed-in user (the evaluation and user forms need
it); changes are restricted to administrators.
"""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, get_current_user
from app.crud import department as department_crud
from app.crud import user as user_crud
from app.models.department import Department
from app.models.user import User
from app.schemas.department import DepartmentRequest, DepartmentResponse, ManagerSummary

router = APIRouter(prefix="/departments", tags=["Departments"])
logger = logging.getLogger(__name__)


def _to_response(department: Department, user_count: int) -> DepartmentResponse:
    return DepartmentResponse(
        id=department.id,
        name=department.name,
        manager_id=department.manager_id,
        manager=ManagerSummary.model_validate(department.manager) if department.manager else None,
        user_count=user_count,
    )


def _require_manager(db: Session, manager_id: UUID) -> None:
    if not user_crud.get_by_id(db, manager_id):
        raise HTTPException(status_code=400, detail=f"Manager {manager_id} not found")


@router.get("/", response_model=list[DepartmentResponse])
def list_departments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List all departments with their manager and member count."""
    counts = department_crud.user_counts(db)
    return [_to_response(d, counts.get(d.id, 0)) for d in department_crud.get_multi(db)]


@router.post("/", status_code=201, response_model=DepartmentResponse)
def create_department(
    request: DepartmentRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Create a department. The manager must be an existing user."""
    _require_manager(db, request.manager_id)

    try:
        department = department_crud.create(db, request)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating department: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")

    logger.info(f"Created department {department.id}: {department.name}")
    return _to_response(department, 0)


@router.put("/{department_id}", response_model=DepartmentResponse)
def update_department(
    department_id: UUID,
    request: DepartmentRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Rename a department or change its manager."""
    department = department_crud.get_by_id(db, department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")

    _require_manager(db, request.manager_id)

    try:
        department = department_crud.update(db, department, request)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating department {department_id}: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")

    logger.info(f"Updated department {department_id}")
    return _to_response(department, department_crud.count_users(db, department_id))


@router.delete("/{department_id}")
def delete_department(
    department_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Delete a department.

    Refused while any user still belongs to it; move or delete the users first.
    """
    department = department_crud.get_by_id(db, department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")

    if department_crud.count_users(db, department_id) > 0:
        raise HTTPException(status_code=400, detail="Cannot delete department with active users")

    department_crud.delete(db, department)
    logger.info(f"Admin {admin_user.email} deleted department {department_id}")
    return {"success": True}
