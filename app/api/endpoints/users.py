"""
API endpoints for staff management.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, get_current_user
from app.crud import department as department_crud
from app.crud import user as user_crud
from app.models.user import User, UserRole
from app.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


def _check_unique(db: Session, request, exclude_id: Optional[UUID] = None) -> None:
    if user_crud.email_taken(db, request.email, exclude_id=exclude_id):
        raise HTTPException(status_code=400, detail="Email already in use")
    if user_crud.employee_code_taken(db, request.employee_id, exclude_id=exclude_id):
        raise HTTPException(status_code=400, detail="Employee ID already in use")
    if not department_crud.get_by_id(db, request.department_id):
        raise HTTPException(status_code=400, detail=f"Department {request.department_id} not found")


@router.get("/", response_model=list[UserResponse])
def list_users(
    role: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List users ordered by employee ID.

    Args:
        role: Optional role filter, case-insensitive (e.g. ``staff``)
    """
    role_filter = None
    if role:
        try:
            role_filter = UserRole(role.upper())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown role: {role}")

    return user_crud.get_multi(db, role=role_filter)


@router.post("/", status_code=201, response_model=UserResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Create a staff account. The password is stored bcrypt-hashed."""
    _check_unique(db, request)

    try:
        user = user_crud.create(db, request)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating user {request.email}: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")

    logger.info(f"Admin {admin_user.email} created user {user.employee_id} ({user.role.value})")
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Update a staff account. Leave ``password`` empty to keep the current one."""
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    _check_unique(db, request, exclude_id=user_id)

    try:
        user = user_crud.update(db, user, request)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating user {user_id}: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")

    logger.info(f"Admin {admin_user.email} updated user {user_id}")
    return user


@router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Delete a staff account.

    Refused while the user has evaluations, either as the employee or as
    the evaluator. Delete those first or deactivate the user instead.
    """
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user_crud.count_evaluations(db, user_id) > 0:
        raise HTTPException(status_code=400, detail="Cannot delete user with existing evaluations")

    try:
        user_crud.delete(db, user)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error deleting user {user_id}: {e}")
        raise HTTPException(status_code=400, detail=f"Database error: {e.orig}")

    logger.info(f"Admin {admin_user.email} deleted user {user_id}")
    return {"message": "User deleted successfully"}
