"""
CRUD operations for User model.

Password hashing happens here so plaintext never reaches the ORM layer.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload
from app.core.security import get_password_hash
from app.models.evaluation import Evaluation
from app.models.user import User, UserRole
from app.schemas.user import UserCreateRequest, UserUpdateRequest


def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_by_employee_code(db: Session, employee_code: str) -> Optional[User]:
    """Look up a user by their staff code (``User.employee_id``)."""
    return db.query(User).filter(User.employee_id == employee_code).first()


def get_multi(db: Session, role: Optional[UserRole] = None) -> List[User]:
    """
    List users ordered by staff code.

    Args:
        db: Database session
        role: Optional role filter
    """
    query = db.query(User).options(joinedload(User.department))

    if role:
        query = query.filter(User.role == role)

    return query.order_by(User.employee_id.asc()).all()


def email_taken(db: Session, email: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return db.query(query.exists()).scalar()


def employee_code_taken(db: Session, employee_code: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(User).filter(User.employee_id == employee_code)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return db.query(query.exists()).scalar()


def create(db: Session, data: UserCreateRequest) -> User:
    user = User(
        employee_id=data.employee_id,
        name_en=data.name_en,
        name_kh=data.name_kh,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
        position=data.position,
        department_id=data.department_id,
        gender=data.gender,
        join_date=data.join_date or date.today(),
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    return user


def update(db: Session, user: User, data: UserUpdateRequest) -> User:
    user.employee_id = data.employee_id
    user.name_en = data.name_en
    user.name_kh = data.name_kh
    user.email = data.email
    user.role = data.role
    user.position = data.position
    user.department_id = data.department_id
    user.gender = data.gender
    if data.join_date is not None:
        user.join_date = data.join_date
    if data.is_active is not None:
        user.is_active = data.is_active

    # Only update password if provided
    if data.password:
        user.hashed_password = get_password_hash(data.password)

    db.commit()
    db.refresh(user)

    return user


def count_evaluations(db: Session, user_id: UUID) -> int:
    """Evaluations referencing the user as employee or as evaluator."""
    return (
        db.query(func.count(Evaluation.id))
        .filter(or_(Evaluation.employee_id == user_id, Evaluation.evaluator_id == user_id))
        .scalar()
        or 0
    )


def count_all(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def delete(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
