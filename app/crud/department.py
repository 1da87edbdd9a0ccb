"""
CRUD operations for Department model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from app.models.department import Department
from app.models.user import User
from app.schemas.department import DepartmentRequest


def get_by_id(db: Session, department_id: UUID) -> Optional[Department]:
    return db.query(Department).filter(Department.id == department_id).first()


def get_multi(db: Session) -> List[Department]:
    """All departments ordered by name, managers eagerly loaded."""
    return (
        db.query(Department)
        .options(joinedload(Department.manager))
        .order_by(Department.name.asc())
        .all()
    )


def count_users(db: Session, department_id: UUID) -> int:
    return db.query(func.count(User.id)).filter(User.department_id == department_id).scalar() or 0


def user_counts(db: Session) -> dict:
    """Map of department id to member count, for list views."""
    rows = (
        db.query(User.department_id, func.count(User.id))
        .filter(User.department_id.isnot(None))
        .group_by(User.department_id)
        .all()
    )
    return {department_id: count for department_id, count in rows}


def create(db: Session, data: DepartmentRequest) -> Department:
    department = Department(name=data.name, manager_id=data.manager_id)

    db.add(department)
    db.commit()
    db.refresh(department)

    return department


def update(db: Session, department: Department, data: DepartmentRequest) -> Department:
    department.name = data.name
    department.manager_id = data.manager_id

    db.commit()
    db.refresh(department)

    return department


def delete(db: Session, department: Department) -> None:
    db.delete(department)
    db.commit()
