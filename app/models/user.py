"""
User model for staff accounts and authentication.

Each User is an employee who can log in. Users belong to a Department and
can appear on an Evaluation either as the employee being assessed or as
the evaluator.
"""

import enum
import uuid
from datetime import date
from sqlalchemy import Column, String, Boolean, Date, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    SUPERVISOR = "SUPERVISOR"
    HR = "HR"
    STAFF = "STAFF"
    DEPARTMENT_HEAD = "DEPARTMENT_HEAD"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Human-facing staff code, e.g. "EMP001"; bulk import matches on this
    employee_id = Column(String, unique=True, nullable=False, index=True)

    name_en = Column(String, nullable=False)
    name_kh = Column(String, nullable=False)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.STAFF, nullable=False, index=True)
    position = Column(String, nullable=True)
    gender = Column(Enum(Gender), default=Gender.MALE, nullable=False)
    join_date = Column(Date, default=date.today, nullable=False)

    department_id = Column(Uuid(as_uuid=True), ForeignKey("departments.id"), nullable=True, index=True)

    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    department = relationship("Department", back_populates="users", foreign_keys=[department_id])
    evaluations_as_employee = relationship(
        "Evaluation", back_populates="employee", foreign_keys="[Evaluation.employee_id]"
    )
    evaluations_as_evaluator = relationship(
        "Evaluation", back_populates="evaluator", foreign_keys="[Evaluation.evaluator_id]"
    )

    def __repr__(self):
        return f"<User(id={self.id}, employee_id='{self.employee_id}', role={self.role.value})>"
