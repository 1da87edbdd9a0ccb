import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Department(Base):
    """
    Organisational unit grouping users, with one designated manager.

    ``manager_id`` and ``users.department_id`` reference each other, so the
    manager FK is emitted with ALTER after both tables exist.
    """
    __tablename__ = "departments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String, nullable=False, index=True)
    manager_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", use_alter=True, name="fk_departments_manager_id_users"),
        nullable=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    users = relationship("User", back_populates="department", foreign_keys="[User.department_id]")
    manager = relationship("User", foreign_keys=[manager_id], post_update=True)

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"
