from pydantic import BaseModel, Field, UUID4
from typing import Optional


class DepartmentRequest(BaseModel):
    """Schema for creating or renaming a department"""
    name: str = Field(..., min_length=1, max_length=200)
    manager_id: UUID4


class ManagerSummary(BaseModel):
    name_en: str
    name_kh: str

    class Config:
        from_attributes = True


class DepartmentResponse(BaseModel):
    id: UUID4
    name: str
    manager_id: Optional[UUID4] = None
    manager: Optional[ManagerSummary] = None
    user_count: int = 0
