from datetime import datetime

from pydantic import Field

from app.domain.roles import UserRole
from app.schemas.base import CamelModel


class AssignedUser(CamelModel):
    id: str
    full_name: str
    email: str
    role: UserRole


class ProjectAssignment(CamelModel):
    id: str
    project_id: str
    user_id: str
    role_on_project: str
    created_at: datetime
    user: AssignedUser


class AssignmentData(CamelModel):
    assignment: ProjectAssignment


class AssignmentCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    role_on_project: str = Field(..., min_length=2, max_length=255)
