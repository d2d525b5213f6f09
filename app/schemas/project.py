from datetime import datetime

from pydantic import Field

from app.domain.catalog import ProjectStatus, ProjectType
from app.schemas.base import CamelModel
from app.schemas.client import Client


class ProjectOwner(CamelModel):
    id: str
    full_name: str
    email: str


class Project(CamelModel):
    id: str
    code: str
    name: str
    description: str | None = None
    type: ProjectType
    status: ProjectStatus
    client_id: str
    owner_id: str
    archived_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    client: Client
    owner: ProjectOwner


class ProjectData(CamelModel):
    project: Project


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: str | None = None
    type: ProjectType
    status: ProjectStatus | None = None  # defaults to INQUIRY
    client_id: str
    owner_id: str | None = None  # honoured for ADMIN_PRODUCER only


class ProjectUpdate(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = None
    type: ProjectType | None = None
    status: ProjectStatus | None = None
    client_id: str | None = None
    owner_id: str | None = None
