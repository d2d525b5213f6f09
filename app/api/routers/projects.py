from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import app.services.project as project_service
import app.services.project_assignment as assignment_service
from app.api.deps import get_db, get_project_policy, require_roles
from app.domain.catalog import ProjectStatus
from app.domain.project_access import ProjectAccessPolicy
from app.domain.roles import PROJECT_CREATOR_ROLES
from app.schemas.envelope import Envelope
from app.schemas.pagination import PaginatedResponse
from app.schemas.project import Project, ProjectCreate, ProjectData, ProjectUpdate
from app.schemas.project_assignment import ProjectAssignment

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=Envelope[PaginatedResponse[Project]])
def get_all_projects(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
    status: ProjectStatus | None = Query(None),
    search: str | None = Query(None, description="Name or code, partial match"),
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """
    List projects.
    - ADMIN_PRODUCER and ACCOUNTANT: every project
    - Others: only projects they own
    """
    projects, total = project_service.list_projects(
        db, policy, page=page, page_size=page_size, status=status, search=search
    )
    return Envelope(
        data=PaginatedResponse(
            items=[Project.model_validate(project) for project in projects],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.post(
    "",
    response_model=Envelope[ProjectData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(PROJECT_CREATOR_ROLES))],
)
def create_new_project(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """
    Create a project. Only ADMIN_PRODUCER and PRODUCER users can create projects.

    The caller owns the project unless an ADMIN_PRODUCER passes ownerId.
    """
    project = project_service.create_project(db, project_data, policy)
    return Envelope(data=ProjectData(project=Project.model_validate(project)))


@router.get("/{project_id}", response_model=Envelope[ProjectData])
def get_project_by_id(
    project_id: str,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    project = project_service.get_project(db, project_id, policy)
    return Envelope(data=ProjectData(project=Project.model_validate(project)))


@router.patch("/{project_id}", response_model=Envelope[ProjectData])
def update_project_by_id(
    project_id: str,
    project_data: ProjectUpdate,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """Update a project. ADMIN_PRODUCER or the project owner only."""
    project = project_service.update_project(db, project_id, project_data, policy)
    return Envelope(data=ProjectData(project=Project.model_validate(project)))


@router.delete("/{project_id}", response_model=Envelope[ProjectData])
def archive_project_by_id(
    project_id: str,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """Archive a project. ADMIN_PRODUCER or the project owner only."""
    project = project_service.archive_project(db, project_id, policy)
    return Envelope(data=ProjectData(project=Project.model_validate(project)))


@router.get("/{project_id}/team", response_model=Envelope[list[ProjectAssignment]])
def get_project_team(
    project_id: str,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """People assigned to a project. Anyone who can see the project can see its team."""
    assignments = assignment_service.get_team(db, project_id, policy)
    return Envelope(data=[ProjectAssignment.model_validate(a) for a in assignments])
