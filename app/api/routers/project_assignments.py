from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import app.services.project_assignment as assignment_service
from app.api.deps import get_db, get_project_policy, require_roles
from app.domain.project_access import ProjectAccessPolicy
from app.domain.roles import PROJECT_CREATOR_ROLES
from app.schemas.envelope import Envelope
from app.schemas.project_assignment import (
    AssignmentCreate,
    AssignmentData,
    ProjectAssignment,
)

router = APIRouter(
    prefix="/projects/{project_id}/assignments",
    tags=["project assignments"],
    dependencies=[Depends(require_roles(PROJECT_CREATOR_ROLES))],
)


@router.get("", response_model=Envelope[list[ProjectAssignment]])
def get_project_assignments(
    project_id: str,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """List assignments. ADMIN_PRODUCER or the project owner only."""
    assignments = assignment_service.list_assignments(db, project_id, policy)
    return Envelope(data=[ProjectAssignment.model_validate(a) for a in assignments])


@router.post("", response_model=Envelope[AssignmentData], status_code=status.HTTP_201_CREATED)
def assign_user_to_project(
    project_id: str,
    assignment_data: AssignmentCreate,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """Assign a user to the project. Assigned users can see the project but not edit it."""
    assignment = assignment_service.assign_user(db, project_id, assignment_data, policy)
    return Envelope(data=AssignmentData(assignment=ProjectAssignment.model_validate(assignment)))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def unassign_user_from_project(
    project_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    assignment_service.unassign_user(db, project_id, user_id, policy)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
