"""Project assignments: who works on a project besides its owner."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import app.repositories.project_assignment as assignment_repo
import app.repositories.user as user_repo
from app.db.models.project_assignment import ProjectAssignment as ProjectAssignmentModel
from app.domain.project_access import ProjectAccessPolicy
from app.errors import ASSIGNMENT_EXISTS, DuplicateResourceError, NotFoundError
from app.schemas.project_assignment import AssignmentCreate
from app.services.project import get_editable_project, get_project

logger = logging.getLogger(__name__)


def list_assignments(
    db: Session, project_id: str, policy: ProjectAccessPolicy
) -> list[ProjectAssignmentModel]:
    """Assignments of a project, for the people who manage it."""
    get_editable_project(db, project_id, policy)
    return assignment_repo.get_assignments_for_project(db, project_id)


def get_team(
    db: Session, project_id: str, policy: ProjectAccessPolicy
) -> list[ProjectAssignmentModel]:
    """Assignments of a project, for anyone who can see it."""
    get_project(db, project_id, policy)
    return assignment_repo.get_assignments_for_project(db, project_id)


def assign_user(
    db: Session, project_id: str, data: AssignmentCreate, policy: ProjectAccessPolicy
) -> ProjectAssignmentModel:
    """
    Assign a user to a project.

    Raises:
        NotFoundError: If the project or the user doesn't exist
        ForbiddenError: If the caller is neither ADMIN_PRODUCER nor the owner
        DuplicateResourceError: If the user is already assigned
    """
    get_editable_project(db, project_id, policy)
    if not user_repo.get_user_by_id(db, data.user_id):
        raise NotFoundError("User not found")

    try:
        assignment = assignment_repo.create_assignment(
            db,
            project_id=project_id,
            user_id=data.user_id,
            role_on_project=data.role_on_project,
        )
    except IntegrityError:
        db.rollback()
        raise DuplicateResourceError("User already assigned to project", code=ASSIGNMENT_EXISTS)

    logger.info("User %s assigned to project %s", data.user_id, project_id)
    return assignment


def unassign_user(
    db: Session, project_id: str, user_id: str, policy: ProjectAccessPolicy
) -> None:
    """
    Remove a user from a project.

    Raises:
        NotFoundError: If the project or the assignment doesn't exist
    """
    get_editable_project(db, project_id, policy)
    if not assignment_repo.delete_assignment(db, project_id, user_id):
        raise NotFoundError("Assignment not found")
