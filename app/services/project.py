import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import app.repositories.client as client_repo
import app.repositories.project as project_repo
import app.repositories.project_assignment as assignment_repo
import app.repositories.user as user_repo
from app.db.models.project import Project as ProjectModel
from app.db.models.project_assignment import ProjectAssignment as ProjectAssignmentModel
from app.domain.catalog import ProjectStatus
from app.domain.project_access import ProjectAccessPolicy
from app.errors import ForbiddenError, NotFoundError, ProjectCodeError
from app.schemas.project import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)

CODE_ATTEMPTS = 3


def next_project_code(db: Session, offset: int = 0) -> str:
    """Next sequential code for the current year, e.g. ``PRJ-2026-007``."""
    prefix = f"PRJ-{datetime.now(timezone.utc).year}-"
    count = project_repo.count_projects_with_code_prefix(db, prefix)
    return f"{prefix}{count + 1 + offset:03d}"


def visible_projects_predicate(policy: ProjectAccessPolicy):
    """SQL filter for the projects the caller may see, or None when they see all."""
    return policy.sqlalchemy_visible_predicate(
        owner_col=ProjectModel.owner_id,
        project_id_col=ProjectModel.id,
        assignment_project_col=ProjectAssignmentModel.project_id,
        assignment_user_col=ProjectAssignmentModel.user_id,
    )


def list_projects(
    db: Session,
    policy: ProjectAccessPolicy,
    page: int = 1,
    page_size: int = 20,
    status: ProjectStatus | None = None,
    search: str | None = None,
) -> tuple[list[ProjectModel], int]:
    """List the projects visible to the caller."""
    return project_repo.get_projects_paginated(
        db,
        page=page,
        page_size=page_size,
        visible_predicate=visible_projects_predicate(policy),
        status=status,
        search=search,
    )


def get_project(db: Session, project_id: str, policy: ProjectAccessPolicy) -> ProjectModel:
    """
    Get a project the caller may see.

    Raises:
        NotFoundError: If project doesn't exist
        ForbiddenError: If the caller may not see it
    """
    project = project_repo.get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")
    if not policy.can_view(
        owner_id=project.owner_id,
        is_assigned=assignment_repo.is_user_assigned(db, project_id, policy.user_id),
    ):
        raise ForbiddenError("Insufficient permissions")
    return project


def get_editable_project(
    db: Session, project_id: str, policy: ProjectAccessPolicy
) -> ProjectModel:
    project = project_repo.get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")
    if not policy.can_edit(owner_id=project.owner_id):
        raise ForbiddenError("Insufficient permissions")
    return project


def create_project(
    db: Session, data: ProjectCreate, policy: ProjectAccessPolicy
) -> ProjectModel:
    """
    Create a project with a generated code.

    - Client must exist
    - Owner is the caller unless an ADMIN_PRODUCER names someone else

    Raises:
        NotFoundError: If the client or the requested owner doesn't exist
        ProjectCodeError: If no free code was found after a few attempts
    """
    if not client_repo.get_client_by_id(db, data.client_id):
        raise NotFoundError("Client not found")

    owner_id = policy.resolve_owner(data.owner_id)
    if owner_id != policy.user_id and not user_repo.get_user_by_id(db, owner_id):
        raise NotFoundError("Owner not found")

    for attempt in range(CODE_ATTEMPTS):
        code = next_project_code(db, offset=attempt)
        try:
            return project_repo.create_project(
                db,
                code=code,
                name=data.name,
                description=data.description,
                type=data.type,
                status=data.status or ProjectStatus.INQUIRY,
                client_id=data.client_id,
                owner_id=owner_id,
            )
        except IntegrityError:
            db.rollback()
            logger.warning("Project code %s already taken, retrying", code)

    raise ProjectCodeError()


def update_project(
    db: Session, project_id: str, data: ProjectUpdate, policy: ProjectAccessPolicy
) -> ProjectModel:
    """
    Update a project the caller may edit.

    Raises:
        NotFoundError: If project, new client or new owner doesn't exist
        ForbiddenError: If the caller may not edit it, or a non-admin reassigns it
    """
    project = get_editable_project(db, project_id, policy)

    if data.owner_id is not None and data.owner_id != project.owner_id:
        if not policy.is_admin:
            raise ForbiddenError("Only an administrator can reassign a project")
        if not user_repo.get_user_by_id(db, data.owner_id):
            raise NotFoundError("Owner not found")

    if data.client_id is not None and not client_repo.get_client_by_id(db, data.client_id):
        raise NotFoundError("Client not found")

    return project_repo.update_project(
        db,
        project_id,
        name=data.name,
        description=data.description,
        type=data.type,
        status=data.status,
        client_id=data.client_id,
        owner_id=data.owner_id,
    )


def archive_project(db: Session, project_id: str, policy: ProjectAccessPolicy) -> ProjectModel:
    """Projects are archived rather than deleted."""
    get_editable_project(db, project_id, policy)
    return project_repo.update_project(
        db,
        project_id,
        status=ProjectStatus.ARCHIVED,
        archived_at=datetime.now(timezone.utc),
    )
