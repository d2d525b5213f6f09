from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.project import Project as ProjectModel
from app.domain.catalog import ProjectStatus, ProjectType
from app.errors import NotFoundError


def get_project_by_id(db: Session, project_id: str) -> ProjectModel | None:
    """Get a project by ID."""
    return db.query(ProjectModel).filter(ProjectModel.id == project_id).first()


def count_projects_with_code_prefix(db: Session, prefix: str) -> int:
    """Count projects whose code starts with the given prefix."""
    return db.query(ProjectModel).filter(ProjectModel.code.startswith(prefix)).count()


def count_projects(
    db: Session,
    visible_predicate=None,
    exclude_status: ProjectStatus | None = None,
) -> int:
    """Count projects matching an optional visibility predicate, optionally skipping a status."""
    query = db.query(ProjectModel)
    if visible_predicate is not None:
        query = query.filter(visible_predicate)
    if exclude_status is not None:
        query = query.filter(ProjectModel.status != exclude_status)
    return query.count()


def get_projects_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    visible_predicate=None,
    status: ProjectStatus | None = None,
    search: str | None = None,
) -> tuple[list[ProjectModel], int]:
    """Get projects with pagination, newest first.

    ``visible_predicate`` is an optional SQLAlchemy expression restricting
    which rows the caller may see.
    """
    query = db.query(ProjectModel)
    if visible_predicate is not None:
        query = query.filter(visible_predicate)
    if status is not None:
        query = query.filter(ProjectModel.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(ProjectModel.name.ilike(pattern), ProjectModel.code.ilike(pattern))
        )
    total = query.count()
    skip = (page - 1) * page_size
    projects = (
        query.order_by(ProjectModel.created_at.desc(), ProjectModel.code.desc())
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return projects, total


def create_project(
    db: Session,
    code: str,
    name: str,
    type: ProjectType,
    status: ProjectStatus,
    client_id: str,
    owner_id: str,
    description: str | None = None,
) -> ProjectModel:
    """Create a new project. A duplicate code raises IntegrityError."""
    db_project = ProjectModel(
        code=code,
        name=name,
        description=description,
        type=type,
        status=status,
        client_id=client_id,
        owner_id=owner_id,
    )
    db.add(db_project)
    db.commit()
    db.refresh(db_project)
    return db_project


def update_project(db: Session, project_id: str, **fields) -> ProjectModel:
    """Update project fields. Fields passed as None are left untouched."""
    project = get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")

    for name, value in fields.items():
        if value is not None:
            setattr(project, name, value)

    db.commit()
    db.refresh(project)
    return project
