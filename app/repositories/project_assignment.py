from sqlalchemy.orm import Session

from app.db.models.project_assignment import ProjectAssignment as ProjectAssignmentModel


def get_assignments_for_project(db: Session, project_id: str) -> list[ProjectAssignmentModel]:
    """Assignments of a project, oldest first."""
    return (
        db.query(ProjectAssignmentModel)
        .filter(ProjectAssignmentModel.project_id == project_id)
        .order_by(ProjectAssignmentModel.created_at.asc())
        .all()
    )


def get_assignment(
    db: Session, project_id: str, user_id: str
) -> ProjectAssignmentModel | None:
    return (
        db.query(ProjectAssignmentModel)
        .filter(
            ProjectAssignmentModel.project_id == project_id,
            ProjectAssignmentModel.user_id == user_id,
        )
        .first()
    )


def is_user_assigned(db: Session, project_id: str, user_id: str) -> bool:
    return get_assignment(db, project_id, user_id) is not None


def create_assignment(
    db: Session, project_id: str, user_id: str, role_on_project: str
) -> ProjectAssignmentModel:
    """Assign a user to a project. A second assignment of the same user raises IntegrityError."""
    assignment = ProjectAssignmentModel(
        project_id=project_id,
        user_id=user_id,
        role_on_project=role_on_project,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def delete_assignment(db: Session, project_id: str, user_id: str) -> bool:
    """Remove an assignment. Returns False when there was none."""
    deleted = (
        db.query(ProjectAssignmentModel)
        .filter(
            ProjectAssignmentModel.project_id == project_id,
            ProjectAssignmentModel.user_id == user_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted == 1
