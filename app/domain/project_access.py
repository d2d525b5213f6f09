from __future__ import annotations

from dataclasses import dataclass

from app.domain.roles import PROJECT_OVERSIGHT_ROLES, UserRole


@dataclass(frozen=True, slots=True)
class ProjectAccessPolicy:
    """Who may see and who may change a project.

    - ADMIN_PRODUCER and ACCOUNTANT see every project; everyone else sees
      the projects they own or are assigned to.
    - Only ADMIN_PRODUCER or the project owner may edit, archive or manage
      assignments. Being assigned grants visibility only.
    - Only ADMIN_PRODUCER may hand a project to another owner.
    """

    user_id: str
    role: UserRole

    @property
    def sees_all(self) -> bool:
        return self.role in PROJECT_OVERSIGHT_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN_PRODUCER

    def can_view(self, *, owner_id: str, is_assigned: bool = False) -> bool:
        return self.sees_all or owner_id == self.user_id or is_assigned

    def can_edit(self, *, owner_id: str) -> bool:
        return self.is_admin or owner_id == self.user_id

    def resolve_owner(self, requested_owner_id: str | None) -> str:
        """Owner for a new project: admins may pick one, others always own it."""
        if self.is_admin and requested_owner_id:
            return requested_owner_id
        return self.user_id

    def sqlalchemy_visible_predicate(
        self, *, owner_col, project_id_col, assignment_project_col, assignment_user_col
    ):
        """Build a SQLAlchemy predicate for the visibility rule, or None for no filter.

        The assignment columns belong to the assignment table; the rule holds
        when the caller owns the row or an assignment row links them to it.
        """
        if self.sees_all:
            return None

        from sqlalchemy import and_, exists, or_

        return or_(
            owner_col == self.user_id,
            exists().where(
                and_(
                    assignment_project_col == project_id_col,
                    assignment_user_col == self.user_id,
                )
            ),
        )
