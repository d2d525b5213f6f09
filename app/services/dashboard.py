from sqlalchemy.orm import Session

import app.repositories.client as client_repo
import app.repositories.project as project_repo
from app.domain.catalog import ProjectStatus
from app.domain.project_access import ProjectAccessPolicy
from app.schemas.dashboard import DashboardStats
from app.services.project import visible_projects_predicate


def get_stats(db: Session, policy: ProjectAccessPolicy) -> DashboardStats:
    """
    Headline counts for the dashboard.

    Project counts follow the caller's project visibility; the client count
    is global.
    """
    visible = visible_projects_predicate(policy)
    return DashboardStats(
        projects_active=project_repo.count_projects(
            db, visible_predicate=visible, exclude_status=ProjectStatus.ARCHIVED
        ),
        projects_total=project_repo.count_projects(db, visible_predicate=visible),
        clients_active=client_repo.count_active_clients(db),
    )
