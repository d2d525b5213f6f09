from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_project_policy
from app.domain.project_access import ProjectAccessPolicy
from app.schemas.dashboard import DashboardStats
from app.schemas.envelope import Envelope
from app.services.dashboard import get_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=Envelope[DashboardStats])
def get_dashboard_stats(
    db: Session = Depends(get_db),
    policy: ProjectAccessPolicy = Depends(get_project_policy),
):
    """Project and client counts. Project counts are scoped like GET /projects."""
    return Envelope(data=get_stats(db, policy))
