from app.schemas.base import CamelModel


class DashboardStats(CamelModel):
    projects_active: int
    projects_total: int
    clients_active: int
