from fastapi import APIRouter

from app.api.routers import (
    auth,
    clients,
    dashboard,
    health,
    project_assignments,
    projects,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(clients.router)
api_router.include_router(projects.router)
api_router.include_router(project_assignments.router)
api_router.include_router(dashboard.router)
