from app.db.models.user import User
from app.db.models.refresh_token import RefreshToken
from app.db.models.client import Client
from app.db.models.project import Project
from app.db.models.project_assignment import ProjectAssignment

__all__ = ["User", "RefreshToken", "Client", "Project", "ProjectAssignment"]
