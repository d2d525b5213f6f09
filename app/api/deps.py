from collections.abc import Iterable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.tokens import AccessClaims, TokenService
from app.db.base import SessionLocal
from app.domain.project_access import ProjectAccessPolicy
from app.domain.roles import PRODUCTION_ROLES, UserRole
from app.errors import ForbiddenError, InvalidTokenError, UnauthorizedError

bearer_scheme = HTTPBearer(auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token_service(request: Request) -> TokenService:
    """The token service built at application start."""
    return request.app.state.token_service


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> AccessClaims:
    """
    Authenticate the request from its bearer access token.

    Stateless: the signature and expiry are all that is checked, the user row
    is not loaded.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing access token")

    try:
        return tokens.verify_access(credentials.credentials)
    except InvalidTokenError:
        raise UnauthorizedError("Invalid or expired access token")


def require_roles(allowed_roles: Iterable[UserRole]):
    """
    Create a dependency that requires the caller's role to be in ``allowed_roles``.

    Example:
        Depends(require_roles(ADMIN_ROLES))
        Depends(require_roles({UserRole.ADMIN_PRODUCER, UserRole.ACCOUNTANT}))
    """
    allowed = frozenset(allowed_roles)

    def role_checker(
        principal: AccessClaims = Depends(get_current_principal),
    ) -> AccessClaims:
        if principal.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return principal

    return role_checker


def get_project_policy(
    principal: AccessClaims = Depends(require_roles(PRODUCTION_ROLES)),
) -> ProjectAccessPolicy:
    return ProjectAccessPolicy(user_id=principal.user_id, role=principal.role)
