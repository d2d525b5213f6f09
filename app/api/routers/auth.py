from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import app.services.auth as auth_service
from app.api.deps import (
    get_current_principal,
    get_db,
    get_token_service,
    require_roles,
)
from app.core.tokens import AccessClaims, TokenService
from app.domain.roles import ADMIN_ROLES
from app.schemas.auth import (
    AuthData,
    BootstrapRequest,
    ForgotPasswordData,
    LoginRequest,
    PasswordReset,
    PasswordResetRequest,
    RefreshRequest,
)
from app.schemas.envelope import Envelope, MessageData
from app.schemas.user import MeUpdate, RegisterRequest, User, UserData
from app.services.user import get_user, register_user, update_me

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/bootstrap",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def bootstrap(
    payload: BootstrapRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create the first administrator. Only allowed while the user table is empty.
    """
    data = auth_service.bootstrap(
        db, tokens, payload.email, payload.password, payload.full_name
    )
    return Envelope(data=data)


@router.post("/login", response_model=Envelope[AuthData])
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Login endpoint - returns the user and a fresh token pair."""
    return Envelope(data=auth_service.login(db, tokens, payload.email, payload.password))


@router.post("/refresh", response_model=Envelope[AuthData])
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange a refresh token for a new pair. The presented token is spent."""
    return Envelope(data=auth_service.refresh(db, tokens, payload.refresh_token))


@router.post("/logout", response_model=Envelope[MessageData])
def logout(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Revoke a refresh token. Succeeds even if the token is already invalid."""
    return Envelope(data=auth_service.logout(db, tokens, payload.refresh_token))


@router.post(
    "/forgot-password",
    response_model=Envelope[ForgotPasswordData],
    response_model_exclude_none=True,
)
async def forgot_password(
    request: PasswordResetRequest,
    db: Session = Depends(get_db),
):
    """Request password reset - sends email with reset token."""
    return Envelope(data=await auth_service.forgot_password(db, request.email))


@router.post("/reset-password", response_model=Envelope[MessageData])
def reset_password(reset_data: PasswordReset, db: Session = Depends(get_db)):
    """Reset password using token from email. Signs the user out everywhere."""
    return Envelope(
        data=auth_service.reset_password(db, reset_data.token, reset_data.new_password)
    )


@router.post(
    "/register",
    response_model=Envelope[UserData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    user_data: RegisterRequest,
    db: Session = Depends(get_db),
    current_user: AccessClaims = Depends(require_roles(ADMIN_ROLES)),
):
    """
    Create a new account. Only ADMIN_PRODUCER users can register users.

    Role defaults to PRODUCER and user type to INTERNAL_STAFF.
    """
    user = register_user(db, user_data)
    return Envelope(data=UserData(user=User.model_validate(user)))


@router.get("/me", response_model=Envelope[UserData])
def get_current_user_info(
    db: Session = Depends(get_db),
    current_user: AccessClaims = Depends(get_current_principal),
):
    """Get current authenticated user information."""
    user = get_user(db, current_user.user_id)
    return Envelope(data=UserData(user=User.model_validate(user)))


@router.patch("/me", response_model=Envelope[UserData])
def update_current_user_info(
    data: MeUpdate,
    db: Session = Depends(get_db),
    current_user: AccessClaims = Depends(get_current_principal),
):
    """Update own full name and/or phone."""
    user = update_me(db, current_user.user_id, data)
    return Envelope(data=UserData(user=User.model_validate(user)))
