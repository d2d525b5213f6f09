"""Auth service: bootstrap, login, refresh rotation, logout and password reset."""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import aiosmtplib
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import (
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
    verify_password,
)
from app.core.tokens import TokenService
from app.db.models.user import User as UserModel
from app.domain.roles import UserRole, UserType
from app.errors import (
    BootstrapLockedError,
    InvalidCredentialsError,
    InvalidRefreshError,
    InvalidResetError,
    InvalidTokenError,
)
from app.repositories.refresh_token import (
    create_refresh_token,
    delete_refresh_tokens_for_user,
    get_refresh_token_by_id,
    revoke_refresh_token,
)
from app.repositories.user import (
    count_users,
    create_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_reset_token,
    set_password_reset_token,
    update_user_password,
)
from app.schemas.auth import AuthData, ForgotPasswordData, TokenPair
from app.schemas.envelope import MessageData
from app.schemas.user import User
from app.services.email import send_password_reset_email

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists, a reset link has been sent."
SIGNED_OUT = "Signed out"
ALREADY_SIGNED_OUT = "Already signed out"


def issue_tokens(db: Session, tokens: TokenService, user: UserModel) -> TokenPair:
    """
    Mint an access token and a refresh token for a user.

    A new refresh_tokens row is stored for every call; its expiry matches the
    ``exp`` claim of the signed refresh token.
    """
    token_id = str(uuid.uuid4())
    expires_at = datetime.now(timezone.utc) + tokens.refresh_ttl
    refresh_token = tokens.sign_refresh(user.id, token_id)
    create_refresh_token(db, token_id=token_id, user_id=user.id, expires_at=expires_at)

    access_token = tokens.sign_access(user.id, user.email, user.role)
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_at=expires_at,
    )


def _auth_data(db: Session, tokens: TokenService, user: UserModel) -> AuthData:
    pair = issue_tokens(db, tokens, user)
    return AuthData(user=User.model_validate(user), tokens=pair)


def bootstrap(
    db: Session, tokens: TokenService, email: str, password: str, full_name: str
) -> AuthData:
    """
    Create the first administrator and sign them in.

    Raises:
        BootstrapLockedError: If any user already exists.
    """
    if count_users(db) > 0:
        raise BootstrapLockedError()

    user = create_user(
        db,
        email=email,
        full_name=full_name,
        password_hash=get_password_hash(password),
        role=UserRole.ADMIN_PRODUCER,
        user_type=UserType.INTERNAL_STAFF,
    )
    logger.info("Bootstrap completed, first admin user %s created", user.id)
    return _auth_data(db, tokens, user)


def login(db: Session, tokens: TokenService, email: str, password: str) -> AuthData:
    """
    Authenticate user by email and password and issue a token pair.

    Raises:
        InvalidCredentialsError: If the email is unknown, the user is inactive
            or the password is wrong. The three cases are indistinguishable.
    """
    user = get_user_by_email(db, email)
    if not user or not user.active or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        raise InvalidCredentialsError()

    return _auth_data(db, tokens, user)


def refresh(db: Session, tokens: TokenService, refresh_token: str) -> AuthData:
    """
    Rotate a refresh token: revoke the presented one and issue a new pair.

    Raises:
        InvalidRefreshError: If the token does not verify, its row is missing,
            revoked or expired, another request already consumed it, or its
            user is no longer active.
    """
    try:
        claims = tokens.verify_refresh(refresh_token)
    except InvalidTokenError:
        raise InvalidRefreshError()

    record = get_refresh_token_by_id(db, claims.token_id)
    if record is None or record.user_id != claims.user_id:
        raise InvalidRefreshError("Refresh token expired or revoked")

    if record.revoked_at is not None:
        # TODO: decide whether reuse of a revoked token should revoke the user's other sessions
        logger.warning("Revoked refresh token presented for user %s", record.user_id)
        raise InvalidRefreshError("Refresh token expired or revoked")

    if not record.is_usable():
        raise InvalidRefreshError("Refresh token expired or revoked")

    if not revoke_refresh_token(db, claims.token_id):
        # Lost a race with a concurrent refresh of the same token
        logger.warning("Refresh token for user %s consumed concurrently", claims.user_id)
        raise InvalidRefreshError("Refresh token expired or revoked")

    user = get_user_by_id(db, claims.user_id)
    if not user or not user.active:
        raise InvalidRefreshError("User no longer active")

    return _auth_data(db, tokens, user)


def logout(db: Session, tokens: TokenService, refresh_token: str) -> MessageData:
    """
    Revoke a refresh token.

    Never fails: an unverifiable, unknown or already revoked token is
    reported as already signed out.
    """
    try:
        claims = tokens.verify_refresh(refresh_token)
    except InvalidTokenError:
        return MessageData(message=ALREADY_SIGNED_OUT)

    if revoke_refresh_token(db, claims.token_id):
        return MessageData(message=SIGNED_OUT)
    return MessageData(message=ALREADY_SIGNED_OUT)


async def forgot_password(db: Session, email: str) -> ForgotPasswordData:
    """
    Request password reset: create token, store its hash, send email.

    Always returns the same message (no user enumeration). Outside
    production the raw token is echoed back when a reset was issued.
    Email delivery failures are logged, not raised.
    """
    user = get_user_by_email(db, email)
    if not user or not user.active:
        return ForgotPasswordData(message=FORGOT_PASSWORD_MESSAGE)

    raw_token = generate_reset_token()
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=settings.password_reset_token_expire_minutes
    )
    set_password_reset_token(db, user.id, hash_reset_token(raw_token), expires)

    try:
        await send_password_reset_email(user.email, raw_token, name=user.full_name)
    except (ValueError, aiosmtplib.SMTPException) as e:
        logger.error("Failed to send password reset email: %s", e)

    return ForgotPasswordData(
        message=FORGOT_PASSWORD_MESSAGE,
        reset_token=raw_token if settings.expose_reset_token else None,
    )


def reset_password(db: Session, token: str, new_password: str) -> MessageData:
    """
    Reset password using the raw token from the email.

    On success every refresh token of the user is deleted, signing them out
    everywhere.

    Raises:
        InvalidResetError: If no user holds an unexpired matching token.
    """
    user = get_user_by_reset_token(db, hash_reset_token(token))
    if not user:
        raise InvalidResetError()

    update_user_password(db, user.id, get_password_hash(new_password))
    removed = delete_refresh_tokens_for_user(db, user.id)
    logger.info("Password reset for user %s, %d sessions revoked", user.id, removed)
    return MessageData(message="Password reset successfully")
