from datetime import datetime

from pydantic import EmailStr, Field

from app.schemas.base import CamelModel
from app.schemas.user import User


class BootstrapRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=10)
    full_name: str = Field(..., min_length=2, max_length=255)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class PasswordResetRequest(CamelModel):
    email: EmailStr


class PasswordReset(CamelModel):
    token: str = Field(..., min_length=20)
    new_password: str = Field(..., min_length=10)


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    # Expiry of the refresh token (and of its stored row)
    expires_at: datetime


class AuthData(CamelModel):
    user: User
    tokens: TokenPair


class ForgotPasswordData(CamelModel):
    message: str
    reset_token: str | None = None
