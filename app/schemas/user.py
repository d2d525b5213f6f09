from datetime import datetime

from pydantic import EmailStr, Field

from app.domain.roles import UserRole, UserType
from app.schemas.base import CamelModel


class User(CamelModel):
    id: str
    email: str
    full_name: str
    role: UserRole
    user_type: UserType
    active: bool
    phone: str | None = None
    created_at: datetime | None = None


class UserData(CamelModel):
    user: User


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=10)
    full_name: str = Field(..., min_length=2, max_length=255)
    role: UserRole | None = None  # defaults to PRODUCER
    user_type: UserType | None = None  # defaults to INTERNAL_STAFF


class MeUpdate(CamelModel):
    full_name: str | None = Field(None, min_length=2, max_length=255)
    phone: str | None = Field(None, min_length=5, max_length=50)


class UserUpdate(CamelModel):
    full_name: str | None = Field(None, min_length=2, max_length=255)
    phone: str | None = Field(None, min_length=5, max_length=50)
    role: UserRole | None = None
    user_type: UserType | None = None
    active: bool | None = None
