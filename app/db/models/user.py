import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, String
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.domain.roles import UserRole, UserType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, native_enum=False, length=32),
        nullable=False,
        default=UserRole.PRODUCER,
    )
    user_type = Column(
        Enum(UserType, native_enum=False, length=32),
        nullable=False,
        default=UserType.INTERNAL_STAFF,
    )
    active = Column(Boolean, nullable=False, default=True)
    phone = Column(String(50), nullable=True)
    # SHA-256 of the raw reset token; the raw value is only ever emailed
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # Relationship
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", passive_deletes=True
    )
