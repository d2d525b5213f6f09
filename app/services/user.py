from sqlalchemy.orm import Session

import app.repositories.user as user_repo
from app.core.security import get_password_hash
from app.db.models.user import User as UserModel
from app.domain.roles import UserRole, UserType
from app.errors import DuplicateResourceError, NotFoundError
from app.schemas.user import MeUpdate, RegisterRequest, UserUpdate


def register_user(db: Session, user_data: RegisterRequest) -> UserModel:
    """
    Create a new user account (admin-only at the controller level).

    - Validates email uniqueness
    - Defaults to PRODUCER role and INTERNAL_STAFF type

    Raises:
        DuplicateResourceError: If the email is already registered
    """
    existing_user = user_repo.get_user_by_email(db, user_data.email)
    if existing_user:
        raise DuplicateResourceError("User with this email already exists")

    return user_repo.create_user(
        db,
        email=user_data.email,
        full_name=user_data.full_name,
        password_hash=get_password_hash(user_data.password),
        role=user_data.role or UserRole.PRODUCER,
        user_type=user_data.user_type or UserType.INTERNAL_STAFF,
    )


def get_user(db: Session, user_id: str) -> UserModel:
    """
    Get a user by ID.

    Raises:
        NotFoundError: If user doesn't exist
    """
    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_me(db: Session, user_id: str, data: MeUpdate) -> UserModel:
    """Self-service profile update: full name and phone only."""
    get_user(db, user_id)
    return user_repo.update_user(
        db,
        user_id=user_id,
        full_name=data.full_name,
        phone=data.phone,
    )


def update_user(db: Session, user_id: str, data: UserUpdate) -> UserModel:
    """
    Admin update of any user, including role, type and active flag.

    Raises:
        NotFoundError: If user doesn't exist
    """
    get_user(db, user_id)
    return user_repo.update_user(
        db,
        user_id=user_id,
        full_name=data.full_name,
        phone=data.phone,
        role=data.role,
        user_type=data.user_type,
        active=data.active,
    )


def deactivate_user(db: Session, user_id: str) -> UserModel:
    """Soft-delete: users are never removed, only marked inactive."""
    get_user(db, user_id)
    return user_repo.update_user(db, user_id=user_id, active=False)


def get_all_users(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    active: bool | None = None,
    role: UserRole | None = None,
) -> tuple[list[UserModel], int]:
    """
    Get users with pagination.

    This is admin-only functionality, so no authorization checks are needed here
    (authorization is handled at the controller level).
    """
    return user_repo.get_all_users_paginated(
        db, page=page, page_size=page_size, active=active, role=role
    )
