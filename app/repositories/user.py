from datetime import datetime, timezone
from sqlalchemy.orm import Session

from app.db.models.user import User as UserModel
from app.domain.roles import UserRole, UserType
from app.errors import NotFoundError


def count_users(db: Session) -> int:
    """Count all users, active or not."""
    return db.query(UserModel).count()


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email."""
    return db.query(UserModel).filter(UserModel.email == email).first()


def get_user_by_id(db: Session, user_id: str) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def get_user_by_reset_token(db: Session, token_hash: str) -> UserModel | None:
    """Get a user by the hash of an unexpired password reset token."""
    return (
        db.query(UserModel)
        .filter(
            UserModel.password_reset_token == token_hash,
            UserModel.password_reset_expires > datetime.now(timezone.utc),
        )
        .first()
    )


def create_user(
    db: Session,
    email: str,
    full_name: str,
    password_hash: str,
    role: UserRole,
    user_type: UserType,
) -> UserModel:
    """Create a new user in the database. Pure data access - no business logic."""
    db_user = UserModel(
        email=email,
        full_name=full_name,
        password_hash=password_hash,
        role=role,
        user_type=user_type,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user_password(db: Session, user_id: str, password_hash: str) -> UserModel:
    """Update a user's password and clear any pending reset token."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    user.password_hash = password_hash
    user.password_reset_token = None
    user.password_reset_expires = None
    db.commit()
    db.refresh(user)
    return user


def set_password_reset_token(
    db: Session, user_id: str, token_hash: str, expires: datetime
) -> UserModel:
    """Set password reset token hash for a user."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    user.password_reset_token = token_hash
    user.password_reset_expires = expires
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session,
    user_id: str,
    full_name: str | None = None,
    phone: str | None = None,
    role: UserRole | None = None,
    user_type: UserType | None = None,
    active: bool | None = None,
) -> UserModel:
    """Update user fields. Only provided fields will be updated."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    if full_name is not None:
        user.full_name = full_name
    if phone is not None:
        user.phone = phone
    if role is not None:
        user.role = role
    if user_type is not None:
        user.user_type = user_type
    if active is not None:
        user.active = active

    db.commit()
    db.refresh(user)
    return user


def get_all_users_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    active: bool | None = None,
    role: UserRole | None = None,
) -> tuple[list[UserModel], int]:
    """
    Get users with pagination, newest first.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        active: Optional filter on the active flag
        role: Optional filter on role

    Returns:
        Tuple of (list of users, total count)
    """
    query = db.query(UserModel)
    if active is not None:
        query = query.filter(UserModel.active.is_(active))
    if role is not None:
        query = query.filter(UserModel.role == role)
    total = query.count()
    skip = (page - 1) * page_size
    users = (
        query.order_by(UserModel.created_at.desc(), UserModel.email)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return users, total
