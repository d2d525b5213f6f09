from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.domain.roles import ADMIN_ROLES, UserRole
from app.schemas.envelope import Envelope
from app.schemas.pagination import PaginatedResponse
from app.schemas.user import User, UserData, UserUpdate
from app.services.user import deactivate_user, get_all_users, update_user

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(ADMIN_ROLES))],
)


@router.get("", response_model=Envelope[PaginatedResponse[User]])
def get_all_users_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
    active: bool | None = Query(None, description="Filter on the active flag"),
    role: UserRole | None = Query(None, description="Filter on role"),
    db: Session = Depends(get_db),
):
    """Get users with pagination. Only ADMIN_PRODUCER users can access this endpoint."""
    users, total = get_all_users(db, page=page, page_size=page_size, active=active, role=role)
    return Envelope(
        data=PaginatedResponse(
            items=[User.model_validate(user) for user in users],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.patch("/{user_id}", response_model=Envelope[UserData])
def update_user_by_id(
    user_id: str,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
):
    """Update any user's profile, role, type or active flag."""
    user = update_user(db, user_id, user_data)
    return Envelope(data=UserData(user=User.model_validate(user)))


@router.delete("/{user_id}", response_model=Envelope[UserData])
def deactivate_user_by_id(
    user_id: str,
    db: Session = Depends(get_db),
):
    """Deactivate a user. Users are never hard-deleted."""
    user = deactivate_user(db, user_id)
    return Envelope(data=UserData(user=User.model_validate(user)))
