"""Refresh token store: the server-side half of every issued refresh token."""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models.refresh_token import RefreshToken as RefreshTokenModel


def create_refresh_token(
    db: Session, token_id: str, user_id: str, expires_at: datetime
) -> RefreshTokenModel:
    """Insert a refresh token row. A colliding token_id raises IntegrityError."""
    record = RefreshTokenModel(id=token_id, user_id=user_id, expires_at=expires_at)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def get_refresh_token_by_id(db: Session, token_id: str) -> RefreshTokenModel | None:
    """Get a refresh token row by its token identifier."""
    return db.query(RefreshTokenModel).filter(RefreshTokenModel.id == token_id).first()


def revoke_refresh_token(db: Session, token_id: str) -> bool:
    """
    Mark a refresh token revoked.

    The update only touches a row that is not yet revoked, so of two
    concurrent callers exactly one sees True. Calling it on an already
    revoked or unknown token is a no-op returning False.
    """
    updated = (
        db.query(RefreshTokenModel)
        .filter(
            RefreshTokenModel.id == token_id,
            RefreshTokenModel.revoked_at.is_(None),
        )
        .update(
            {RefreshTokenModel.revoked_at: datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated == 1


def delete_refresh_tokens_for_user(db: Session, user_id: str) -> int:
    """Delete every refresh token of a user. Returns the number of rows removed."""
    deleted = (
        db.query(RefreshTokenModel)
        .filter(RefreshTokenModel.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
