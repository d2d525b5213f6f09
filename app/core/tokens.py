"""Signing and verification of access and refresh tokens.

Access tokens are stateless: a valid signature and an unexpired ``exp`` are
all a request needs. Refresh tokens carry only a user id and a token id; the
token id points at a row in ``refresh_tokens`` that must also be live, which
is what makes them revocable.

The two kinds are signed with different secrets and carry a ``type`` claim,
so one can never be accepted in place of the other.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import Settings
from app.domain.roles import UserRole
from app.errors import InvalidTokenError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

DEFAULT_DURATION = timedelta(days=7)

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
_DURATION_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def parse_duration(value: str, default: timedelta = DEFAULT_DURATION) -> timedelta:
    """
    Parse a compact duration such as ``"15m"`` or ``"7d"``.

    Accepted units are s, m, h and d. Anything else returns ``default``.
    """
    match = _DURATION_RE.match(value.strip()) if value else None
    if not match:
        logger.warning("Unparsable duration %r, falling back to %s", value, default)
        return default
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit]


@dataclass(frozen=True)
class TokenConfig:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = DEFAULT_DURATION

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("JWT secrets are not configured")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=parse_duration(
                settings.jwt_expires_in, default=timedelta(minutes=15)
            ),
            refresh_ttl=parse_duration(settings.jwt_refresh_expires_in),
        )


@dataclass(frozen=True)
class AccessClaims:
    user_id: str
    email: str
    role: UserRole


@dataclass(frozen=True)
class RefreshClaims:
    user_id: str
    token_id: str


class TokenService:
    """Stateless signer/verifier built once from a TokenConfig."""

    def __init__(self, config: TokenConfig):
        self.config = config

    @property
    def refresh_ttl(self) -> timedelta:
        return self.config.refresh_ttl

    def sign_access(self, user_id: str, email: str, role: UserRole | str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": UserRole(role).value,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.config.access_ttl,
        }
        return jwt.encode(payload, self.config.access_secret, algorithm=self.config.algorithm)

    def sign_refresh(self, user_id: str, token_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "jti": token_id,
            "type": REFRESH_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.config.refresh_ttl,
        }
        return jwt.encode(payload, self.config.refresh_secret, algorithm=self.config.algorithm)

    def verify_access(self, token: str) -> AccessClaims:
        payload = self._decode(
            token, self.config.access_secret, ACCESS_TOKEN_TYPE, ("sub", "email", "role")
        )
        try:
            role = UserRole(payload["role"])
        except ValueError as exc:
            raise InvalidTokenError("Unknown role claim") from exc
        return AccessClaims(user_id=payload["sub"], email=payload["email"], role=role)

    def verify_refresh(self, token: str) -> RefreshClaims:
        payload = self._decode(
            token, self.config.refresh_secret, REFRESH_TOKEN_TYPE, ("sub", "jti")
        )
        return RefreshClaims(user_id=payload["sub"], token_id=payload["jti"])

    def _decode(
        self, token: str, secret: str, expected_type: str, required: tuple[str, ...]
    ) -> dict:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                options={"require": ["exp", "type", *required]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if payload.get("type") != expected_type:
            raise InvalidTokenError("Wrong token type")
        return payload
