"""Token service for JWT issuance, verification, and blocklist checks."""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from access_control.roles import Role
from core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as asserted by a verified access token.

    The role is the one embedded at issuance; it is not re-read from the
    user row, so a role change applies only to tokens issued afterwards.
    """

    user_id: uuid.UUID
    email: str
    role: Role
    token_id: str = ""
    expires_at: int = 0

    is_authenticated = True
    is_anonymous = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def pk(self) -> uuid.UUID:
        return self.user_id


class TokenService:
    """Handle JWT issuance, decoding, and blocklist operations."""

    ALGORITHM = "HS256"
    TOKEN_TYPE = "access"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def access_ttl(cls) -> timedelta:
        return timedelta(days=getattr(settings, "ACCESS_TOKEN_TTL_DAYS", 7))

    @classmethod
    def generate_token(cls, user) -> str:
        """Issue a signed access token carrying the user's id, email and role."""

        now = datetime.now(timezone.utc)
        payload = cls._build_payload(user, now, cls.access_ttl())
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def _build_payload(cls, user, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        exp = issued_at + ttl
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": str(user.role),
            "jti": str(uuid.uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(issued_at.timestamp()),
            "type": cls.TOKEN_TYPE,
        }

    @classmethod
    def decode_token(cls, token: str) -> dict[str, Any]:
        """Decode and validate a JWT; raise AuthenticationFailed when unusable."""

        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[cls.ALGORITHM],
                options={"require": ["exp", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationFailed("Invalid token") from exc

        if payload.get("type") != cls.TOKEN_TYPE:
            raise AuthenticationFailed("Invalid token type")

        return payload

    @classmethod
    def verify(cls, token: Optional[str]) -> Optional[Identity]:
        """Return the identity a token asserts, or None if it is not usable.

        Never raises: malformed, expired, wrongly signed tokens and tokens
        with unknown roles all come back as None.
        """

        if not token:
            return None
        try:
            payload = cls.decode_token(token)
            return Identity(
                user_id=uuid.UUID(str(payload["sub"])),
                email=str(payload.get("email", "")),
                role=Role(payload.get("role")),
                token_id=str(payload["jti"]),
                expires_at=int(payload["exp"]),
            )
        except AuthenticationFailed as exc:
            logger.debug("Rejected bearer token: %s", exc.detail)
            return None
        except (KeyError, TypeError, ValueError):
            logger.debug("Rejected bearer token with malformed claims")
            return None

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc


__all__ = ["BlocklistUnavailable", "Identity", "TokenService"]
