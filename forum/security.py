"""
Bearer-token issuing and validation.

Tokens are HS256-signed JWTs whose ``sub`` claim is the user id.  The
``CredentialValidator`` turns a raw token into an ``Identity`` or raises
``UnauthenticatedError``; it only reads from storage.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from forum.config import settings
from forum.errors import UnauthenticatedError
from forum.repositories import UserRepository

logger = logging.getLogger(__name__)

TOKEN_TYPE = "access"


@dataclass(frozen=True)
class Identity:
    """The authenticated user for the duration of one request."""

    user_id: int
    username: str


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id carried by *token*."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("token has expired")
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        raise UnauthenticatedError("invalid token")

    if payload.get("type") != TOKEN_TYPE:
        raise UnauthenticatedError("invalid token")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("invalid token")


class CredentialValidator:
    def __init__(self, db: AsyncSession) -> None:
        self.users = UserRepository(db)

    async def validate_token(self, token: str) -> Identity:
        if not token:
            raise UnauthenticatedError("invalid token")
        user_id = decode_access_token(token)
        user = await self.users.get_by_id(user_id)
        if user is None:
            logger.info("Token subject %s does not match any user", user_id)
            raise UnauthenticatedError("unknown user")
        return Identity(user_id=user.id, username=user.username)
