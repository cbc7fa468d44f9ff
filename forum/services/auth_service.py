"""
Auth service: issues bearer tokens and resolves the current user.

Users carry no password, so logging in only proves that the username
exists.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from forum.config import settings
from forum.errors import UnauthenticatedError
from forum.models import User
from forum.schemas import LoginRequest, TokenResponse
from forum.security import Identity, create_access_token
from forum.services import user_service

logger = logging.getLogger(__name__)


async def login(db: AsyncSession, data: LoginRequest) -> TokenResponse:
    user = await user_service.get_user_by_username(db, data.username.strip())
    if user is None:
        logger.info("Login rejected for username=%r", data.username)
        raise UnauthenticatedError("invalid credentials")
    return TokenResponse(
        access_token=create_access_token(user.id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


async def current_user(db: AsyncSession, identity: Identity) -> User:
    return await user_service.get_user(db, identity.user_id)
