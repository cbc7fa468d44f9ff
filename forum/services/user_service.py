"""
User service: registration and lookup for the User resource.

Users are immutable once created: there is no update or delete.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from forum.errors import AlreadyInUseError, DuplicateRecordError, NotFoundError, ValidationError
from forum.models import User
from forum.repositories import UserRepository
from forum.schemas import UserCreate

logger = logging.getLogger(__name__)


async def get_users(db: AsyncSession) -> list[User]:
    return await UserRepository(db).get_all()


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    return await UserRepository(db).get_by_username(username)


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Register a new user.

    The username is checked up front so a duplicate surfaces as
    ``AlreadyInUseError("username")``; a concurrent insert that slips past
    the check is caught by the unique constraint and reported the same way.
    """
    username = data.username.strip()
    if not username:
        raise ValidationError("username must not be empty", field="username")

    users = UserRepository(db)
    if await users.get_by_username(username) is not None:
        raise AlreadyInUseError("username")

    try:
        user = await users.create(User(username=username))
    except DuplicateRecordError:
        raise AlreadyInUseError("username")

    logger.info("Created user id=%s username=%r", user.id, user.username)
    return user
