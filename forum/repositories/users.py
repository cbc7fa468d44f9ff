from sqlalchemy import select

from forum.models import User
from forum.repositories.base import SQLRepository


class UserRepository(SQLRepository[User]):
    model = User

    async def get_by_username(self, username: str) -> User | None:
        result = await self._execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()
