from sqlalchemy import select

from forum.models import Comment
from forum.repositories.base import SQLRepository


class CommentRepository(SQLRepository[Comment]):
    model = Comment

    async def get_by_post(self, post_id: int) -> list[Comment]:
        result = await self._execute(
            select(Comment).where(Comment.post_id == post_id).order_by(Comment.id)
        )
        return list(result.scalars().all())
