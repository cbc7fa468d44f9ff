from sqlalchemy import delete, select

from forum.models import PostTopic, Topic
from forum.repositories.base import SQLRepository


class TopicRepository(SQLRepository[Topic]):
    model = Topic

    async def get_by_name(self, name: str) -> Topic | None:
        result = await self._execute(select(Topic).where(Topic.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, topic_ids: list[int]) -> list[Topic]:
        if not topic_ids:
            return []
        result = await self._execute(
            select(Topic).where(Topic.id.in_(topic_ids)).order_by(Topic.id)
        )
        return list(result.scalars().all())

    async def get_by_post(self, post_id: int) -> list[Topic]:
        q = (
            select(Topic)
            .join(PostTopic, PostTopic.topic_id == Topic.id)
            .where(PostTopic.post_id == post_id)
            .order_by(Topic.id)
        )
        result = await self._execute(q)
        return list(result.scalars().all())

    async def delete(self, entity_id: int) -> bool:
        # Links go first so the delete does not depend on ON DELETE CASCADE.
        if await self.get_by_id(entity_id) is None:
            return False
        await self._execute(delete(PostTopic).where(PostTopic.topic_id == entity_id))
        return await super().delete(entity_id)
