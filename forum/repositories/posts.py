from sqlalchemy import delete, select

from forum.models import Comment, Post, PostTopic
from forum.repositories.base import SQLRepository


class PostRepository(SQLRepository[Post]):
    model = Post

    async def get_by_topic(self, topic_id: int) -> list[Post]:
        q = (
            select(Post)
            .join(PostTopic, PostTopic.post_id == Post.id)
            .where(PostTopic.topic_id == topic_id)
            .order_by(Post.id)
        )
        result = await self._execute(q)
        return list(result.scalars().all())

    async def get_by_author(self, author_id: int) -> list[Post]:
        result = await self._execute(
            select(Post).where(Post.author_id == author_id).order_by(Post.id)
        )
        return list(result.scalars().all())

    async def get_topic_ids(self, post_id: int) -> set[int]:
        result = await self._execute(
            select(PostTopic.topic_id).where(PostTopic.post_id == post_id)
        )
        return set(result.scalars().all())

    async def set_topics(self, post_id: int, topic_ids: set[int]) -> None:
        """Make the post's links exactly *topic_ids*, touching only the difference."""
        current = await self.get_topic_ids(post_id)
        removed = current - topic_ids
        if removed:
            await self._execute(
                delete(PostTopic).where(
                    PostTopic.post_id == post_id, PostTopic.topic_id.in_(sorted(removed))
                )
            )
        for topic_id in sorted(topic_ids - current):
            self.db.add(PostTopic(post_id=post_id, topic_id=topic_id))
        await self._flush()

    async def delete(self, entity_id: int) -> bool:
        if await self.get_by_id(entity_id) is None:
            return False
        await self._execute(delete(PostTopic).where(PostTopic.post_id == entity_id))
        await self._execute(delete(Comment).where(Comment.post_id == entity_id))
        return await super().delete(entity_id)
