"""
Topic service: CRUD for the Topic resource.

Topic names are unique.  Topics have no owner, so update and delete only
require that the caller is authenticated (checked by the router).
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from forum.errors import AlreadyInUseError, DuplicateRecordError, NotFoundError, ValidationError
from forum.models import Topic
from forum.repositories import PostRepository, TopicRepository
from forum.schemas import TopicCreate, TopicUpdate

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("topic name must not be empty", field="name")
    return name


async def get_topics(db: AsyncSession) -> list[Topic]:
    return await TopicRepository(db).get_all()


async def get_topic(db: AsyncSession, topic_id: int) -> Topic:
    topic = await TopicRepository(db).get_by_id(topic_id)
    if topic is None:
        raise NotFoundError("topic", topic_id)
    return topic


async def get_topics_by_post(db: AsyncSession, post_id: int) -> list[Topic]:
    if await PostRepository(db).get_by_id(post_id) is None:
        raise NotFoundError("post", post_id)
    return await TopicRepository(db).get_by_post(post_id)


async def create_topic(db: AsyncSession, data: TopicCreate) -> Topic:
    name = _clean_name(data.name)
    topics = TopicRepository(db)
    if await topics.get_by_name(name) is not None:
        raise AlreadyInUseError("name")
    try:
        topic = await topics.create(Topic(name=name))
    except DuplicateRecordError:
        raise AlreadyInUseError("name")
    logger.info("Created topic id=%s name=%r", topic.id, topic.name)
    return topic


async def update_topic(db: AsyncSession, topic_id: int, data: TopicUpdate) -> Topic:
    topics = TopicRepository(db)
    topic = await topics.get_by_id(topic_id)
    if topic is None:
        raise NotFoundError("topic", topic_id)

    name = _clean_name(data.name)
    existing = await topics.get_by_name(name)
    if existing is not None and existing.id != topic_id:
        raise AlreadyInUseError("name")
    try:
        return await topics.update(topic_id, name=name)
    except DuplicateRecordError:
        raise AlreadyInUseError("name")


async def delete_topic(db: AsyncSession, topic_id: int) -> None:
    if not await TopicRepository(db).delete(topic_id):
        raise NotFoundError("topic", topic_id)
    logger.info("Deleted topic id=%s", topic_id)
