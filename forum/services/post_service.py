"""
Post service: business rules for the Post resource.

Design notes
------------
- Field rules (non-empty title, minimum content length) are checked before
  any repository call, so an invalid payload never reaches storage.
- Author existence is verified with an explicit user lookup rather than
  left to the foreign key, so a missing author surfaces as a
  ``ValidationError`` instead of a generic constraint failure.
- Ownership is ``post.author_id == identity.user_id``, decided after the
  post has been loaded.  A post whose author was deleted (author_id NULL)
  cannot be modified by anyone.
- Topic links are stored as explicit ``PostTopic`` rows; duplicate ids in
  a request collapse to one link.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from forum.config import settings
from forum.errors import NotFoundError, UnauthorizedError, ValidationError
from forum.models import Post
from forum.repositories import PostRepository, TopicRepository, UserRepository
from forum.schemas import PostCreate, PostUpdate
from forum.security import Identity

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _validate_fields(title: str, content: str) -> None:
    if not title.strip():
        raise ValidationError("title must not be empty", field="title")
    min_length = settings.POST_CONTENT_MIN_LENGTH
    if len(content) < min_length:
        raise ValidationError(
            f"content must be at least {min_length} characters long", field="content"
        )


def _check_owner(post: Post, identity: Identity) -> None:
    if post.author_id is None or post.author_id != identity.user_id:
        logger.warning(
            "User %s attempted to modify post %s owned by %s",
            identity.user_id, post.id, post.author_id,
        )
        raise UnauthorizedError("only the author may modify this post")


async def _resolve_topic_ids(db: AsyncSession, topic_ids: list[int]) -> set[int]:
    """Return the distinct ids, failing when any of them is not a topic."""
    wanted = set(topic_ids)
    found = {t.id for t in await TopicRepository(db).get_many(sorted(wanted))}
    missing = sorted(wanted - found)
    if missing:
        raise ValidationError(
            f"no topic with ID {', '.join(str(i) for i in missing)}",
            field="topic_ids",
        )
    return wanted


async def _load_owned(db: AsyncSession, identity: Identity, post_id: int) -> Post:
    post = await PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("post", post_id)
    _check_owner(post, identity)
    return post


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_posts(db: AsyncSession, topic_id: int | None = None) -> list[Post]:
    """Return every post, or only those linked to *topic_id* when given."""
    posts = PostRepository(db)
    if topic_id is None:
        return await posts.get_all()
    return await posts.get_by_topic(topic_id)


async def get_posts_by_author(db: AsyncSession, user_id: int) -> list[Post]:
    if await UserRepository(db).get_by_id(user_id) is None:
        raise NotFoundError("user", user_id)
    return await PostRepository(db).get_by_author(user_id)


async def get_post(db: AsyncSession, post_id: int) -> Post:
    post = await PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("post", post_id)
    return post


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_post(db: AsyncSession, identity: Identity, data: PostCreate) -> Post:
    """
    Create a post authored by *identity*.

    Checks run in this order, and nothing is written unless all pass:
    field rules, the author exists, ``author_id`` matches the caller, every
    requested topic exists.
    """
    _validate_fields(data.title, data.content)

    if await UserRepository(db).get_by_id(data.author_id) is None:
        raise ValidationError(f"no author with ID {data.author_id}", field="author_id")

    if data.author_id != identity.user_id:
        raise UnauthorizedError("posts can only be created for the authenticated user")

    topic_ids = await _resolve_topic_ids(db, data.topic_ids)

    posts = PostRepository(db)
    post = await posts.create(
        Post(title=data.title, content=data.content, author_id=data.author_id)
    )
    if topic_ids:
        await posts.set_topics(post.id, topic_ids)

    logger.info("User %s created post %s", identity.user_id, post.id)
    return post


async def update_post(
    db: AsyncSession, identity: Identity, post_id: int, data: PostUpdate
) -> Post:
    """Replace title and content of a post owned by *identity*."""
    await _load_owned(db, identity, post_id)
    _validate_fields(data.title, data.content)
    post = await PostRepository(db).update(post_id, title=data.title, content=data.content)
    logger.info("User %s updated post %s", identity.user_id, post_id)
    return post


async def delete_post(db: AsyncSession, identity: Identity, post_id: int) -> None:
    """Delete a post owned by *identity*, together with its comments and topic links."""
    await _load_owned(db, identity, post_id)
    await PostRepository(db).delete(post_id)
    logger.info("User %s deleted post %s", identity.user_id, post_id)


async def set_post_topics(
    db: AsyncSession, identity: Identity, post_id: int, topic_ids: list[int]
):
    """Replace the topics of a post owned by *identity*; returns the new topic list."""
    await _load_owned(db, identity, post_id)
    wanted = await _resolve_topic_ids(db, topic_ids)
    await PostRepository(db).set_topics(post_id, wanted)
    return await TopicRepository(db).get_by_post(post_id)
