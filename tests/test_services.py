"""
Direct service-layer tests: business rules without HTTP in between.

Each test seeds what it needs through the ORM and calls the service
functions with an explicit Identity, which is how the routers call them
once the bearer token has been validated.
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.errors import (
    AlreadyInUseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from forum.models import Comment, Post, PostTopic, Topic, User
from forum.schemas import (
    CommentCreate,
    CommentUpdate,
    PostCreate,
    PostUpdate,
    TopicCreate,
    TopicUpdate,
    UserCreate,
)
from forum.security import Identity
from forum.services import comment_service, post_service, topic_service, user_service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_user(db: AsyncSession, username: str = "alice") -> User:
    user = User(username=username)
    db.add(user)
    await db.flush()
    return user


def _identity(user: User) -> Identity:
    return Identity(user_id=user.id, username=user.username)


async def _create_post(db: AsyncSession, user: User, **overrides) -> Post:
    data = {
        "title": "Hello forum",
        "content": "This is long enough content.",
        "author_id": user.id,
    }
    data.update(overrides)
    return await post_service.create_post(db, _identity(user), PostCreate(**data))


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# ---------------------------------------------------------------------------
# user_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_user_via_service(db_session: AsyncSession):
    user = await user_service.create_user(db_session, UserCreate(username="  bob  "))
    assert user.id is not None
    assert user.username == "bob"
    assert user.created_at is not None


@pytest.mark.asyncio
async def test_create_user_duplicate_username(db_session: AsyncSession):
    await user_service.create_user(db_session, UserCreate(username="bob"))
    with pytest.raises(AlreadyInUseError) as exc_info:
        await user_service.create_user(db_session, UserCreate(username="bob"))
    assert exc_info.value.field == "username"
    assert await _count(db_session, User) == 1


@pytest.mark.asyncio
async def test_create_user_blank_username(db_session: AsyncSession):
    with pytest.raises(ValidationError):
        await user_service.create_user(db_session, UserCreate(username="   "))


@pytest.mark.asyncio
async def test_get_user_not_found(db_session: AsyncSession):
    with pytest.raises(NotFoundError) as exc_info:
        await user_service.get_user(db_session, 99999)
    assert exc_info.value.resource_id == 99999


@pytest.mark.asyncio
async def test_get_users_via_service(db_session: AsyncSession):
    await _create_user(db_session, "u1")
    await _create_user(db_session, "u2")
    users = await user_service.get_users(db_session)
    assert [u.username for u in users] == ["u1", "u2"]


# ---------------------------------------------------------------------------
# post_service: create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_post_via_service(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    assert post.id is not None
    assert post.author_id == user.id
    assert post.created_at is not None
    assert post.updated_at is not None


@pytest.mark.asyncio
async def test_create_post_short_content_fails_before_storage(db_session: AsyncSession):
    user = await _create_user(db_session)
    with pytest.raises(ValidationError) as exc_info:
        await _create_post(db_session, user, title="T", content="short")
    assert exc_info.value.field == "content"
    assert await _count(db_session, Post) == 0


@pytest.mark.asyncio
async def test_create_post_content_exactly_min_length(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user, content="x" * 10)
    assert post.content == "x" * 10


@pytest.mark.asyncio
async def test_create_post_blank_title(db_session: AsyncSession):
    user = await _create_user(db_session)
    with pytest.raises(ValidationError):
        await _create_post(db_session, user, title="   ")


@pytest.mark.asyncio
async def test_create_post_unknown_author(db_session: AsyncSession):
    """An identity whose user row is gone cannot author a post."""
    ghost = Identity(user_id=424242, username="ghost")
    data = PostCreate(title="Ghost post", content="Nobody wrote this one.", author_id=424242)
    with pytest.raises(ValidationError) as exc_info:
        await post_service.create_post(db_session, ghost, data)
    assert "no author with ID 424242" in exc_info.value.message
    assert await _count(db_session, Post) == 0


@pytest.mark.asyncio
async def test_create_post_nonexistent_author_by_real_user(db_session: AsyncSession):
    """A missing author is a validation error even when the caller is someone else."""
    alice = await _create_user(db_session, "alice")
    data = PostCreate(title="T", content="long enough content", author_id=999)
    with pytest.raises(ValidationError) as exc_info:
        await post_service.create_post(db_session, _identity(alice), data)
    assert exc_info.value.kind.value == "validation_error"
    assert exc_info.value.field == "author_id"
    assert await _count(db_session, Post) == 0


@pytest.mark.asyncio
async def test_create_post_for_someone_else(db_session: AsyncSession):
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    data = PostCreate(title="Impostor", content="Written by alice as bob.", author_id=bob.id)
    with pytest.raises(UnauthorizedError):
        await post_service.create_post(db_session, _identity(alice), data)
    assert await _count(db_session, Post) == 0


@pytest.mark.asyncio
async def test_create_post_with_topics(db_session: AsyncSession):
    user = await _create_user(db_session)
    golang = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    python = await topic_service.create_topic(db_session, TopicCreate(name="python"))
    post = await _create_post(db_session, user, topic_ids=[golang.id, python.id, golang.id])
    topics = await topic_service.get_topics_by_post(db_session, post.id)
    assert [t.name for t in topics] == ["golang", "python"]


@pytest.mark.asyncio
async def test_create_post_with_unknown_topic(db_session: AsyncSession):
    user = await _create_user(db_session)
    with pytest.raises(ValidationError) as exc_info:
        await _create_post(db_session, user, topic_ids=[77])
    assert exc_info.value.field == "topic_ids"
    assert await _count(db_session, Post) == 0


# ---------------------------------------------------------------------------
# post_service: reads
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_post_twice_returns_same_data(db_session: AsyncSession):
    user = await _create_user(db_session)
    created = await _create_post(db_session, user)
    first = await post_service.get_post(db_session, created.id)
    second = await post_service.get_post(db_session, created.id)
    fields = ("id", "title", "content", "author_id", "created_at", "updated_at")
    assert [getattr(first, f) for f in fields] == [getattr(second, f) for f in fields]


@pytest.mark.asyncio
async def test_get_post_not_found(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await post_service.get_post(db_session, 99999)


@pytest.mark.asyncio
async def test_get_posts_by_topic(db_session: AsyncSession):
    user = await _create_user(db_session)
    golang = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    python = await topic_service.create_topic(db_session, TopicCreate(name="python"))
    p1 = await _create_post(db_session, user, title="Go 1", topic_ids=[golang.id])
    await _create_post(db_session, user, title="Py 1", topic_ids=[python.id])
    p3 = await _create_post(db_session, user, title="Both", topic_ids=[golang.id, python.id])

    posts = await post_service.get_posts(db_session, topic_id=golang.id)
    assert [p.id for p in posts] == [p1.id, p3.id]
    assert len(await post_service.get_posts(db_session)) == 3
    assert await post_service.get_posts(db_session, topic_id=99999) == []


@pytest.mark.asyncio
async def test_get_posts_by_author(db_session: AsyncSession):
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    await _create_post(db_session, alice)
    await _create_post(db_session, bob)
    posts = await post_service.get_posts_by_author(db_session, alice.id)
    assert [p.author_id for p in posts] == [alice.id]
    with pytest.raises(NotFoundError):
        await post_service.get_posts_by_author(db_session, 99999)


# ---------------------------------------------------------------------------
# post_service: update / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_post_via_service(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    updated = await post_service.update_post(
        db_session, _identity(user), post.id,
        PostUpdate(title="New title", content="Completely new content."),
    )
    assert updated.id == post.id
    assert updated.title == "New title"
    assert updated.content == "Completely new content."


@pytest.mark.asyncio
async def test_update_post_by_non_author_leaves_post_unchanged(db_session: AsyncSession):
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    post = await _create_post(db_session, bob, content="Bob's original content.")

    with pytest.raises(UnauthorizedError):
        await post_service.update_post(
            db_session, _identity(alice), post.id,
            PostUpdate(title="Hijacked", content="Alice was here, sorry."),
        )
    reloaded = await post_service.get_post(db_session, post.id)
    assert reloaded.content == "Bob's original content."
    assert reloaded.title == "Hello forum"


@pytest.mark.asyncio
async def test_ownership_uses_author_not_post_id(db_session: AsyncSession):
    """User 1 must not be able to edit post 1 just because the ids match."""
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    bobs_post = await _create_post(db_session, bob)
    assert bobs_post.id == alice.id
    with pytest.raises(UnauthorizedError):
        await post_service.delete_post(db_session, _identity(alice), bobs_post.id)


@pytest.mark.asyncio
async def test_update_post_short_content(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    with pytest.raises(ValidationError):
        await post_service.update_post(
            db_session, _identity(user), post.id, PostUpdate(title="T", content="tiny")
        )


@pytest.mark.asyncio
async def test_update_nonexistent_post(db_session: AsyncSession):
    user = await _create_user(db_session)
    with pytest.raises(NotFoundError):
        await post_service.update_post(
            db_session, _identity(user), 99999,
            PostUpdate(title="Ghost", content="Nothing to update here."),
        )


@pytest.mark.asyncio
async def test_update_orphaned_post_is_refused(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    post.author_id = None
    await db_session.flush()
    with pytest.raises(UnauthorizedError):
        await post_service.update_post(
            db_session, _identity(user), post.id,
            PostUpdate(title="Reclaim", content="Trying to reclaim the post."),
        )


@pytest.mark.asyncio
async def test_delete_post_twice(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    await post_service.delete_post(db_session, _identity(user), post.id)
    with pytest.raises(NotFoundError):
        await post_service.delete_post(db_session, _identity(user), post.id)


@pytest.mark.asyncio
async def test_delete_post_removes_comments_and_links(db_session: AsyncSession):
    user = await _create_user(db_session)
    topic = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    post = await _create_post(db_session, user, topic_ids=[topic.id])
    await comment_service.create_comment(
        db_session, _identity(user),
        CommentCreate(content="First!", post_id=post.id, author_id=user.id),
    )

    await post_service.delete_post(db_session, _identity(user), post.id)
    assert await _count(db_session, Comment) == 0
    assert await _count(db_session, PostTopic) == 0
    assert await _count(db_session, Topic) == 1


# ---------------------------------------------------------------------------
# post_service: topics
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_set_post_topics_replaces_links(db_session: AsyncSession):
    user = await _create_user(db_session)
    a = await topic_service.create_topic(db_session, TopicCreate(name="a"))
    b = await topic_service.create_topic(db_session, TopicCreate(name="b"))
    c = await topic_service.create_topic(db_session, TopicCreate(name="c"))
    post = await _create_post(db_session, user, topic_ids=[a.id, b.id])

    topics = await post_service.set_post_topics(
        db_session, _identity(user), post.id, [b.id, c.id, c.id]
    )
    assert [t.name for t in topics] == ["b", "c"]
    assert await _count(db_session, PostTopic) == 2


@pytest.mark.asyncio
async def test_set_post_topics_by_non_author(db_session: AsyncSession):
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    topic = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    post = await _create_post(db_session, bob)
    with pytest.raises(UnauthorizedError):
        await post_service.set_post_topics(db_session, _identity(alice), post.id, [topic.id])
    assert await _count(db_session, PostTopic) == 0


# ---------------------------------------------------------------------------
# comment_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_comment_lifecycle_via_service(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    comment = await comment_service.create_comment(
        db_session, _identity(user),
        CommentCreate(content="Nice post", post_id=post.id, author_id=user.id),
    )
    assert comment.post_id == post.id

    updated = await comment_service.update_comment(
        db_session, _identity(user), comment.id, CommentUpdate(content="Edited")
    )
    assert updated.content == "Edited"
    assert [c.id for c in await comment_service.get_comments_by_post(db_session, post.id)] == [comment.id]

    await comment_service.delete_comment(db_session, _identity(user), comment.id)
    with pytest.raises(NotFoundError):
        await comment_service.get_comment(db_session, comment.id)
    with pytest.raises(NotFoundError):
        await comment_service.delete_comment(db_session, _identity(user), comment.id)


@pytest.mark.asyncio
async def test_comment_on_missing_post(db_session: AsyncSession):
    user = await _create_user(db_session)
    with pytest.raises(ValidationError) as exc_info:
        await comment_service.create_comment(
            db_session, _identity(user),
            CommentCreate(content="Hello?", post_id=99999, author_id=user.id),
        )
    assert exc_info.value.field == "post_id"


@pytest.mark.asyncio
async def test_comment_with_nonexistent_author(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    with pytest.raises(ValidationError) as exc_info:
        await comment_service.create_comment(
            db_session, _identity(user),
            CommentCreate(content="Who am I?", post_id=post.id, author_id=999),
        )
    assert exc_info.value.field == "author_id"
    assert await _count(db_session, Comment) == 0


@pytest.mark.asyncio
async def test_comment_blank_content(db_session: AsyncSession):
    user = await _create_user(db_session)
    post = await _create_post(db_session, user)
    with pytest.raises(ValidationError):
        await comment_service.create_comment(
            db_session, _identity(user),
            CommentCreate(content="  ", post_id=post.id, author_id=user.id),
        )


@pytest.mark.asyncio
async def test_comment_edit_by_non_author(db_session: AsyncSession):
    alice = await _create_user(db_session, "alice")
    bob = await _create_user(db_session, "bob")
    post = await _create_post(db_session, alice)
    comment = await comment_service.create_comment(
        db_session, _identity(bob),
        CommentCreate(content="Bob says hi", post_id=post.id, author_id=bob.id),
    )
    with pytest.raises(UnauthorizedError):
        await comment_service.update_comment(
            db_session, _identity(alice), comment.id, CommentUpdate(content="Alice edits")
        )
    with pytest.raises(UnauthorizedError):
        await comment_service.delete_comment(db_session, _identity(alice), comment.id)
    assert (await comment_service.get_comment(db_session, comment.id)).content == "Bob says hi"


@pytest.mark.asyncio
async def test_comments_by_missing_post(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await comment_service.get_comments_by_post(db_session, 99999)


# ---------------------------------------------------------------------------
# topic_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_topic_twice(db_session: AsyncSession):
    await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    with pytest.raises(AlreadyInUseError) as exc_info:
        await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    assert exc_info.value.field == "name"
    assert exc_info.value.message == "name already in use"
    assert await _count(db_session, Topic) == 1


@pytest.mark.asyncio
async def test_rename_topic(db_session: AsyncSession):
    golang = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    await topic_service.create_topic(db_session, TopicCreate(name="python"))

    renamed = await topic_service.update_topic(db_session, golang.id, TopicUpdate(name="go"))
    assert renamed.name == "go"
    # Renaming to its own name is not a collision.
    same = await topic_service.update_topic(db_session, golang.id, TopicUpdate(name="go"))
    assert same.name == "go"
    with pytest.raises(AlreadyInUseError):
        await topic_service.update_topic(db_session, golang.id, TopicUpdate(name="python"))
    with pytest.raises(NotFoundError):
        await topic_service.update_topic(db_session, 99999, TopicUpdate(name="rust"))


@pytest.mark.asyncio
async def test_delete_topic_keeps_posts(db_session: AsyncSession):
    user = await _create_user(db_session)
    topic = await topic_service.create_topic(db_session, TopicCreate(name="golang"))
    post = await _create_post(db_session, user, topic_ids=[topic.id])

    await topic_service.delete_topic(db_session, topic.id)
    assert await _count(db_session, PostTopic) == 0
    assert (await post_service.get_post(db_session, post.id)).id == post.id
    with pytest.raises(NotFoundError):
        await topic_service.delete_topic(db_session, topic.id)
