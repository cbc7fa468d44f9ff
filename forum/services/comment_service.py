"""
Comment service: business rules for the Comment resource.

Comments follow the same pattern as posts: the caller can only write
comments as themselves, and only the comment's author may edit or delete
it.  The parent post and the author must both exist at creation time.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from forum.errors import NotFoundError, UnauthorizedError, ValidationError
from forum.models import Comment
from forum.repositories import CommentRepository, PostRepository, UserRepository
from forum.schemas import CommentCreate, CommentUpdate
from forum.security import Identity

logger = logging.getLogger(__name__)


def _validate_content(content: str) -> None:
    if not content.strip():
        raise ValidationError("content must not be empty", field="content")


async def _load_owned(db: AsyncSession, identity: Identity, comment_id: int) -> Comment:
    comment = await CommentRepository(db).get_by_id(comment_id)
    if comment is None:
        raise NotFoundError("comment", comment_id)
    if comment.author_id is None or comment.author_id != identity.user_id:
        raise UnauthorizedError("only the author may modify this comment")
    return comment


async def get_comments(db: AsyncSession) -> list[Comment]:
    return await CommentRepository(db).get_all()


async def get_comment(db: AsyncSession, comment_id: int) -> Comment:
    comment = await CommentRepository(db).get_by_id(comment_id)
    if comment is None:
        raise NotFoundError("comment", comment_id)
    return comment


async def get_comments_by_post(db: AsyncSession, post_id: int) -> list[Comment]:
    if await PostRepository(db).get_by_id(post_id) is None:
        raise NotFoundError("post", post_id)
    return await CommentRepository(db).get_by_post(post_id)


async def create_comment(db: AsyncSession, identity: Identity, data: CommentCreate) -> Comment:
    _validate_content(data.content)

    if await UserRepository(db).get_by_id(data.author_id) is None:
        raise ValidationError(f"no author with ID {data.author_id}", field="author_id")
    if data.author_id != identity.user_id:
        raise UnauthorizedError("comments can only be created for the authenticated user")
    if await PostRepository(db).get_by_id(data.post_id) is None:
        raise ValidationError(f"no post with ID {data.post_id}", field="post_id")

    comment = await CommentRepository(db).create(
        Comment(content=data.content, post_id=data.post_id, author_id=data.author_id)
    )
    logger.info("User %s commented on post %s", identity.user_id, data.post_id)
    return comment


async def update_comment(
    db: AsyncSession, identity: Identity, comment_id: int, data: CommentUpdate
) -> Comment:
    await _load_owned(db, identity, comment_id)
    _validate_content(data.content)
    return await CommentRepository(db).update(comment_id, content=data.content)


async def delete_comment(db: AsyncSession, identity: Identity, comment_id: int) -> None:
    await _load_owned(db, identity, comment_id)
    await CommentRepository(db).delete(comment_id)
    logger.info("User %s deleted comment %s", identity.user_id, comment_id)
