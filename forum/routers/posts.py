from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from forum.database import get_db
from forum.dependencies import get_identity
from forum.schemas import (
    CommentResponse,
    PostCreate,
    PostResponse,
    PostTopicsUpdate,
    PostUpdate,
    TopicResponse,
)
from forum.security import Identity
from forum.services import comment_service, post_service, topic_service

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

@router.get("", response_model=list[PostResponse])
async def list_posts(
    topic_id: int | None = Query(None, description="Only posts linked to this topic."),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.get_posts(db, topic_id)

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await post_service.get_post(db, post_id)

@router.post("", status_code=201, response_model=PostResponse)
async def create_post(
    data: PostCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.create_post(db, identity, data)

@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    data: PostUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.update_post(db, identity, post_id, data)

@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, identity, post_id)

@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_post_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comments_by_post(db, post_id)

@router.get("/{post_id}/topics", response_model=list[TopicResponse])
async def list_post_topics(post_id: int, db: AsyncSession = Depends(get_db)):
    return await topic_service.get_topics_by_post(db, post_id)

@router.put("/{post_id}/topics", response_model=list[TopicResponse])
async def set_post_topics(
    post_id: int,
    data: PostTopicsUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.set_post_topics(db, identity, post_id, data.topic_ids)
