from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from forum.database import get_db
from forum.dependencies import get_identity
from forum.schemas import PostResponse, TopicCreate, TopicResponse, TopicUpdate
from forum.services import post_service, topic_service

router = APIRouter(prefix="/api/v1/topics", tags=["topics"])

@router.get("", response_model=list[TopicResponse])
async def list_topics(db: AsyncSession = Depends(get_db)):
    return await topic_service.get_topics(db)

@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(topic_id: int, db: AsyncSession = Depends(get_db)):
    return await topic_service.get_topic(db, topic_id)

@router.get("/{topic_id}/posts", response_model=list[PostResponse])
async def list_topic_posts(topic_id: int, db: AsyncSession = Depends(get_db)):
    await topic_service.get_topic(db, topic_id)
    return await post_service.get_posts(db, topic_id)

# Topics have no owner: any authenticated user may manage them.
@router.post("", status_code=201, response_model=TopicResponse, dependencies=[Depends(get_identity)])
async def create_topic(data: TopicCreate, db: AsyncSession = Depends(get_db)):
    return await topic_service.create_topic(db, data)

@router.patch("/{topic_id}", response_model=TopicResponse, dependencies=[Depends(get_identity)])
async def update_topic(topic_id: int, data: TopicUpdate, db: AsyncSession = Depends(get_db)):
    return await topic_service.update_topic(db, topic_id, data)

@router.delete("/{topic_id}", status_code=204, dependencies=[Depends(get_identity)])
async def delete_topic(topic_id: int, db: AsyncSession = Depends(get_db)):
    await topic_service.delete_topic(db, topic_id)
