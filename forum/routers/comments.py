from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from forum.database import get_db
from forum.dependencies import get_identity
from forum.schemas import CommentCreate, CommentResponse, CommentUpdate
from forum.security import Identity
from forum.services import comment_service

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])

@router.get("", response_model=list[CommentResponse])
async def list_comments(db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comments(db)

@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comment(db, comment_id)

@router.post("", status_code=201, response_model=CommentResponse)
async def create_comment(
    data: CommentCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.create_comment(db, identity, data)

@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    data: CommentUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.update_comment(db, identity, comment_id, data)

@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, identity, comment_id)
