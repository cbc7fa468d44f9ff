from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from forum.database import get_db
from forum.dependencies import get_identity
from forum.schemas import LoginRequest, TokenResponse, UserResponse
from forum.security import Identity
from forum.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.login(db, data)

@router.get("/me", response_model=UserResponse)
async def me(identity: Identity = Depends(get_identity), db: AsyncSession = Depends(get_db)):
    return await auth_service.current_user(db, identity)
