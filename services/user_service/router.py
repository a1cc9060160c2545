from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.config.database import get_db

from .schemas import UserCreate, UserResponse, UserUpdate
from .service import UserService, get_user_cache

router = APIRouter(tags=["Users"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health/status", include_in_schema=False)
async def health_check():
    return {"status": "User Service is running"}


@router.get("/", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await UserService.list_users(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_user_cache),
):
    return await UserService.get_user(db, cache, user_id)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    return await UserService.create_user(db, payload)


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_user_cache),
):
    await UserService.update_user(db, cache, user_id, payload)
    return {"message": "User updated successfully"}


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_user_cache),
):
    await UserService.delete_user(db, cache, user_id)
    return {"message": "User deleted successfully"}
