from fastapi import Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.errors import ConflictError, NotFound

from .models import User
from .repository import UserRepository
from .schemas import UserCreate, UserResponse, UserUpdate


def user_snapshot(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


def get_user_cache(request: Request) -> CacheAsideStore:
    resources = request.app.state.resources
    return CacheAsideStore(
        resources.redis,
        namespace="user",
        ttl=resources.settings.user_cache_ttl,
        loader=UserRepository.get_by_id,
        serializer=user_snapshot,
    )


class UserService:

    @staticmethod
    async def list_users(db: AsyncSession) -> list[User]:
        return await UserRepository.get_all(db)

    @staticmethod
    async def get_user(db: AsyncSession, cache: CacheAsideStore, user_id: int) -> dict:
        user = await cache.get(db, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    @staticmethod
    async def create_user(db: AsyncSession, data: UserCreate) -> User:
        user = User(name=data.name, email=data.email, phone=data.phone, address=data.address)
        try:
            return await UserRepository.create(db, user)
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Email already exists")

    @staticmethod
    async def update_user(db: AsyncSession, cache: CacheAsideStore, user_id: int, data: UserUpdate) -> User:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")

        # Full replacement: omitted optional fields are cleared
        user.name = data.name
        user.email = data.email
        user.phone = data.phone
        user.address = data.address
        try:
            user = await UserRepository.update(db, user)
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Email already exists")

        await cache.put_invalidate(user_id)
        return user

    @staticmethod
    async def delete_user(db: AsyncSession, cache: CacheAsideStore, user_id: int) -> None:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")
        await UserRepository.delete(db, user)
        await cache.put_invalidate(user_id)
