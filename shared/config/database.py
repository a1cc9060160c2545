from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import AsyncAdaptedQueuePool

Base = declarative_base()


class Database:
    """
    Owns the async engine and its bounded connection pool.

    The pool never overflows: once `pool_size` connections are checked out,
    further callers wait (up to `pool_timeout` seconds) for one to be returned.
    Created at process start and disposed at shutdown by ServiceResources.
    """

    def __init__(self, url: str, pool_size: int = 10, pool_timeout: float = 30.0, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(
            url,
            echo=echo,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
        )
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_all(self, tables: Optional[list] = None) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=tables)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request):
    database: Database = request.app.state.resources.database
    async with database.sessionmaker() as session:
        yield session

