from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator
from fastapi import Request
import logging

logger = logging.getLogger(__name__)


# Session dependency for FastAPI routes
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield a database session using the shared engine
    This will be used as a FastAPI dependency
    """
    async_session = request.app.state.session_factory

    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
