from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

# Async engine and session factory
async def get_engine(database_url: str):
    return create_async_engine(database_url)

async def get_session_factory(engine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autocommit=False, autoflush=False
    )

async def create_tables(engine) -> None:
    """Create any missing tables. Used for local runs and tests; deployments run alembic."""
    import docportal.db.models  # noqa: F401  (register mappers on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
