# app/core/database.py
"""
Async Postgres engine and session factory for form records and submissions
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.core.settings import settings
import logging

logger = logging.getLogger(__name__)

# Saves are bounded by PERSISTENCE_TIMEOUT, so the driver limits stay close to it
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_size=5,
    max_overflow=10,
    pool_timeout=settings.PERSISTENCE_TIMEOUT,
    pool_recycle=1800,
    pool_pre_ping=True,
    connect_args={
        "server_settings": {
            "application_name": "FormGen",
        },
        "timeout": settings.PERSISTENCE_TIMEOUT,
        "command_timeout": settings.PERSISTENCE_TIMEOUT,
    }
)

# FormRecords are read back after commit, keep their attributes loaded
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def check_connection() -> None:
    """Round trip to Postgres, raises if the database is unreachable"""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def init_db():
    """Create the forms and form_submissions tables if missing"""
    # Register models on Base.metadata
    from app.models import forms, form_submission  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Database initialized")
