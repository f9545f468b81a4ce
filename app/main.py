from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from app.agents.form_generator.form_generator_agent import get_form_generator_agent
from app.core.database import check_connection, engine, init_db
from app.core.logging import configure_logging
from app.core.settings import settings
from app.routes import forms

logger = logging.getLogger(__name__)

status_flags = {
    "database_connected": False,
    "index_ready": False,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup checks for the generation service.
    Missing provider credentials abort startup; an unreachable database or
    index is logged and reported on the banner route.
    """
    configure_logging(settings.LOG_LEVEL)

    # Raises ConfigurationError when a provider key is missing
    agent = get_form_generator_agent()

    try:
        await check_connection()
        await init_db()
        status_flags["database_connected"] = True
        logger.info("✅ Database connected successfully.")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")

    try:
        await agent.services.index.ensure_collection()
        status_flags["index_ready"] = True
    except Exception as e:
        # Generation still works, retrieval degrades to no context
        logger.warning(f"⚠️ Qdrant collection check failed: {e}")

    yield

    await engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(
    title="AI Form Generator",
    lifespan=lifespan
)

app.include_router(forms.router)


@app.get("/")
async def root():
    return {
        "message": "AI Form Generator Running",
        **status_flags
    }
