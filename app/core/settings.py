# app/core/settings.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application Settings"""

    # Database
    DATABASE_URL: str

    # JWT (tokens are issued by the auth service, we only decode them)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"

    # Gemini Configuration
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GOOGLE_API_KEY: Optional[str] = None

    # Embedding Model
    OPENAI_API_KEY: Optional[str] = None
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: int = 1536

    # Qdrant (Cloud)
    QDRANT_URL: str
    QDRANT_API_KEY: Optional[str] = None
    QDRANT_COLLECTION_NAME: str = "form_records"
    QDRANT_TIMEOUT: int = 10  # seconds, HTTP timeout of the Qdrant client

    # Retrieval context budget
    RAG_TOP_K: int = 3
    RAG_SCORE_THRESHOLD: float = 0.5
    RAG_MATCH_MAX_CHARS: int = 1500
    RAG_CONTEXT_MAX_CHARS: int = 4500

    # Remote call timeouts (seconds)
    EMBEDDING_TIMEOUT: float = 20.0
    GENERATION_TIMEOUT: float = 60.0
    RETRIEVAL_TIMEOUT: float = 5.0
    PERSISTENCE_TIMEOUT: float = 10.0

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


# Singleton instance
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Default instance for backwards compatibility
settings = get_settings()
