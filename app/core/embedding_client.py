import asyncio
import logging
from typing import List, Optional

import openai
from openai import AsyncOpenAI

from app.core.exceptions import (
    ConfigurationError,
    EmbeddingServiceError,
    EmbeddingUnavailable,
)
from app.core.settings import Settings

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 30000


class EmbeddingClient:
    """
    OpenAI Embedding client using text-embedding-3-small
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
        timeout: float = 20.0,
        client: Optional[AsyncOpenAI] = None
    ):
        if not api_key:
            raise ConfigurationError(
                "Missing OpenAI credentials. Set the OPENAI_API_KEY environment variable."
            )

        # No retries here, the caller owns retry policy
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.dimensions = dimensions
        self.timeout = timeout
        logger.info(f"✅ Initialized OpenAI embedding client with {self.model}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmbeddingClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.EMBEDDING_MODEL,
            dimensions=settings.EMBEDDING_DIMENSIONS,
            timeout=settings.EMBEDDING_TIMEOUT,
        )

    async def embed(self, text: str) -> List[float]:
        """
        Generate embedding using OpenAI API

        Args:
            text: Text to embed

        Returns:
            List of floats (embedding vector)

        Raises:
            EmbeddingUnavailable: endpoint unreachable, timed out or rejected our key
            EmbeddingServiceError: any other remote failure
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        # Truncate if too long (OpenAI limit is ~8191 tokens)
        if len(text) > MAX_INPUT_CHARS:  # Rough character estimate
            logger.warning(f"Text too long ({len(text)} chars), truncating")
            text = text[:MAX_INPUT_CHARS]

        try:
            response = await asyncio.wait_for(
                self.client.embeddings.create(
                    model=self.model,
                    input=text,
                    encoding_format="float"
                ),
                timeout=self.timeout
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            logger.error(f"OpenAI embedding timed out after {self.timeout}s")
            raise EmbeddingUnavailable(f"Embedding request timed out after {self.timeout}s") from e
        except openai.APIConnectionError as e:
            logger.error(f"OpenAI embedding endpoint unreachable: {e}")
            raise EmbeddingUnavailable(f"Embedding endpoint unreachable: {e}") from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            logger.error(f"OpenAI rejected embedding credentials: {e}")
            raise EmbeddingUnavailable(f"Embedding provider rejected credentials: {e}") from e
        except openai.APIError as e:
            logger.error(f"OpenAI embedding failed: {e}")
            raise EmbeddingServiceError(f"Failed to generate embedding: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected OpenAI embedding failure: {e!r}")
            raise EmbeddingServiceError(f"Failed to generate embedding: {e!r}") from e

        try:
            embedding = list(response.data[0].embedding)
        except (AttributeError, IndexError, TypeError) as e:
            raise EmbeddingServiceError(f"Malformed embedding response: {e!r}") from e

        if len(embedding) != self.dimensions:
            raise EmbeddingServiceError(
                f"Embedding dimension mismatch: expected {self.dimensions}, got {len(embedding)}"
            )

        logger.debug(f"✅ Generated embedding: {len(embedding)} dimensions")
        return embedding
