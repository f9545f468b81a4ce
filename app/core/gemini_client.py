import asyncio
import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors

from app.core.exceptions import (
    ConfigurationError,
    GenerationServiceError,
    GenerationUnavailable,
)
from app.core.settings import Settings

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        timeout: float = 60.0,
        client: Optional[genai.Client] = None
    ):
        if not api_key:
            raise ConfigurationError(
                "Missing Gemini credentials. Set the GOOGLE_API_KEY environment variable."
            )

        self.client = client or genai.Client(
            api_key=api_key,
            http_options={"api_version": "v1"}
        )
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.GOOGLE_API_KEY,
            model=settings.GEMINI_MODEL,
            timeout=settings.GENERATION_TIMEOUT,
        )

    async def generate(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                ),
                timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini generation timed out after {self.timeout}s")
            raise GenerationUnavailable(f"Generation timed out after {self.timeout}s") from e
        except httpx.TransportError as e:
            logger.error(f"Gemini endpoint unreachable: {e}")
            raise GenerationUnavailable(f"Generation endpoint unreachable: {e}") from e
        except genai_errors.APIError as e:
            if e.code in (401, 403):
                logger.error(f"Gemini rejected credentials: {e}")
                raise GenerationUnavailable(f"Generation provider rejected credentials: {e}") from e
            logger.error(f"Gemini generation failed: {e}")
            raise GenerationServiceError(f"Failed to generate form schema: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected Gemini failure: {e!r}")
            raise GenerationServiceError(f"Failed to generate form schema: {e!r}") from e

        try:
            text = response.text
        except (AttributeError, ValueError) as e:
            raise GenerationServiceError(f"Malformed LLM response: {e!r}") from e

        if not text:
            raise GenerationServiceError("Empty LLM response")

        return text
