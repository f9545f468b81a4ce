# app/agents/form_generator/schema_generator.py

import logging

from app.agents.form_generator.prompts import build_generation_prompt
from app.core.gemini_client import GeminiClient

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Asks the generative model for a form schema. Returns raw text, never parsed."""

    def __init__(self, llm: GeminiClient):
        self.llm = llm

    async def generate(self, prompt: str, context: str = "") -> str:
        full_prompt = build_generation_prompt(prompt, context)

        logger.info(f"Generating form schema | RAG context included: {len(context) > 0}")

        # GenerationUnavailable / GenerationServiceError propagate untouched
        raw = await self.llm.generate(full_prompt)

        logger.info("LLM generation completed successfully")
        return raw
