# app/agents/form_generator/form_generator_agent.py
import asyncio
import logging
import time
from typing import Optional

from app.agents.form_generator.context import ContextAssembler
from app.agents.form_generator.graph import form_generator_graph
from app.agents.form_generator.schema_generator import SchemaGenerator
from app.agents.form_generator.schema_parser import SchemaParser
from app.agents.form_generator.services import PipelineServices
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.database import AsyncSessionLocal
from app.core.embedding_client import EmbeddingClient
from app.core.form_store import FormStore
from app.core.gemini_client import GeminiClient
from app.core.qdrant_client import QdrantFormIndex
from app.core.settings import Settings, get_settings
from app.schemas.forms import FormRecord

logger = logging.getLogger(__name__)

MIN_PROMPT_LENGTH = 5


class FormGeneratorAgent:
    """
    Form generation pipeline using LangGraph

    Flow:
    1. Embed Prompt -> vector for the user's request (fatal on failure)
    2. Retrieve Context -> owner's similar past forms (degrades to none)
    3. Generate Schema -> Gemini call with context
    4. Parse Schema -> strict validation of the model output
    5. Embed Summary -> vector for the new form
    6. Persist Form -> row + index point, all or nothing
    """

    def __init__(self, services: PipelineServices):
        self.services = services
        self.graph = form_generator_graph

    async def run(
        self,
        prompt: str,
        owner_id: str,
        cancel_event: Optional[asyncio.Event] = None
    ) -> GenerationState:
        """
        Execute the pipeline and return its final state

        Args:
            prompt: User description of the form
            owner_id: Owner the retrieval is scoped to and the form belongs to
            cancel_event: Set it to stop the run before its next stage

        Returns:
            Final state; ``stage`` is DONE or FAILED
        """
        prompt = (prompt or "").strip()
        if len(prompt) < MIN_PROMPT_LENGTH:
            raise ValueError(f"Prompt must be at least {MIN_PROMPT_LENGTH} characters long")

        logger.info(f"🚀 Form generation started for owner {owner_id}")
        start_time = time.time()

        initial_state: GenerationState = {
            "prompt": prompt,
            "owner_id": owner_id,
            "stage": PipelineStage.EMBEDDING,
            "failed_stage": None,
            "matches": [],
            "context": "",
            "error": None,
        }

        final_state = await self.graph.ainvoke(
            initial_state,
            config={
                "configurable": {
                    "services": self.services,
                    "cancel_event": cancel_event,
                }
            }
        )

        elapsed = time.time() - start_time

        if final_state.get("error"):
            logger.error(
                f"❌ Form generation failed at {final_state['failed_stage'].value} "
                f"after {elapsed:.2f}s: {final_state['error']}"
            )
        else:
            logger.info(
                f"✅ Form generation complete in {elapsed:.2f}s. "
                f"Fields: {len(final_state['record'].content.fields)}, "
                f"RAG matches: {len(final_state.get('matches') or [])}"
            )

        return final_state

    async def generate(
        self,
        prompt: str,
        owner_id: str,
        cancel_event: Optional[asyncio.Event] = None
    ) -> FormRecord:
        """Run the pipeline and return the stored form, raising the failure otherwise"""
        final_state = await self.run(prompt, owner_id, cancel_event)

        if final_state.get("error"):
            raise final_state["error"]

        return final_state["record"]


def build_pipeline_services(settings: Settings) -> PipelineServices:
    """
    Wire the real collaborators. Provider clients check their credentials
    here, so a misconfigured deployment fails at startup.
    """
    index = QdrantFormIndex.from_settings(settings)

    return PipelineServices(
        embedder=EmbeddingClient.from_settings(settings),
        index=index,
        assembler=ContextAssembler(
            max_matches=settings.RAG_TOP_K,
            max_chars_per_match=settings.RAG_MATCH_MAX_CHARS,
            max_total_chars=settings.RAG_CONTEXT_MAX_CHARS
        ),
        generator=SchemaGenerator(GeminiClient.from_settings(settings)),
        parser=SchemaParser(),
        store=FormStore(AsyncSessionLocal, index, timeout=settings.PERSISTENCE_TIMEOUT),
        top_k=settings.RAG_TOP_K,
        score_threshold=settings.RAG_SCORE_THRESHOLD,
        retrieval_timeout=settings.RETRIEVAL_TIMEOUT,
    )


# Singleton
_form_generator_agent: Optional[FormGeneratorAgent] = None


def get_form_generator_agent() -> FormGeneratorAgent:
    """Get or create form generator agent"""
    global _form_generator_agent
    if _form_generator_agent is None:
        _form_generator_agent = FormGeneratorAgent(build_pipeline_services(get_settings()))
    return _form_generator_agent


def get_form_store() -> FormStore:
    """Form store shared with the generator agent"""
    return get_form_generator_agent().services.store
