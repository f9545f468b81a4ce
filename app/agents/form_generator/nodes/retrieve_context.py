import asyncio
import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, get_services
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import RetrievalDegraded

logger = logging.getLogger(__name__)


async def retrieve_context_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    """
    Looks up the owner's most similar past forms. Retrieval only enriches the
    prompt, so every failure here degrades to "no matches".
    """
    state = enter_stage(state, config, PipelineStage.RETRIEVING)
    if state.get("error"):
        return state

    services = get_services(config)

    try:
        matches = await asyncio.wait_for(
            services.index.query(
                vector=state["prompt_embedding"],
                owner_id=state["owner_id"],
                k=services.top_k,
                score_threshold=services.score_threshold
            ),
            timeout=services.retrieval_timeout
        )
    except asyncio.TimeoutError:
        degraded = RetrievalDegraded(f"Similarity search timed out after {services.retrieval_timeout}s")
    except RetrievalDegraded as e:
        degraded = e
    except Exception as e:
        degraded = RetrievalDegraded(f"Similarity search failed: {e!r}")
    else:
        if matches:
            logger.info(f"✅ Found {len(matches)} similar forms for context")
        else:
            logger.info("No similar forms found (score threshold not met)")
        return {
            **state,
            "matches": matches,
            "retrieval_error": None
        }

    logger.warning(f"⚠️ RAG retrieval degraded: {degraded.message}")
    logger.info("Continuing without RAG context")

    return {
        **state,
        "matches": [],
        "retrieval_error": degraded.message
    }
