import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, fail, get_services
from app.agents.form_generator.context import summarize_form
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import FormGenerationError

logger = logging.getLogger(__name__)


async def embed_summary_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    """
    Embeds the canonical summary of the validated form. Every stored form
    must carry an embedding, so this is fatal too.
    """
    state = enter_stage(state, config, PipelineStage.EMBEDDING_SUMMARY)
    if state.get("error"):
        return state

    services = get_services(config)

    try:
        embedding = await services.embedder.embed(summarize_form(state["form_schema"]))
    except FormGenerationError as e:
        logger.error(f"❌ Summary embedding failed: {e}")
        return fail(state, PipelineStage.EMBEDDING_SUMMARY, e)

    logger.info(f"✅ Summary embedding generated (dimension: {len(embedding)})")

    return {
        **state,
        "summary_embedding": embedding
    }
