import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, fail, get_services
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import FormGenerationError

logger = logging.getLogger(__name__)


async def embed_prompt_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    """
    Embeds the user prompt. Fatal on failure: without embeddings there is no
    retrieval now and no way to index the generated form later.
    """
    state = enter_stage(state, config, PipelineStage.EMBEDDING)
    if state.get("error"):
        return state

    services = get_services(config)

    try:
        embedding = await services.embedder.embed(state["prompt"])
    except FormGenerationError as e:
        logger.error(f"❌ Prompt embedding failed: {e}")
        return fail(state, PipelineStage.EMBEDDING, e)

    logger.info(f"Successfully embedded user prompt (dimension: {len(embedding)})")

    return {
        **state,
        "prompt_embedding": embedding
    }
