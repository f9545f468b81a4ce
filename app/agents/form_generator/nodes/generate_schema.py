import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, fail, get_services
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import FormGenerationError

logger = logging.getLogger(__name__)


async def generate_schema_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    state = enter_stage(state, config, PipelineStage.GENERATING)
    if state.get("error"):
        return state

    services = get_services(config)
    context = services.assembler.build(state.get("matches") or [])

    try:
        raw_output = await services.generator.generate(state["prompt"], context)
    except FormGenerationError as e:
        logger.error(f"❌ LLM generation failed: {e}")
        return fail({**state, "context": context}, PipelineStage.GENERATING, e)

    return {
        **state,
        "context": context,
        "raw_output": raw_output
    }
