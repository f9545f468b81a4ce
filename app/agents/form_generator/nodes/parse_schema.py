import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, fail, get_services
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import SchemaValidationError

logger = logging.getLogger(__name__)


async def parse_schema_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    state = enter_stage(state, config, PipelineStage.PARSING)
    if state.get("error"):
        return state

    services = get_services(config)

    try:
        form_schema = services.parser.parse(state["raw_output"])
    except SchemaValidationError as e:
        logger.error(f"❌ Model output rejected: {e}")
        return fail(state, PipelineStage.PARSING, e)

    logger.info(f"JSON parsing successful ({len(form_schema.fields)} fields)")

    return {
        **state,
        "form_schema": form_schema
    }
