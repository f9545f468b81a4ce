import logging

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.base_node import enter_stage, fail, get_services
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import FormGenerationError

logger = logging.getLogger(__name__)


async def persist_form_node(state: GenerationState, config: RunnableConfig) -> GenerationState:
    """
    Hands the validated form to the store. The store bounds its own steps
    and undoes partial writes, so the save is not timed out from here.
    """
    state = enter_stage(state, config, PipelineStage.PERSISTING)
    if state.get("error"):
        return state

    services = get_services(config)
    form_schema = state["form_schema"]

    try:
        record = await services.store.save(
            owner_id=state["owner_id"],
            title=form_schema.title,
            content=form_schema,
            embedding=state["summary_embedding"]
        )
    except FormGenerationError as e:
        logger.error(f"❌ Saving the form failed: {e}")
        return fail(state, PipelineStage.PERSISTING, e)

    logger.info(f"📝 Form {record.id} persisted for owner {state['owner_id']}")

    return {
        **state,
        "record": record,
        "stage": PipelineStage.DONE
    }
