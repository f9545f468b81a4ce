import asyncio
import logging
from typing import Optional

from langchain_core.runnables import RunnableConfig

from app.agents.form_generator.services import PipelineServices
from app.agents.form_generator.state import GenerationState, PipelineStage
from app.core.exceptions import FormGenerationError, GenerationCancelled

logger = logging.getLogger(__name__)


def get_services(config: RunnableConfig) -> PipelineServices:
    return config["configurable"]["services"]


def cancellation_requested(config: RunnableConfig) -> bool:
    event: Optional[asyncio.Event] = config["configurable"].get("cancel_event")
    return event is not None and event.is_set()


def enter_stage(state: GenerationState, config: RunnableConfig, stage: PipelineStage) -> GenerationState:
    """
    Checkpoint at the start of every node. Returns a failed state if the
    caller abandoned the request, otherwise the state marked with ``stage``.
    """
    if cancellation_requested(config):
        logger.warning(f"Generation cancelled before {stage.value}")
        return fail(state, stage, GenerationCancelled(f"Generation cancelled before {stage.value}"))

    return {**state, "stage": stage}


def fail(state: GenerationState, stage: PipelineStage, error: FormGenerationError) -> GenerationState:
    return {
        **state,
        "stage": PipelineStage.FAILED,
        "failed_stage": stage,
        "error": error,
    }
