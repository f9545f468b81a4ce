from enum import Enum
from typing import TypedDict, Optional, List

from app.core.exceptions import FormGenerationError
from app.schemas.form_schema import FormSchema
from app.schemas.forms import FormRecord, RetrievedMatch


class PipelineStage(str, Enum):
    EMBEDDING = "embedding"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    PARSING = "parsing"
    EMBEDDING_SUMMARY = "embedding_summary"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class GenerationState(TypedDict, total=False):
    # Input fields
    prompt: str
    owner_id: str

    # Progress
    stage: PipelineStage
    failed_stage: Optional[PipelineStage]

    # Processing fields
    prompt_embedding: Optional[List[float]]
    matches: List[RetrievedMatch]
    retrieval_error: Optional[str]
    context: str
    raw_output: Optional[str]
    form_schema: Optional[FormSchema]
    summary_embedding: Optional[List[float]]

    # Output
    record: Optional[FormRecord]
    error: Optional[FormGenerationError]
