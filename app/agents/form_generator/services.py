from dataclasses import dataclass
from typing import Optional

from app.agents.form_generator.context import ContextAssembler
from app.agents.form_generator.schema_generator import SchemaGenerator
from app.agents.form_generator.schema_parser import SchemaParser
from app.core.embedding_client import EmbeddingClient
from app.core.form_store import FormStore
from app.core.qdrant_client import QdrantFormIndex


@dataclass
class PipelineServices:
    """Collaborators handed to every node through the run config"""

    embedder: EmbeddingClient
    index: QdrantFormIndex
    assembler: ContextAssembler
    generator: SchemaGenerator
    parser: SchemaParser
    store: FormStore

    top_k: int = 3
    score_threshold: Optional[float] = 0.5
    retrieval_timeout: float = 5.0
