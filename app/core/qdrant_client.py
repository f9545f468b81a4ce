from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    MatchValue,
    PayloadSchemaType,
    PointIdsList,
    PointStruct,
    VectorParams,
)
from app.core.exceptions import RetrievalDegraded
from app.core.settings import Settings
from app.schemas.forms import RetrievedMatch
from typing import List, Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class QdrantFormIndex:
    """Per-owner similarity index over generated forms, backed by Qdrant"""

    def __init__(
        self,
        client: AsyncQdrantClient,
        collection_name: str = "form_records",
        vector_size: int = 1536
    ):
        self.client = client
        self.collection_name = collection_name
        self.vector_size = vector_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "QdrantFormIndex":
        # Use cloud Qdrant with API key authentication
        client = AsyncQdrantClient(
            url=settings.QDRANT_URL,
            api_key=settings.QDRANT_API_KEY,
            timeout=settings.QDRANT_TIMEOUT
        )
        return cls(
            client=client,
            collection_name=settings.QDRANT_COLLECTION_NAME,
            vector_size=settings.EMBEDDING_DIMENSIONS
        )

    async def ensure_collection(self):
        """Create collection if it doesn't exist or recreate if dimensions mismatch"""
        if await self.client.collection_exists(self.collection_name):
            # Check if dimensions match
            collection_info = await self.client.get_collection(self.collection_name)
            existing_size = collection_info.config.params.vectors.size

            if existing_size == self.vector_size:
                logger.info(f"Collection {self.collection_name} already exists with correct dimensions")
                return

            logger.warning(
                f"⚠️ Collection '{self.collection_name}' has wrong dimensions "
                f"(expected {self.vector_size}, got {existing_size}). "
                f"Deleting and recreating..."
            )
            await self.client.delete_collection(self.collection_name)
            logger.info(f"🗑️ Deleted old collection '{self.collection_name}'")

        await self._create_collection()

    async def _create_collection(self):
        """Create the collection with proper vector configuration"""
        logger.info(f"Creating Qdrant collection: {self.collection_name} (dimension: {self.vector_size})")
        await self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(
                size=self.vector_size,
                distance=Distance.COSINE
            )
        )
        # Every query filters on owner_id
        await self.client.create_payload_index(
            collection_name=self.collection_name,
            field_name="owner_id",
            field_schema=PayloadSchemaType.KEYWORD
        )
        logger.info(f"✅ Collection {self.collection_name} created successfully")

    async def upsert(
        self,
        form_id: str,
        owner_id: str,
        vector: List[float],
        payload: Dict[str, Any]
    ) -> None:
        """
        Store a form's embedding in Qdrant

        Args:
            form_id: FormRecord id (used as point ID)
            owner_id: Owner of the form, stored for filtering
            vector: Summary embedding of the form
            payload: title, description and fields of the form
        """
        # Validate vector dimension
        if len(vector) != self.vector_size:
            raise ValueError(
                f"Vector dimension mismatch: expected {self.vector_size}, got {len(vector)}"
            )

        point = PointStruct(
            id=form_id,
            vector=vector,
            payload={
                **payload,
                "form_id": form_id,
                "owner_id": owner_id,
            }
        )

        await self.client.upsert(
            collection_name=self.collection_name,
            points=[point]
        )

        logger.info(f"✅ Stored embedding for form {form_id}")

    async def query(
        self,
        vector: List[float],
        owner_id: str,
        k: int = 3,
        score_threshold: Optional[float] = None
    ) -> List[RetrievedMatch]:
        """
        Retrieve the owner's forms closest to the query embedding

        Args:
            vector: Query embedding vector
            owner_id: Only this owner's forms are searched
            k: Maximum number of results
            score_threshold: Minimum similarity score (0-1)

        Returns:
            Matches ordered best similarity first

        Raises:
            RetrievalDegraded: on any index failure
        """
        if k < 1:
            raise ValueError("k must be a positive integer")

        try:
            search_result = await self.client.query_points(
                collection_name=self.collection_name,
                query=vector,
                query_filter=Filter(
                    must=[FieldCondition(key="owner_id", match=MatchValue(value=owner_id))]
                ),
                limit=k,
                score_threshold=score_threshold,
                with_payload=True
            )

            matches = [
                RetrievedMatch(
                    form_id=point.payload.get("form_id"),
                    title=point.payload.get("title", ""),
                    description=point.payload.get("description", ""),
                    fields=point.payload.get("fields", []),
                    similarity_score=point.score
                )
                for point in search_result.points
            ]
        except Exception as e:
            raise RetrievalDegraded(f"Similarity search failed: {e}") from e

        logger.info(f"✅ Retrieved {len(matches)} similar forms for owner {owner_id}")
        return matches

    async def delete(self, form_id: str) -> None:
        await self.client.delete(
            collection_name=self.collection_name,
            points_selector=PointIdsList(points=[form_id])
        )
        logger.info(f"✅ Deleted embedding for form {form_id}")
