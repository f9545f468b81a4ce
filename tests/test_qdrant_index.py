"""Tests for the Qdrant-backed similarity index, using the in-process client."""

import uuid
from unittest.mock import patch

import pytest
import pytest_asyncio
from qdrant_client import AsyncQdrantClient

from app.core.exceptions import RetrievalDegraded
from app.core.qdrant_client import QdrantFormIndex
from app.core.settings import Settings

DIM = 4

FIELDS = [{"name": "email", "label": "Email", "type": "email", "required": True}]


def _payload(title: str) -> dict:
    return {"title": title, "description": f"{title} description", "fields": FIELDS}


@pytest_asyncio.fixture
async def index():
    client = AsyncQdrantClient(location=":memory:")
    index = QdrantFormIndex(client, collection_name="test_forms", vector_size=DIM)
    await index.ensure_collection()
    yield index
    await client.close()


@pytest.mark.asyncio
async def test_upsert_then_query_returns_match(index):
    form_id = str(uuid.uuid4())
    await index.upsert(form_id, "owner-a", [1.0, 0.0, 0.0, 0.0], _payload("Event Signup"))

    matches = await index.query([1.0, 0.0, 0.0, 0.0], "owner-a", k=3)

    assert len(matches) == 1
    assert matches[0].form_id == form_id
    assert matches[0].title == "Event Signup"
    assert matches[0].fields[0].name == "email"
    assert matches[0].similarity_score == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_results_ordered_and_capped(index):
    await index.upsert(str(uuid.uuid4()), "owner-a", [1.0, 0.0, 0.0, 0.0], _payload("Exact"))
    await index.upsert(str(uuid.uuid4()), "owner-a", [1.0, 1.0, 0.0, 0.0], _payload("Close"))
    await index.upsert(str(uuid.uuid4()), "owner-a", [1.0, 1.0, 1.0, 0.0], _payload("Further"))

    matches = await index.query([1.0, 0.0, 0.0, 0.0], "owner-a", k=2)

    assert [m.title for m in matches] == ["Exact", "Close"]
    assert matches[0].similarity_score >= matches[1].similarity_score


@pytest.mark.asyncio
async def test_other_owners_never_returned(index):
    await index.upsert(str(uuid.uuid4()), "owner-a", [1.0, 0.0, 0.0, 0.0], _payload("Mine"))
    await index.upsert(str(uuid.uuid4()), "owner-b", [1.0, 0.0, 0.0, 0.0], _payload("Theirs"))

    matches = await index.query([1.0, 0.0, 0.0, 0.0], "owner-a", k=3)

    assert [m.title for m in matches] == ["Mine"]


@pytest.mark.asyncio
async def test_score_threshold_filters_weak_matches(index):
    await index.upsert(str(uuid.uuid4()), "owner-a", [0.0, 1.0, 0.0, 0.0], _payload("Unrelated"))

    assert await index.query([1.0, 0.0, 0.0, 0.0], "owner-a", k=3, score_threshold=0.5) == []


@pytest.mark.asyncio
async def test_empty_index_returns_no_matches(index):
    assert await index.query([1.0, 0.0, 0.0, 0.0], "owner-a") == []


@pytest.mark.asyncio
async def test_upsert_rejects_wrong_dimension(index):
    with pytest.raises(ValueError):
        await index.upsert(str(uuid.uuid4()), "owner-a", [1.0, 0.0], _payload("Short"))


@pytest.mark.asyncio
async def test_query_rejects_non_positive_k(index):
    with pytest.raises(ValueError):
        await index.query([1.0, 0.0, 0.0, 0.0], "owner-a", k=0)


@pytest.mark.asyncio
async def test_delete_removes_point(index):
    form_id = str(uuid.uuid4())
    await index.upsert(form_id, "owner-a", [1.0, 0.0, 0.0, 0.0], _payload("Gone"))

    await index.delete(form_id)

    assert await index.query([1.0, 0.0, 0.0, 0.0], "owner-a") == []


@pytest.mark.asyncio
async def test_missing_collection_degrades():
    client = AsyncQdrantClient(location=":memory:")
    index = QdrantFormIndex(client, collection_name="never_created", vector_size=DIM)

    with pytest.raises(RetrievalDegraded):
        await index.query([1.0, 0.0, 0.0, 0.0], "owner-a")

    await client.close()


@pytest.mark.asyncio
async def test_ensure_collection_recreates_on_dimension_change():
    client = AsyncQdrantClient(location=":memory:")
    old = QdrantFormIndex(client, collection_name="forms", vector_size=DIM)
    await old.ensure_collection()
    await old.upsert(str(uuid.uuid4()), "owner-a", [1.0, 0.0, 0.0, 0.0], _payload("Old"))

    new = QdrantFormIndex(client, collection_name="forms", vector_size=DIM + 2)
    await new.ensure_collection()

    info = await client.get_collection("forms")
    assert info.config.params.vectors.size == DIM + 2
    assert await new.query([1.0] + [0.0] * (DIM + 1), "owner-a") == []

    await client.close()


def test_client_timeout_is_independent_of_retrieval_timeout():
    settings = Settings(
        QDRANT_URL="http://qdrant.internal:6333",
        QDRANT_TIMEOUT=7,
        RETRIEVAL_TIMEOUT=0.5,
        EMBEDDING_DIMENSIONS=DIM,
    )

    with patch("app.core.qdrant_client.AsyncQdrantClient") as client_cls:
        index = QdrantFormIndex.from_settings(settings)

    assert client_cls.call_args.kwargs["timeout"] == 7
    assert index.vector_size == DIM
