"""Tests for the knowledge search tool."""

from datetime import UTC, datetime
from typing import List
from uuid import uuid4

import pytest

from knowledge_base.infrastructure.extraction import FileKind
from knowledge_base.modules.chunk.schemas import ChunkRead
from knowledge_base.modules.document.schemas import DocumentRead
from knowledge_base.modules.knowledge.schemas import SearchResult
from knowledge_base.modules.knowledge.search_tool import SearchKnowledgeTool

OWNER = "user-1"


def make_result(title: str, content: str, similarity: float, chunk_index: int = 0) -> SearchResult:
    now = datetime.now(UTC)
    document_id = uuid4()
    return SearchResult(
        chunk=ChunkRead(
            id=uuid4(),
            document_id=document_id,
            content=content,
            embedding=[1.0, 0.0],
            chunk_index=chunk_index,
            created_at=now,
        ),
        document=DocumentRead(
            id=document_id,
            owner_id=OWNER,
            title=title,
            filename=f"{title}.txt",
            file_kind=FileKind.TXT,
            created_at=now,
        ),
        similarity=similarity,
    )


class StubKnowledgeService:
    """Returns canned results and records how it was called."""

    def __init__(self, results: List[SearchResult] = None, error: Exception = None):
        self.results = results or []
        self.error = error
        self.calls = []

    async def search(self, query, owner_id, db, limit=None, similarity_threshold=None):
        self.calls.append({"query": query, "owner_id": owner_id, "limit": limit, "threshold": similarity_threshold})
        if self.error:
            raise self.error
        return self.results


@pytest.mark.asyncio
async def test_requires_owner():
    service = StubKnowledgeService()
    tool = SearchKnowledgeTool(service)

    response = await tool.execute("refund policy", None, db=None)

    assert response.success is False
    assert response.message == "Authentication required"
    assert service.calls == []


@pytest.mark.asyncio
async def test_no_results():
    tool = SearchKnowledgeTool(StubKnowledgeService())

    response = await tool.execute("refund policy", OWNER, db=None)

    assert response.success is False
    assert response.message == "No relevant information found in uploaded documents."
    assert response.results == []
    assert response.content is None


@pytest.mark.asyncio
async def test_defaults_passed_to_service():
    service = StubKnowledgeService()

    await SearchKnowledgeTool(service).execute("exam", OWNER, db=None)
    await SearchKnowledgeTool(service, similarity_threshold=0.5).execute("exam", OWNER, db=None, limit=3)

    assert service.calls[0] == {"query": "exam", "owner_id": OWNER, "limit": 10, "threshold": 0.2}
    assert service.calls[1]["limit"] == 3
    assert service.calls[1]["threshold"] == 0.5


@pytest.mark.asyncio
async def test_packages_results():
    results = [
        make_result("Handbook", "Refunds take 14 days.", 0.875),
        make_result("FAQ", "Ask billing about refunds.", 0.5),
        make_result("Handbook", "Refunds need a receipt.", 0.3, chunk_index=4),
    ]
    tool = SearchKnowledgeTool(StubKnowledgeService(results))

    response = await tool.execute("refund", OWNER, db=None)

    assert response.success is True
    assert response.message == "Found detailed information from 2 document(s)"
    assert response.sources == ["Handbook", "FAQ"]
    assert response.total_chunks == 3
    assert response.content == "Refunds take 14 days.\n\nAsk billing about refunds.\n\nRefunds need a receipt."
    assert [hit.rank for hit in response.results] == [1, 2, 3]
    assert [hit.similarity for hit in response.results] == [88, 50, 30]
    assert response.results[0].source == "Handbook"
    assert response.results[0].filename == "Handbook.txt"
    assert response.error is None


@pytest.mark.asyncio
async def test_errors_are_reported_not_raised():
    tool = SearchKnowledgeTool(StubKnowledgeService(error=RuntimeError("database is locked")))

    response = await tool.execute("refund", OWNER, db=None)

    assert response.success is False
    assert response.message == "Error searching documents"
    assert response.error == "database is locked"


@pytest.mark.asyncio
async def test_against_stored_documents(knowledge_service, db_session):
    await knowledge_service.add_document(b"refund refund payment", "refunds.txt", FileKind.TXT, "Refunds", OWNER, db_session)
    await knowledge_service.add_document(b"campus exam", "campus.txt", FileKind.TXT, "Campus", OWNER, db_session)
    tool = SearchKnowledgeTool(knowledge_service)

    response = await tool.execute("refund", OWNER, db_session)
    foreign = await tool.execute("refund", "user-2", db_session)

    assert response.success is True
    assert response.sources == ["Refunds"]
    assert response.results[0].similarity == 89
    assert foreign.success is False
    assert foreign.message == "No relevant information found in uploaded documents."
